"""Role and role-permission SQL."""

ROLE_COLUMNS = """
    id, tenant_id, name, slug, description, hierarchy_level,
    is_system, is_protected, created_by, created_at, updated_at
"""

GET_ROLE_BY_ID = f"""
    SELECT {ROLE_COLUMNS}
    FROM roles
    WHERE id = $1 AND tenant_id = $2
"""

GET_ROLE_BY_SLUG = f"""
    SELECT {ROLE_COLUMNS}
    FROM roles
    WHERE slug = $1 AND tenant_id = $2
"""

LIST_ROLES_BY_TENANT = f"""
    SELECT {ROLE_COLUMNS}
    FROM roles
    WHERE tenant_id = $1
    ORDER BY hierarchy_level, name
"""

GET_PERMISSION_KEYS_FOR_ROLES = """
    SELECT rp.role_id, p.key
    FROM role_permissions rp
    JOIN permissions p ON p.id = rp.permission_id
    WHERE rp.role_id = ANY($1::uuid[]) AND rp.tenant_id = $2
"""

INSERT_ROLE = f"""
    INSERT INTO roles (
        tenant_id, name, slug, description, hierarchy_level,
        is_system, is_protected, created_by
    )
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
    RETURNING {ROLE_COLUMNS}
"""

UPDATE_ROLE = f"""
    UPDATE roles
    SET name = $3, slug = $4, description = $5, hierarchy_level = $6, updated_at = NOW()
    WHERE id = $1 AND tenant_id = $2
    RETURNING {ROLE_COLUMNS}
"""

INSERT_ROLE_PERMISSIONS = """
    INSERT INTO role_permissions (role_id, permission_id, tenant_id, granted_by)
    SELECT $1, p.id, $2, $3
    FROM permissions p
    WHERE p.key = ANY($4::text[])
"""

DELETE_ROLE_PERMISSIONS = """
    DELETE FROM role_permissions
    WHERE role_id = $1 AND tenant_id = $2
"""

REVOKE_ROLE_ASSIGNMENTS = """
    UPDATE secondary_role_assignments
    SET status = 'revoked', revoked_by = $3, revoked_at = $4, updated_at = NOW()
    WHERE role_id = $1 AND tenant_id = $2 AND status = 'active'
    RETURNING user_id
"""

# Blocks concurrent primary assignments of the role until the delete commits
LOCK_ROLE_FOR_DELETE = """
    SELECT id
    FROM roles
    WHERE id = $1 AND tenant_id = $2
    FOR UPDATE
"""

COUNT_ROLE_PRIMARY_HOLDERS = """
    SELECT COUNT(*)
    FROM tenant_members
    WHERE primary_role_id = $1 AND tenant_id = $2 AND status = 'active'
"""

DELETE_ROLE = """
    DELETE FROM roles
    WHERE id = $1 AND tenant_id = $2
"""

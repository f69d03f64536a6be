"""Membership and secondary assignment SQL."""

MEMBERSHIP_COLUMNS = "id, tenant_id, user_id, primary_role_id, is_owner, status, joined_at"

GET_ACTIVE_MEMBERSHIP = f"""
    SELECT {MEMBERSHIP_COLUMNS}
    FROM tenant_members
    WHERE user_id = $1 AND tenant_id = $2 AND status = 'active'
"""

UPSERT_MEMBERSHIP = f"""
    INSERT INTO tenant_members (tenant_id, user_id, primary_role_id, is_owner, status, joined_at)
    VALUES ($1, $2, $3, $4, $5, NOW())
    ON CONFLICT (tenant_id, user_id) DO UPDATE
    SET primary_role_id = EXCLUDED.primary_role_id,
        is_owner = EXCLUDED.is_owner,
        status = EXCLUDED.status,
        updated_at = NOW()
    RETURNING {MEMBERSHIP_COLUMNS}
"""

# Blocks a concurrent delete of the role until the assignment commits
LOCK_ROLE_FOR_ASSIGNMENT = """
    SELECT id
    FROM roles
    WHERE id = $1 AND tenant_id = $2
    FOR SHARE
"""

# Serializes owner demotions within a tenant
LOCK_ACTIVE_OWNERS = """
    SELECT user_id
    FROM tenant_members
    WHERE tenant_id = $1 AND is_owner = true AND status = 'active'
    FOR UPDATE
"""

UPDATE_PRIMARY_ROLE = """
    UPDATE tenant_members
    SET primary_role_id = $3, is_owner = $4, updated_at = NOW()
    WHERE user_id = $1 AND tenant_id = $2 AND status = 'active'
    RETURNING id
"""

COUNT_ACTIVE_OWNERS = """
    SELECT COUNT(*)
    FROM tenant_members
    WHERE tenant_id = $1 AND is_owner = true AND status = 'active'
"""

LIST_PRIMARY_HOLDERS = """
    SELECT user_id
    FROM tenant_members
    WHERE primary_role_id = $1 AND tenant_id = $2 AND status = 'active'
"""

ASSIGNMENT_COLUMNS = """
    id, tenant_id, user_id, role_id, status, expires_at, reason,
    assigned_by, revoked_by, revoked_at, created_at
"""

LIST_USER_ASSIGNMENTS = f"""
    SELECT {ASSIGNMENT_COLUMNS}
    FROM secondary_role_assignments
    WHERE user_id = $1 AND tenant_id = $2
    ORDER BY created_at
"""

GET_ASSIGNMENT = f"""
    SELECT {ASSIGNMENT_COLUMNS}
    FROM secondary_role_assignments
    WHERE user_id = $1 AND tenant_id = $2 AND role_id = $3
"""

INSERT_ASSIGNMENT = f"""
    INSERT INTO secondary_role_assignments (
        tenant_id, user_id, role_id, status, expires_at, reason, assigned_by
    )
    VALUES ($1, $2, $3, 'active', $4, $5, $6)
    RETURNING {ASSIGNMENT_COLUMNS}
"""

REACTIVATE_ASSIGNMENT = f"""
    UPDATE secondary_role_assignments
    SET status = 'active', assigned_by = $2, expires_at = $3, reason = $4,
        revoked_by = NULL, revoked_at = NULL, updated_at = NOW()
    WHERE id = $1
    RETURNING {ASSIGNMENT_COLUMNS}
"""

REVOKE_ASSIGNMENT = """
    UPDATE secondary_role_assignments
    SET status = 'revoked', revoked_by = $2, revoked_at = $3, updated_at = NOW()
    WHERE id = $1 AND status = 'active'
"""

LIST_ACTIVE_ROLE_HOLDERS = """
    SELECT DISTINCT user_id
    FROM secondary_role_assignments
    WHERE role_id = $1 AND tenant_id = $2 AND status = 'active'
"""

MARK_EXPIRED_ASSIGNMENTS = """
    UPDATE secondary_role_assignments
    SET status = 'expired', updated_at = NOW()
    WHERE status = 'active' AND expires_at IS NOT NULL AND expires_at <= $1
    RETURNING user_id, tenant_id
"""

"""Group membership SQL. Every statement is scoped to the tenant."""

GROUP_MEMBER_COLUMNS = "id, group_id, tenant_id, user_id, role, status, added_by, created_at"

GROUP_EXISTS_IN_TENANT = """
    SELECT EXISTS (
        SELECT 1
        FROM groups
        WHERE id = $1 AND tenant_id = $2 AND status = 'active'
    )
"""

GET_GROUP_MEMBER = f"""
    SELECT {GROUP_MEMBER_COLUMNS}
    FROM group_members
    WHERE group_id = $1 AND tenant_id = $2 AND user_id = $3
"""

LIST_GROUP_MEMBERS = f"""
    SELECT {GROUP_MEMBER_COLUMNS}
    FROM group_members
    WHERE group_id = $1 AND tenant_id = $2 AND status = 'active'
    ORDER BY created_at
"""

# Serializes demotions and removals of a group's owners and admins
LOCK_ELEVATED_MEMBERS = """
    SELECT user_id
    FROM group_members
    WHERE group_id = $1 AND tenant_id = $2 AND status = 'active' AND role IN ('owner', 'admin')
    FOR UPDATE
"""

INSERT_GROUP_MEMBER = f"""
    INSERT INTO group_members (group_id, tenant_id, user_id, role, status, added_by)
    VALUES ($1, $2, $3, $4, 'active', $5)
    RETURNING {GROUP_MEMBER_COLUMNS}
"""

REACTIVATE_GROUP_MEMBER = f"""
    UPDATE group_members
    SET status = 'active', role = $2, added_by = $3,
        removed_by = NULL, removed_at = NULL, updated_at = NOW()
    WHERE id = $1
    RETURNING {GROUP_MEMBER_COLUMNS}
"""

UPDATE_GROUP_MEMBER_ROLE = """
    UPDATE group_members
    SET role = $4, updated_at = NOW()
    WHERE group_id = $1 AND tenant_id = $2 AND user_id = $3 AND status = 'active'
    RETURNING id
"""

REMOVE_GROUP_MEMBER = """
    UPDATE group_members
    SET status = 'removed', removed_by = $4, removed_at = NOW(), updated_at = NOW()
    WHERE group_id = $1 AND tenant_id = $2 AND user_id = $3 AND status = 'active'
    RETURNING id
"""

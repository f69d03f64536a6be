"""Permission catalog SQL."""

COUNT_PERMISSIONS = "SELECT COUNT(*) FROM permissions"

INSERT_PERMISSION = """
    INSERT INTO permissions (key, name, description, category, requires_mfa, is_critical)
    VALUES ($1, $2, $3, $4, $5, $6)
    ON CONFLICT (key) DO NOTHING
"""

LIST_PERMISSIONS = """
    SELECT key, name, description, category, requires_mfa, is_critical
    FROM permissions
    ORDER BY category, key
"""

"""Framework integrations for neo-rbac."""

"""Version information for neo-rbac."""

__version__ = "0.3.0"

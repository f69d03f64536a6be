"""Utility helpers for neo-rbac."""

from .datetime import utc_now, ensure_utc
from .records import str_or_none

__all__ = ["utc_now", "ensure_utc", "str_or_none"]

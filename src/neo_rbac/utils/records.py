"""Helpers for turning asyncpg records into entity fields."""

from typing import Any, Optional


def str_or_none(value: Any) -> Optional[str]:
    """Render UUID columns as strings, keeping NULL as None."""
    return None if value is None else str(value)

"""Cache feature: backend protocol, Redis and in-memory adapters, decision cache."""

from .entities import CacheBackend
from .adapters import RedisCacheAdapter, MemoryCacheAdapter
from .services import PermissionCache

__all__ = ["CacheBackend", "RedisCacheAdapter", "MemoryCacheAdapter", "PermissionCache"]

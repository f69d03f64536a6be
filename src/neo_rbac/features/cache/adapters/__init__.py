from .redis_adapter import RedisCacheAdapter
from .memory_adapter import MemoryCacheAdapter

__all__ = ["RedisCacheAdapter", "MemoryCacheAdapter"]

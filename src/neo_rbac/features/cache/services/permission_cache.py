"""Decision cache for resolved permission sets.

Entries are keyed by ``{prefix}:{user_id}:{tenant_id}`` and hold a JSON list
of sorted permission keys. The cache is a safety net, never a source of
truth: read and write failures degrade to a miss, and invalidation failures
are logged while the TTL bounds staleness.
"""

import json
import logging
from typing import FrozenSet, Iterable, Optional, Tuple

from ....config.constants import CacheKeys, CacheTTL
from ....core.exceptions import CacheUnavailableError
from ..entities import CacheBackend

logger = logging.getLogger(__name__)


class PermissionCache:
    """Write-through cache of (user, tenant) permission sets."""

    def __init__(self, backend: CacheBackend, key_prefix: str = "rbac", ttl: int = CacheTTL.PERMISSIONS):
        self.backend = backend
        self.key_prefix = key_prefix
        self.ttl = ttl

    def key_for(self, user_id: str, tenant_id: str) -> str:
        return CacheKeys.USER_PERMISSIONS.format(
            prefix=self.key_prefix, user_id=user_id, tenant_id=tenant_id
        )

    async def get(self, user_id: str, tenant_id: str) -> Optional[FrozenSet[str]]:
        """Return the cached set, or None on miss, corrupt entry or cache outage."""
        key = self.key_for(user_id, tenant_id)
        try:
            raw = await self.backend.get(key)
        except CacheUnavailableError as e:
            logger.warning(f"Permission cache read failed for {key}, resolving directly: {e}")
            return None
        if raw is None:
            return None
        try:
            return frozenset(json.loads(raw))
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding corrupt permission cache entry {key}: {e}")
            return None

    async def set(self, user_id: str, tenant_id: str, keys: Iterable[str]) -> None:
        key = self.key_for(user_id, tenant_id)
        try:
            await self.backend.set(key, json.dumps(sorted(keys)), self.ttl)
        except CacheUnavailableError as e:
            logger.warning(f"Permission cache write failed for {key}: {e}")

    async def invalidate(self, user_id: str, tenant_id: str) -> None:
        await self.invalidate_many([(user_id, tenant_id)])

    async def invalidate_many(self, pairs: Iterable[Tuple[str, str]]) -> int:
        """Delete the exact keys for the given pairs; return the key count."""
        keys = sorted({self.key_for(user_id, tenant_id) for user_id, tenant_id in pairs})
        if not keys:
            return 0
        try:
            await self.backend.delete(*keys)
        except CacheUnavailableError as e:
            logger.error(
                f"Permission cache invalidation failed for {len(keys)} key(s); "
                f"entries expire within {self.ttl}s: {e}"
            )
            return 0
        logger.debug(f"Invalidated {len(keys)} permission cache key(s)")
        return len(keys)

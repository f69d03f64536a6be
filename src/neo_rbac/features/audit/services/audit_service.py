"""Fire-and-forget audit recording.

Audit writes never block or fail the authorization operation that triggered
them. By default each write runs as a tracked background task bounded by a
timeout; any failure is logged and swallowed. ``flush`` waits for the writes
still in flight, which ``AuthorizationService.close`` does before shutdown.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from ....config.constants import AuditAction
from ..entities import AuditEvent, AuditSink

logger = logging.getLogger(__name__)


class AuditService:
    """Records audit events to a sink without surfacing sink failures."""

    def __init__(
        self,
        sink: Optional[AuditSink] = None,
        enabled: bool = True,
        timeout: float = 2.0,
        background: bool = True
    ):
        self.sink = sink
        self.enabled = enabled and sink is not None
        self.timeout = timeout
        self.background = background
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of background writes still in flight."""
        return len(self._pending)

    async def record(
        self,
        action: AuditAction,
        actor_id: Optional[str],
        tenant_id: str,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Build an event and hand it to the sink, swallowing any sink error."""
        if not self.enabled:
            return

        event = AuditEvent(
            action=action,
            actor_id=actor_id,
            tenant_id=tenant_id,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details or {},
        )
        if not self.background:
            await self._write(event)
            return

        task = asyncio.create_task(self._write(event))
        self._pending.add(task)
        task.add_done_callback(self._on_write_done)

    async def flush(self) -> None:
        """Wait for every background write started so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_write_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            logger.warning("Audit write cancelled before completion")
        elif task.exception() is not None:
            logger.error(f"Audit write task failed: {task.exception()}")

    async def _write(self, event: AuditEvent) -> None:
        action, resource_type, resource_id = event.action.value, event.resource_type, event.resource_id
        try:
            await asyncio.wait_for(self.sink.write(event), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"Audit write timed out after {self.timeout}s: {action} on {resource_type} {resource_id}")
        except Exception as e:
            logger.error(f"Audit write failed for {action} on {resource_type} {resource_id}: {e}")

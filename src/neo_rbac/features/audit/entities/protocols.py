"""Protocol interfaces for the audit feature."""

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from .audit_event import AuditEvent


@runtime_checkable
class AuditSink(Protocol):
    """Destination for audit events (database table, log stream, ...)."""

    @abstractmethod
    async def write(self, event: AuditEvent) -> None:
        """Persist one event. May raise; callers swallow failures."""
        ...

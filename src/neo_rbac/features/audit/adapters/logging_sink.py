"""Audit sink that writes events to a dedicated logger."""

import json
import logging

from ..entities import AuditEvent

audit_logger = logging.getLogger("neo_rbac.audit")


class LoggingAuditSink:
    """Emit each event as a single JSON log line at INFO level."""

    def __init__(self, logger: logging.Logger = audit_logger):
        self._logger = logger

    async def write(self, event: AuditEvent) -> None:
        self._logger.info(json.dumps(event.to_dict(), default=str, sort_keys=True))

"""Audit feature: events, sinks and the fire-and-forget audit service."""

from .entities import AuditEvent, AuditSink
from .adapters import LoggingAuditSink, AsyncPGAuditSink
from .services import AuditService

__all__ = ["AuditEvent", "AuditSink", "LoggingAuditSink", "AsyncPGAuditSink", "AuditService"]

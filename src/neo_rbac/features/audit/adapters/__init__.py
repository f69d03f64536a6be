from .logging_sink import LoggingAuditSink
from .asyncpg_sink import AsyncPGAuditSink

__all__ = ["LoggingAuditSink", "AsyncPGAuditSink"]

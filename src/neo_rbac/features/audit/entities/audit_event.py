"""Audit event entity. Maps to the ``audit_logs`` table."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....config.constants import AuditAction
from ....utils.datetime import utc_now


@dataclass(frozen=True)
class AuditEvent:
    """Structured record of an authorization mutation."""

    action: AuditAction
    actor_id: Optional[str]
    tenant_id: str
    resource_type: str
    resource_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    status: str = "success"
    occurred_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "actor_id": self.actor_id,
            "tenant_id": self.tenant_id,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "details": self.details,
            "status": self.status,
            "occurred_at": self.occurred_at.isoformat(),
        }

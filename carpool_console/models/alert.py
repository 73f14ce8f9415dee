from datetime import datetime
from enum import Enum as PyEnum
from typing import Any
from pydantic import Field

from carpool_console.models.base import ApiModel


class AlertSeverity(str, PyEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertStatus(str, PyEnum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    SUPPRESSED = "suppressed"


class AlertItem(ApiModel):
    """One alert event raised by the platform's rule engine."""

    id: str
    rule_id: str
    rule_name: str
    severity: AlertSeverity
    status: AlertStatus = AlertStatus.ACTIVE
    entity_type: str
    entity_id: str
    entity_name: str | None = None
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    triggered_at: datetime | None = None
    resolved_at: datetime | None = None


class AlertSummary(ApiModel):
    total: int = 0
    active: int = 0
    resolved: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    recent_alerts: list[AlertItem] = Field(default_factory=list)

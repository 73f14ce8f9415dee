from datetime import datetime
from enum import Enum as PyEnum
from pydantic import ConfigDict, Field, computed_field

from carpool_console.models.base import ApiModel


class HealthBadge(str, PyEnum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNHEALTHY = "unhealthy"


class HealthDetails(ApiModel):
    endpoint: str = ""
    status_code: int | None = None
    error_message: str | None = None
    successful_requests: int = 0
    total_requests: int = 0


class ModelHealth(ApiModel):
    """Latest health check result for one model of a group."""

    model_config = ConfigDict(protected_namespaces=())

    model_id: str
    is_healthy: bool
    response_time: float = 0
    error_rate: float = 0
    last_checked: datetime | None = None
    score: float = 0
    details: HealthDetails | None = None

    @computed_field
    @property
    def badge(self) -> HealthBadge:
        if not self.is_healthy:
            return HealthBadge.UNHEALTHY
        if self.score >= 80:
            return HealthBadge.GOOD
        if self.score >= 60:
            return HealthBadge.FAIR
        return HealthBadge.POOR


class FailoverEvent(ApiModel):
    id: str
    from_model: str
    to_model: str
    reason: str
    success: bool
    error_msg: str | None = None
    response_time: float | None = None
    timestamp: datetime | None = None


class ModelStatus(ApiModel):
    active_model: str = ""
    available_models: list[str] = Field(default_factory=list)
    failover_history: list[FailoverEvent] = Field(default_factory=list)

from datetime import datetime
from enum import Enum as PyEnum
from pydantic import Field

from carpool_console.models.base import ApiModel


class BudgetStatus(str, PyEnum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"
    EXCEEDED = "exceeded"


class AlertLevel(str, PyEnum):
    WARNING = "warning"
    CRITICAL = "critical"
    EXCEEDED = "exceeded"


class CostPoint(ApiModel):
    date: str
    cost: float = 0
    tokens: int = 0
    requests: int = 0


class CostSummary(ApiModel):
    """Aggregated spend for a time range (computed by the platform)."""

    total_cost: float = 0
    total_tokens: int = 0
    total_requests: int = 0
    cost_by_model: dict[str, float] = Field(default_factory=dict)
    cost_by_department: dict[str, float] = Field(default_factory=dict)
    cost_by_time_range: list[CostPoint] = Field(default_factory=list)


class BudgetUsage(ApiModel):
    budget_limit: float = 0
    current_spend: float = 0
    remaining_budget: float = 0
    percentage: float = 0
    is_over_budget: bool = False
    projected_spend: float = 0


class CostReport(ApiModel):
    """Payload of the costs endpoint."""

    cost_summary: CostSummary | None = None
    budget_usage: BudgetUsage | None = None


class BudgetAlert(ApiModel):
    id: str
    type: str = "enterprise"
    entity_id: str
    entity_name: str = ""
    budget_limit: float = 0
    current_spend: float = 0
    percentage: float = 0
    alert_type: AlertLevel = AlertLevel.WARNING
    period: str = "monthly"
    triggered_at: datetime | None = None

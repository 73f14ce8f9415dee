from pydantic import Field

from carpool_console.models.base import ApiModel
from carpool_console.models.budget import BudgetAlert, BudgetStatus, BudgetUsage, CostSummary
from carpool_console.schemas.common_schemas import PageAction


class BudgetAllocation(ApiModel):
    """Set budget (ADMIN or OWNER)"""

    entity_type: str = "enterprise"
    entity_id: str | None = None
    budget_amount: float = Field(..., gt=0)
    budget_period: str = "monthly"


class DepartmentCostShare(ApiModel):
    name: str
    cost: float
    share: float


class BudgetPage(ApiModel):
    time_range: str
    cost_summary: CostSummary | None = None
    budget_usage: BudgetUsage | None = None
    status: BudgetStatus = BudgetStatus.NORMAL
    department_ranking: list[DepartmentCostShare] = Field(default_factory=list)
    alerts: list[BudgetAlert] = Field(default_factory=list)
    actions: list[PageAction] = Field(default_factory=list)

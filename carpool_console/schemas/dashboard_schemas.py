from pydantic import Field

from carpool_console.models.base import ApiModel
from carpool_console.models.enterprise import Enterprise
from carpool_console.models.role import EnterpriseRole
from carpool_console.schemas.common_schemas import PageAction


class DashboardOverview(ApiModel):
    """Summary counts for the enterprise landing page"""

    enterprise: Enterprise
    role: EnterpriseRole
    department_count: int = 0
    group_count: int = 0
    pool_count: int = 0
    active_pool_count: int = 0
    account_count: int = 0
    actions: list[PageAction] = Field(default_factory=list)

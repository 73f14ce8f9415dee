from fastapi import APIRouter, Depends, Query

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.budget_schemas import BudgetAllocation, BudgetPage
from carpool_console.services.budget_service import BudgetManager

router = APIRouter()


@router.get("/{enterprise_id}/budget", response_model=BudgetPage)
async def get_budget(
    time_range: str | None = Query(None, alias="timeRange"),
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Costs, budget usage, status and budget alerts.

    `timeRange` is passed to the platform as is (e.g. `7d`, `30d`, `90d`);
    the default is `30d`.
    """
    manager = BudgetManager(client, context)
    return await manager.load(time_range)


@router.put("/{enterprise_id}/budget", response_model=BudgetPage)
async def set_budget(
    allocation: BudgetAllocation,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Set the budget allocation.

    - **Requires ADMIN or OWNER permissions**
    - Defaults: entity type `enterprise`, period `monthly`
    """
    manager = BudgetManager(client, context)
    return await manager.set_budget(allocation)

from fastapi import APIRouter, Depends

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context, get_enterprise_service
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.dashboard_schemas import DashboardOverview
from carpool_console.schemas.enterprise_schemas import (
    EnterpriseContextResponse,
    SwitcherListing,
    SwitchRequest,
    SwitchResponse,
)
from carpool_console.services.dashboard_service import DashboardComposer
from carpool_console.services.enterprise_service import EnterpriseService
from carpool_console.services.enterprise_switcher import EnterpriseSwitcher
from carpool_console.services.page_actions import actions_for

router = APIRouter()


def context_response(context: EnterpriseContext) -> EnterpriseContextResponse:
    return EnterpriseContextResponse(
        enterprise=context.enterprise,
        role=context.role,
        permissions=context.permissions,
        actions=actions_for(
            context, "view_analytics", "create_department", "invite_member", "set_budget"
        ),
    )


@router.get("", response_model=SwitcherListing)
async def list_enterprises(
    search: str | None = None,
    current: str | None = None,
    enterprise_service: EnterpriseService = Depends(get_enterprise_service),
):
    """
    List the enterprises the authenticated user belongs to.

    The three most recently accessed come first under `recent`; the rest
    follow under `other`. `search` filters by name (case-insensitive) and
    `current` marks the enterprise the UI currently shows.
    """
    switcher = EnterpriseSwitcher(enterprise_service, current_enterprise_id=current)
    return await switcher.open(search)


@router.post("/switch", response_model=SwitchResponse)
async def switch_enterprise(
    switch_request: SwitchRequest,
    enterprise_service: EnterpriseService = Depends(get_enterprise_service),
):
    """
    Switch to another enterprise.

    - Records the access on the platform, then loads the target
    - Switching to `currentEnterpriseId` is a no-op (`switched: false`)
    """
    switcher = EnterpriseSwitcher(
        enterprise_service, current_enterprise_id=switch_request.current_enterprise_id
    )
    context = await switcher.select(switch_request.enterprise_id)
    return SwitchResponse(
        switched=context is not None,
        enterprise_id=switch_request.enterprise_id,
        context=context_response(context) if context else None,
    )


@router.get("/{enterprise_id}/context", response_model=EnterpriseContextResponse)
async def get_context(context: EnterpriseContext = Depends(get_enterprise_context)):
    """Current enterprise with the caller's role, permissions and available actions."""
    return context_response(context)


@router.get("/{enterprise_id}/dashboard", response_model=DashboardOverview)
async def get_dashboard(
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Enterprise overview: department, group, pool and account counts."""
    return await DashboardComposer(client, context).compose()

from contextlib import aclosing
from typing import Callable

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.security import TokenStore
from carpool_console.dependencies import (
    get_api_client,
    get_client_factory,
    get_enterprise_context,
    get_token_store,
)
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.monitoring_schemas import AlertPage, ModelPage, ModelSwitchRequest
from carpool_console.services.monitoring_service import AlertMonitor, ModelHealthMonitor

router = APIRouter()


@router.get("/{enterprise_id}/alerts", response_model=AlertPage)
async def get_alerts(
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Alert counts by status and severity, with the most recent alerts."""
    monitor = AlertMonitor(client, context)
    await monitor.fetch()
    return monitor.page()


@router.get("/{enterprise_id}/alerts/stream")
async def stream_alerts(
    limit: int | None = Query(None, ge=1, description="Close the stream after this many events"),
    context: EnterpriseContext = Depends(get_enterprise_context),
    token_store: TokenStore = Depends(get_token_store),
    client_factory: Callable[[TokenStore], PlatformApiClient] = Depends(get_client_factory),
):
    """
    Server-sent events with a fresh alert page every refresh interval (30s).

    The first event is sent right away. Failed refreshes are skipped.
    """

    async def event_generator():
        async with client_factory(token_store) as client:
            monitor = AlertMonitor(client, context)
            async with aclosing(monitor.snapshots(max_events=limit)) as snapshots:
                async for _ in snapshots:
                    page = monitor.page().model_dump_json(by_alias=True)
                    yield f"event: alerts\ndata: {page}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )


@router.get("/{enterprise_id}/groups/{group_id}/models", response_model=ModelPage)
async def get_group_models(
    group_id: str,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Health of each model of a carpool group, plus the active model and failover history."""
    return await ModelHealthMonitor(client, context, group_id).fetch()


@router.post("/{enterprise_id}/groups/{group_id}/models/switch", response_model=ModelPage)
async def switch_group_model(
    group_id: str,
    switch_request: ModelSwitchRequest,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Switch the group's active model.

    - **Requires ADMIN or OWNER permissions**
    - The target must be one of the group's available models
    """
    monitor = ModelHealthMonitor(client, context, group_id)
    await monitor.fetch()
    return await monitor.switch_model(switch_request.target_model, switch_request.reason)

from fastapi import APIRouter, Depends, status

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.account_pool_schemas import (
    AccountPoolCreate,
    AccountPoolPage,
    AccountPoolUpdate,
)
from carpool_console.services.account_pool_service import AccountPoolManager

router = APIRouter()


@router.get("/{enterprise_id}/account-pools", response_model=AccountPoolPage)
async def list_account_pools(
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Account pools with their account and group bindings."""
    manager = AccountPoolManager(client, context)
    await manager.load()
    return manager.page()


@router.post(
    "/{enterprise_id}/account-pools",
    response_model=AccountPoolPage,
    status_code=status.HTTP_201_CREATED,
)
async def create_account_pool(
    pool_data: AccountPoolCreate,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Create an account pool.

    - **Requires ADMIN or OWNER permissions**
    - Defaults: shared, round_robin, 80% max load, priority 1
    """
    manager = AccountPoolManager(client, context)
    await manager.create(pool_data)
    return manager.page()


@router.put("/{enterprise_id}/account-pools/{pool_id}", response_model=AccountPoolPage)
async def update_account_pool(
    pool_id: str,
    pool_update: AccountPoolUpdate,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Update an account pool.

    - **Requires ADMIN or OWNER permissions**
    """
    manager = AccountPoolManager(client, context)
    await manager.update(pool_id, pool_update)
    return manager.page()


@router.delete("/{enterprise_id}/account-pools/{pool_id}", response_model=AccountPoolPage)
async def delete_account_pool(
    pool_id: str,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Delete an account pool.

    - **Requires ADMIN or OWNER permissions**
    """
    manager = AccountPoolManager(client, context)
    await manager.delete(pool_id)
    return manager.page()

from fastapi import APIRouter, Depends, status

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.ai_account_schemas import AiAccountCreate, AiAccountEnabledUpdate, AiAccountPage
from carpool_console.services.ai_account_service import AiAccountManager

router = APIRouter()


@router.get("/{enterprise_id}/ai-accounts", response_model=AiAccountPage)
async def list_ai_accounts(
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """AI provider accounts with their binding counts."""
    manager = AiAccountManager(client, context)
    await manager.load()
    return manager.page()


@router.post(
    "/{enterprise_id}/ai-accounts",
    response_model=AiAccountPage,
    status_code=status.HTTP_201_CREATED,
)
async def create_ai_account(
    account_data: AiAccountCreate,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Add an AI account with api-key or OAuth credentials.

    - **Requires ADMIN or OWNER permissions**
    - `credentials.type` must match `authType`
    """
    manager = AiAccountManager(client, context)
    await manager.create(account_data)
    return manager.page()


@router.patch("/{enterprise_id}/ai-accounts/{account_id}/enabled", response_model=AiAccountPage)
async def set_ai_account_enabled(
    account_id: str,
    enabled_update: AiAccountEnabledUpdate,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Enable or disable an AI account.

    - **Requires ADMIN or OWNER permissions**
    """
    manager = AiAccountManager(client, context)
    await manager.set_enabled(account_id, enabled_update.is_enabled)
    return manager.page()


@router.delete("/{enterprise_id}/ai-accounts/{account_id}", response_model=AiAccountPage)
async def delete_ai_account(
    account_id: str,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Delete an AI account.

    - **Requires ADMIN or OWNER permissions**
    - Refused (400) while any pool or group still binds the account
    """
    manager = AiAccountManager(client, context)
    await manager.delete(account_id)
    return manager.page()

from fastapi import APIRouter, Depends

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ValidationException
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.oauth_schemas import (
    AuthUrlResponse,
    ExchangeCodeRequest,
    GenerateAuthUrlRequest,
    OAuthLinkResult,
)
from carpool_console.services.oauth_service import OAuthLinkFlow

router = APIRouter()


@router.post("/{enterprise_id}/groups/{group_id}/oauth/generate-auth-url", response_model=AuthUrlResponse)
async def generate_auth_url(
    group_id: str,
    url_request: GenerateAuthUrlRequest,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Step 1 of linking an AI account: get the provider authorization URL.

    - **Requires ADMIN or OWNER permissions**
    - Send `authUrl` and `sessionId` back with the code in step 2
    """
    flow = OAuthLinkFlow(client, context, group_id, url_request.platform, url_request.proxy)
    await flow.generate_auth_url()
    return AuthUrlResponse(auth_url=flow.auth_url, session_id=flow.session_id)


@router.post("/{enterprise_id}/groups/{group_id}/oauth/exchange-code", response_model=OAuthLinkResult)
async def exchange_code(
    group_id: str,
    exchange_request: ExchangeCodeRequest,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Step 2: exchange the pasted code for a linked account.

    - **Requires ADMIN or OWNER permissions**
    - For Gemini the whole redirect URL may be pasted as `authCode`
    """
    flow = OAuthLinkFlow.resume(
        client,
        context,
        group_id,
        exchange_request.platform,
        auth_url=exchange_request.auth_url,
        session_id=exchange_request.session_id,
    )
    flow.set_auth_code(exchange_request.auth_code)
    account = await flow.exchange_code(
        account_name=exchange_request.account_name,
        description=exchange_request.description,
        account_type=exchange_request.account_type,
    )
    if account is None:
        raise ValidationException("请先生成授权链接并输入授权码")
    return OAuthLinkResult(linked=True, account=account)

from typing import AsyncIterator, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import UnauthorizedException
from carpool_console.core.security import TokenStore, extract_user_id
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.services.enterprise_service import EnterpriseService

security = HTTPBearer()


async def get_token_store(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> TokenStore:
    """
    FastAPI dependency to validate the bearer token.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY (signature, exp, sub)
    3. Put the token in a per-request store for the platform client

    Raises:
        HTTPException 401: If token invalid or expired
    """
    token = credentials.credentials
    try:
        extract_user_id(token)
    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenStore(token)


async def get_current_user(token_store: TokenStore = Depends(get_token_store)) -> str:
    """The platform user id ('sub' claim) of the validated token."""
    return extract_user_id(token_store.get())


def get_client_factory() -> Callable[[TokenStore], PlatformApiClient]:
    """How platform clients are built; tests override this to reach a fake platform."""
    return PlatformApiClient


async def get_api_client(
    token_store: TokenStore = Depends(get_token_store),
    client_factory: Callable[[TokenStore], PlatformApiClient] = Depends(get_client_factory),
) -> AsyncIterator[PlatformApiClient]:
    """Platform API client for this request, closed with the request."""
    async with client_factory(token_store) as client:
        yield client


async def get_enterprise_service(
    user_id: str = Depends(get_current_user),
    client: PlatformApiClient = Depends(get_api_client),
) -> EnterpriseService:
    return EnterpriseService(client, user_id)


async def get_enterprise_context(
    enterprise_id: str,
    enterprise_service: EnterpriseService = Depends(get_enterprise_service),
) -> EnterpriseContext:
    """
    FastAPI dependency to load the caller's context in the enterprise of the path.

    The role comes from the platform on every request, so role changes
    apply immediately.

    Raises:
        ApiRequestError: If the platform refuses or cannot load the enterprise
    """
    return await enterprise_service.load_context(enterprise_id)

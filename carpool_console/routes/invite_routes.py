from fastapi import APIRouter, Depends, status

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.common_schemas import MessageResponse
from carpool_console.schemas.invite_schemas import (
    BatchInviteRequest,
    InviteLinkRequest,
    InviteLinkResponse,
    InviteRequest,
    InviteSummary,
)
from carpool_console.services.invite_service import InviteService

router = APIRouter()


@router.post(
    "/{enterprise_id}/invites",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def invite_member(
    invite_request: InviteRequest,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Invite one user by email.

    - **Requires ADMIN or OWNER permissions**
    - Default role: member
    """
    await InviteService(client, context).invite(invite_request)
    return MessageResponse(message=f"Invitation sent to {invite_request.email.strip()}")


@router.post("/{enterprise_id}/invites/batch", response_model=InviteSummary)
async def batch_invite(
    batch_request: BatchInviteRequest,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Invite up to 50 users at once.

    - **Requires ADMIN or OWNER permissions**
    - Malformed addresses are skipped and listed under `invalid`
    - Each invite is sent separately; failures are counted, not rolled back
    """
    return await InviteService(client, context).batch_invite(batch_request)


@router.post(
    "/{enterprise_id}/invite-links",
    response_model=InviteLinkResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invite_link(
    link_request: InviteLinkRequest,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Create a shareable invite link.

    - **Requires ADMIN or OWNER permissions**
    - Defaults: 10 uses, expires in 7 days
    """
    return await InviteService(client, context).create_invite_link(link_request)

from fastapi import APIRouter, Depends, Query, status

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.permission_schemas import PermissionPage, RoleAssignment, UserRolesPage
from carpool_console.services.permission_service import PermissionManager

router = APIRouter()


@router.get("/{enterprise_id}/permissions", response_model=PermissionPage)
async def list_permissions(
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Roles and permissions defined for the enterprise."""
    return await PermissionManager(client, context).load()


@router.get("/{enterprise_id}/users/{user_id}/roles", response_model=UserRolesPage)
async def get_user_roles(
    user_id: str,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """A user's effective role bindings with their scopes."""
    return await PermissionManager(client, context).load_user_roles(user_id)


@router.post(
    "/{enterprise_id}/users/{user_id}/roles",
    response_model=UserRolesPage,
    status_code=status.HTTP_201_CREATED,
)
async def assign_role(
    user_id: str,
    assignment: RoleAssignment,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Assign a role to a user.

    - **Requires ADMIN or OWNER permissions**
    - Optional department or group scope and expiry
    """
    return await PermissionManager(client, context).assign_role(user_id, assignment)


@router.delete("/{enterprise_id}/users/{user_id}/roles", response_model=UserRolesPage)
async def revoke_role(
    user_id: str,
    role_id: str = Query(..., alias="roleId"),
    department_id: str | None = Query(None, alias="departmentId"),
    group_id: str | None = Query(None, alias="groupId"),
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Revoke a role binding from a user.

    - **Requires ADMIN or OWNER permissions**
    """
    return await PermissionManager(client, context).revoke_role(user_id, role_id, department_id, group_id)

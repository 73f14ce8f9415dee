from fastapi import APIRouter, Depends, Query, status

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.department_member_schemas import (
    AvailableUsers,
    DepartmentMemberAdd,
    DepartmentMemberPage,
    DepartmentMemberRoleUpdate,
)
from carpool_console.services.department_member_service import DepartmentMemberManager

router = APIRouter()

MEMBERS_PATH = "/{enterprise_id}/departments/{department_id}/members"


@router.get(MEMBERS_PATH, response_model=DepartmentMemberPage)
async def list_department_members(
    department_id: str,
    search: str | None = Query(None),
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Members of a department, optionally filtered by name or email."""
    manager = DepartmentMemberManager(client, context, department_id)
    await manager.load()
    return manager.page(search)


@router.get("/{enterprise_id}/departments/{department_id}/available-users", response_model=AvailableUsers)
async def list_available_users(
    department_id: str,
    search: str | None = Query(None),
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Enterprise users not yet in the department.

    - **Requires ADMIN or OWNER permissions**
    """
    manager = DepartmentMemberManager(client, context, department_id)
    return AvailableUsers(users=await manager.available_users(search))


@router.post(MEMBERS_PATH, response_model=DepartmentMemberPage, status_code=status.HTTP_201_CREATED)
async def add_department_member(
    department_id: str,
    member_data: DepartmentMemberAdd,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Add a user to a department.

    - **Requires ADMIN or OWNER permissions**
    - A user who is already a member is rejected (400)
    """
    manager = DepartmentMemberManager(client, context, department_id)
    await manager.add_member(member_data)
    return manager.page()


@router.put(MEMBERS_PATH + "/{member_id}", response_model=DepartmentMemberPage)
async def change_department_member_role(
    department_id: str,
    member_id: str,
    role_update: DepartmentMemberRoleUpdate,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Change a member's department role.

    - **Requires ADMIN or OWNER permissions**
    - The department owner cannot be changed (403)
    """
    manager = DepartmentMemberManager(client, context, department_id)
    await manager.change_role(member_id, role_update.role)
    return manager.page()


@router.delete(MEMBERS_PATH + "/{member_id}", response_model=DepartmentMemberPage)
async def remove_department_member(
    department_id: str,
    member_id: str,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Remove a member from a department.

    - **Requires ADMIN or OWNER permissions**
    - The department owner cannot be removed (403)
    """
    manager = DepartmentMemberManager(client, context, department_id)
    await manager.remove_member(member_id)
    return manager.page()

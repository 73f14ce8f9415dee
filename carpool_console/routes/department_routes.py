from fastapi import APIRouter, Depends, status

from carpool_console.api_client import PlatformApiClient
from carpool_console.dependencies import get_api_client, get_enterprise_context
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.department_schemas import (
    DepartmentCreate,
    DepartmentPage,
    DepartmentUpdate,
    ParentOption,
)
from carpool_console.services.department_service import DepartmentManager

router = APIRouter()


@router.get("/{enterprise_id}/departments", response_model=DepartmentPage)
async def list_departments(
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Department tree (roots with children nested) and total count."""
    manager = DepartmentManager(client, context)
    await manager.load()
    return manager.page()


@router.post(
    "/{enterprise_id}/departments",
    response_model=DepartmentPage,
    status_code=status.HTTP_201_CREATED,
)
async def create_department(
    department_data: DepartmentCreate,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Create a department.

    - **Requires ADMIN or OWNER permissions**
    - Returns the refetched tree
    """
    manager = DepartmentManager(client, context)
    await manager.create(department_data)
    return manager.page()


@router.put("/{enterprise_id}/departments/{department_id}", response_model=DepartmentPage)
async def update_department(
    department_id: str,
    department_update: DepartmentUpdate,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Update a department.

    - **Requires ADMIN or OWNER permissions**
    - A department cannot be moved under itself or a descendant (400)
    """
    manager = DepartmentManager(client, context)
    await manager.update(department_id, department_update)
    return manager.page()


@router.delete("/{enterprise_id}/departments/{department_id}", response_model=DepartmentPage)
async def delete_department(
    department_id: str,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """
    Delete a department.

    - **Requires ADMIN or OWNER permissions**
    """
    manager = DepartmentManager(client, context)
    await manager.delete(department_id)
    return manager.page()


@router.get(
    "/{enterprise_id}/departments/{department_id}/parent-options",
    response_model=list[ParentOption],
)
async def get_parent_options(
    department_id: str,
    context: EnterpriseContext = Depends(get_enterprise_context),
    client: PlatformApiClient = Depends(get_api_client),
):
    """Departments the given one may be moved under (never itself or a descendant)."""
    manager = DepartmentManager(client, context)
    return await manager.parent_options(department_id)

import logging

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from carpool_console.models.department import Department, DepartmentTree
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.department_repository import DepartmentRepository
from carpool_console.schemas.department_schemas import (
    DepartmentCreate,
    DepartmentPage,
    DepartmentUpdate,
    ParentOption,
)
from carpool_console.services.page_actions import actions_for

logger = logging.getLogger(__name__)


def flatten(departments: list[Department]) -> list[Department]:
    """All departments of a forest, parents before their children."""
    return [department for root in departments for department in root.walk()]


def parent_options(departments: list[Department], editing_id: str | None = None) -> list[ParentOption]:
    """
    Departments that may become the parent of ``editing_id``.

    The edited department and all of its descendants are left out, which
    is what keeps the tree acyclic. With no ``editing_id`` (a new
    department) every department is a candidate.
    """
    excluded: set[str] = set()
    if editing_id:
        for department in flatten(departments):
            if department.id == editing_id:
                excluded = {department.id} | department.descendant_ids()
                break

    options = []

    def visit(department: Department, depth: int) -> None:
        if department.id in excluded:
            return
        options.append(ParentOption(id=department.id, name=department.name, depth=depth))
        for child in department.children:
            visit(child, depth + 1)

    for root in departments:
        visit(root, 0)
    return options


class DepartmentManager:
    """Department tree of one enterprise; every mutation is followed by a refetch"""

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext):
        self.context = context
        self.department_repo = DepartmentRepository(client, context.enterprise_id)
        self.tree: DepartmentTree | None = None

    async def load(self) -> DepartmentTree:
        self.tree = await self.department_repo.get_tree()
        return self.tree

    def flatten(self) -> list[Department]:
        return flatten(self.tree.departments) if self.tree else []

    async def parent_options(self, editing_id: str | None = None) -> list[ParentOption]:
        """
        Parent choices for a department form.

        Raises:
            NotFoundException: If ``editing_id`` is not in the tree
        """
        if self.tree is None:
            await self.load()
        if editing_id and editing_id not in {d.id for d in self.flatten()}:
            raise NotFoundException(f"Department {editing_id} not found")
        return parent_options(self.tree.departments, editing_id)

    def page(self) -> DepartmentPage:
        tree = self.tree or DepartmentTree(enterprise=self.context.enterprise)
        return DepartmentPage(
            departments=tree.departments,
            total_count=tree.total_count,
            actions=actions_for(
                self.context, "create_department", "edit_department", "delete_department"
            ),
        )

    async def create(self, department_data: DepartmentCreate) -> DepartmentTree:
        """
        Create department (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can create departments")

        await self.department_repo.create(department_data.to_payload())
        logger.info(f"Department '{department_data.name}' created in {self.context.enterprise_id}")
        return await self.load()

    async def update(self, department_id: str, department_update: DepartmentUpdate) -> DepartmentTree:
        """
        Update department (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
            NotFoundException: If the department is not in the tree
            ValidationException: If the new parent would create a cycle
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can update departments")

        payload = department_update.model_dump(by_alias=True, exclude_unset=True, mode="json")
        if department_update.parent_id is not None:
            options = await self.parent_options(department_id)
            if department_update.parent_id not in {option.id for option in options}:
                raise ValidationException("A department cannot be moved under itself or one of its descendants")

        await self.department_repo.update(department_id, payload)
        return await self.load()

    async def delete(self, department_id: str) -> DepartmentTree:
        """
        Delete department (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can delete departments")

        await self.department_repo.delete(department_id)
        logger.info(f"Department {department_id} deleted from {self.context.enterprise_id}")
        return await self.load()

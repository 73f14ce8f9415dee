import logging

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from carpool_console.models.department_member import DepartmentMember, DepartmentRole, EnterpriseUser
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.department_member_repository import DepartmentMemberRepository
from carpool_console.schemas.department_member_schemas import DepartmentMemberAdd, DepartmentMemberPage
from carpool_console.services.page_actions import actions_for

logger = logging.getLogger(__name__)


def matches(member: DepartmentMember, search: str | None) -> bool:
    """Case-insensitive match on the member's name or email."""
    if not search or not search.strip():
        return True
    needle = search.strip().lower()
    user = member.user
    return any(needle in (value or "").lower() for value in ((user.name, user.email) if user else ()))


class DepartmentMemberManager:
    """
    Members of one department.

    Every change is refused below ADMIN before any platform call and is
    followed by a full refetch of the member list.
    """

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext, department_id: str):
        self.context = context
        self.department_id = department_id
        self.member_repo = DepartmentMemberRepository(client, context.enterprise_id, department_id)
        self.members: list[DepartmentMember] | None = None

    def _check_can_manage(self, action: str) -> None:
        if not self.context.is_admin_or_higher():
            raise ForbiddenException(f"Only admins and owners can {action} department members")

    async def load(self) -> list[DepartmentMember]:
        self.members = await self.member_repo.get_all()
        return self.members

    def page(self, search: str | None = None) -> DepartmentMemberPage:
        members = self.members or []
        return DepartmentMemberPage(
            department_id=self.department_id,
            members=[m for m in members if matches(m, search)],
            total_count=len(members),
            admin_count=sum(1 for m in members if m.role in (DepartmentRole.OWNER, DepartmentRole.ADMIN)),
            actions=actions_for(
                self.context, "add_department_member", "change_department_member_role", "remove_department_member"
            ),
        )

    async def _find(self, member_id: str) -> DepartmentMember:
        if self.members is None:
            await self.load()
        member = next((m for m in self.members if m.id == member_id), None)
        if member is None:
            raise NotFoundException(f"Department member {member_id} not found")
        return member

    async def available_users(self, search: str | None = None) -> list[EnterpriseUser]:
        """Enterprise users who could be added to the department (ADMIN or OWNER)."""
        self._check_can_manage("add")
        return await self.member_repo.get_available_users(search)

    async def add_member(self, member_data: DepartmentMemberAdd) -> list[DepartmentMember]:
        """
        Add an enterprise user to the department (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
            ValidationException: If the user is already a member
        """
        self._check_can_manage("add")
        if self.members is None:
            await self.load()
        if any(m.user_id == member_data.user_id for m in self.members):
            raise ValidationException("用户已经是部门成员")

        await self.member_repo.add(member_data.to_payload())
        logger.info(f"User {member_data.user_id} added to department {self.department_id} as {member_data.role.value}")
        return await self.load()

    async def change_role(self, member_id: str, role: DepartmentRole) -> list[DepartmentMember]:
        """
        Change a member's department role (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions or the member
                is the department owner
            NotFoundException: If the member is not in the department
        """
        self._check_can_manage("change")
        member = await self._find(member_id)
        if member.role is DepartmentRole.OWNER:
            raise ForbiddenException("部门负责人的角色不能修改")

        await self.member_repo.update(member_id, {"role": DepartmentRole(role).value})
        return await self.load()

    async def remove_member(self, member_id: str) -> list[DepartmentMember]:
        """
        Remove a member from the department (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions or the member
                is the department owner
            NotFoundException: If the member is not in the department
        """
        self._check_can_manage("remove")
        member = await self._find(member_id)
        if member.role is DepartmentRole.OWNER:
            raise ForbiddenException("部门负责人不能被移除")

        await self.member_repo.remove(member_id)
        logger.info(f"{member.display_name} removed from department {self.department_id}")
        return await self.load()

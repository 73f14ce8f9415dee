import logging

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ForbiddenException
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.models.permission import PermissionCatalog, UserPermission
from carpool_console.repositories.permission_repository import PermissionRepository
from carpool_console.schemas.permission_schemas import PermissionPage, RoleAssignment, UserRolesPage
from carpool_console.services.page_actions import actions_for

logger = logging.getLogger(__name__)


class PermissionManager:
    """Enterprise roles and per-user role bindings"""

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext):
        self.context = context
        self.permission_repo = PermissionRepository(client, context.enterprise_id)
        self.catalog = PermissionCatalog()
        self.user_roles: dict[str, list[UserPermission]] = {}

    async def load(self) -> PermissionPage:
        self.catalog = await self.permission_repo.get_catalog()
        return PermissionPage(
            roles=self.catalog.roles,
            permissions=self.catalog.permissions,
            actions=actions_for(self.context, "assign_role"),
        )

    async def load_user_roles(self, user_id: str) -> UserRolesPage:
        self.user_roles[user_id] = await self.permission_repo.get_user_roles(user_id)
        return UserRolesPage(
            user_id=user_id,
            roles=self.user_roles[user_id],
            actions=actions_for(self.context, "assign_role", "revoke_role"),
        )

    async def assign_role(self, user_id: str, assignment: RoleAssignment) -> UserRolesPage:
        """
        Grant a role to a user (ADMIN or OWNER), then reload their roles.

        Raises:
            ForbiddenException: If user lacks admin permissions
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can assign roles")

        await self.permission_repo.assign_role(user_id, assignment.to_payload())
        logger.info(f"Role {assignment.role_id} assigned to user {user_id} by {self.context.user_id}")
        return await self.load_user_roles(user_id)

    async def revoke_role(
        self,
        user_id: str,
        role_id: str,
        department_id: str | None = None,
        group_id: str | None = None,
    ) -> UserRolesPage:
        """
        Revoke a role binding (ADMIN or OWNER), then reload the user's roles.

        Raises:
            ForbiddenException: If user lacks admin permissions
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can revoke roles")

        await self.permission_repo.revoke_role(user_id, role_id, department_id, group_id)
        logger.info(f"Role {role_id} revoked from user {user_id} by {self.context.user_id}")
        return await self.load_user_roles(user_id)

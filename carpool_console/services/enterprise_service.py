import logging
from typing import Iterable

from carpool_console.api_client import PlatformApiClient
from carpool_console.models.enterprise import UserEnterprise
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.models.role import EnterpriseRole
from carpool_console.repositories.enterprise_repository import EnterpriseRepository

logger = logging.getLogger(__name__)


class EnterpriseService:
    """
    Holds the user's current enterprise context and moves it between enterprises.

    The context only changes when a load succeeds; a failed switch leaves
    the previous context in place and raises to the caller.
    """

    def __init__(self, client: PlatformApiClient, user_id: str):
        self.user_id = user_id
        self.enterprise_repo = EnterpriseRepository(client)
        self.current: EnterpriseContext | None = None

    @property
    def current_enterprise(self):
        return self.current.enterprise if self.current else None

    async def list_memberships(self) -> list[UserEnterprise]:
        """List every enterprise the user belongs to, with their role in each."""
        return await self.enterprise_repo.get_user_memberships()

    async def load_context(self, enterprise_id: str) -> EnterpriseContext:
        """
        Build the context for an enterprise without touching the current one.

        Args:
            enterprise_id: Enterprise ID

        Returns:
            Context with the role the platform reports for this user

        Raises:
            ApiRequestError: If the enterprise cannot be loaded
        """
        enterprise, role = await self.enterprise_repo.get_with_role(enterprise_id)
        return EnterpriseContext.for_role(self.user_id, enterprise, role)

    async def switch_enterprise(self, enterprise_id: str) -> EnterpriseContext:
        """
        Make another enterprise current.

        Records the access first (so the platform bumps lastAccessed), then
        loads the target. Only a successful load replaces the context.

        Raises:
            ApiRequestError: If recording access or loading fails
        """
        await self.enterprise_repo.record_access(enterprise_id)
        context = await self.load_context(enterprise_id)
        self.current = context
        logger.info(f"User {self.user_id} switched to enterprise {enterprise_id} as {context.role.value}")
        return context

    async def refresh_permissions(self) -> EnterpriseContext | None:
        """Reload the current enterprise, picking up role changes."""
        if self.current is None:
            return None
        self.current = await self.load_context(self.current.enterprise_id)
        return self.current

    def clear(self) -> None:
        self.current = None

    def has_role(self, required: EnterpriseRole | str | Iterable[EnterpriseRole | str]) -> bool:
        """Role gate against the current context; False when none is loaded."""
        return self.current is not None and self.current.has_role(required)

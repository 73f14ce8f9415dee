import logging

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ForbiddenException
from carpool_console.models.account_pool import AccountPool
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.account_pool_repository import AccountPoolRepository
from carpool_console.schemas.account_pool_schemas import (
    AccountPoolCreate,
    AccountPoolPage,
    AccountPoolUpdate,
)
from carpool_console.services.page_actions import actions_for

logger = logging.getLogger(__name__)


class AccountPoolManager:
    """Account pools of one enterprise"""

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext):
        self.context = context
        self.pool_repo = AccountPoolRepository(client, context.enterprise_id)
        self.pools: list[AccountPool] = []

    async def load(self) -> list[AccountPool]:
        self.pools = await self.pool_repo.get_all()
        return self.pools

    def page(self) -> AccountPoolPage:
        return AccountPoolPage(
            pools=self.pools,
            service_types={pool.id: pool.service_types() for pool in self.pools},
            actions=actions_for(self.context, "create_pool", "edit_pool", "delete_pool"),
        )

    async def create(self, pool_data: AccountPoolCreate) -> list[AccountPool]:
        """
        Create account pool (ADMIN or OWNER).

        Unset fields go out with their defaults: shared, round robin,
        80% max load, priority 1, no accounts.
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can create account pools")

        await self.pool_repo.create(pool_data.to_payload())
        logger.info(f"Account pool '{pool_data.name}' created in {self.context.enterprise_id}")
        return await self.load()

    async def update(self, pool_id: str, pool_update: AccountPoolUpdate) -> list[AccountPool]:
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can update account pools")

        payload = pool_update.model_dump(by_alias=True, exclude_unset=True, mode="json")
        await self.pool_repo.update(pool_id, payload)
        return await self.load()

    async def delete(self, pool_id: str) -> list[AccountPool]:
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can delete account pools")

        await self.pool_repo.delete(pool_id)
        logger.info(f"Account pool {pool_id} deleted from {self.context.enterprise_id}")
        return await self.load()

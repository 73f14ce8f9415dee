import logging

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from carpool_console.models.ai_account import AiAccount
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.ai_account_repository import AiAccountRepository
from carpool_console.schemas.ai_account_schemas import AiAccountCreate, AiAccountPage
from carpool_console.services.page_actions import actions_for

logger = logging.getLogger(__name__)


class AiAccountManager:
    """AI provider accounts of one enterprise"""

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext):
        self.context = context
        self.account_repo = AiAccountRepository(client, context.enterprise_id)
        self.accounts: list[AiAccount] = []

    async def load(self) -> list[AiAccount]:
        self.accounts = await self.account_repo.get_all()
        return self.accounts

    def page(self) -> AiAccountPage:
        return AiAccountPage(
            accounts=self.accounts,
            actions=actions_for(
                self.context, "add_account", "link_oauth_account", "toggle_account", "delete_account"
            ),
        )

    async def create(self, account_data: AiAccountCreate) -> list[AiAccount]:
        """
        Create an account with api-key or OAuth credentials (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can add AI accounts")

        payload = account_data.to_payload()
        payload["serviceType"] = payload.pop("platform")
        await self.account_repo.create(payload)
        logger.info(f"AI account '{account_data.name}' ({account_data.platform}) added to {self.context.enterprise_id}")
        return await self.load()

    async def set_enabled(self, account_id: str, is_enabled: bool) -> list[AiAccount]:
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can enable or disable AI accounts")

        await self.account_repo.update(account_id, {"isEnabled": is_enabled})
        return await self.load()

    async def delete(self, account_id: str) -> list[AiAccount]:
        """
        Delete an account that no pool or group uses (ADMIN or OWNER).

        Raises:
            ForbiddenException: If user lacks admin permissions
            NotFoundException: If the account does not exist
            ValidationException: If the account is still bound
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can delete AI accounts")

        if not self.accounts:
            await self.load()
        account = next((a for a in self.accounts if a.id == account_id), None)
        if account is None:
            raise NotFoundException(f"AI account {account_id} not found")
        if account.is_bound:
            raise ValidationException(
                f"AI account '{account.name}' is still bound to "
                f"{account.pool_binding_count} pool(s) and {account.group_binding_count} group(s)"
            )

        await self.account_repo.delete(account_id)
        logger.info(f"AI account {account_id} deleted from {self.context.enterprise_id}")
        return await self.load()

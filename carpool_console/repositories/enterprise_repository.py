"""Repository for enterprise and membership lookups."""

import logging

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import NotFoundException
from carpool_console.models.enterprise import Enterprise, UserEnterprise
from carpool_console.models.role import EnterpriseRole, parse_role

logger = logging.getLogger(__name__)


class EnterpriseRepository:
    """Repository for the enterprise directory endpoints"""

    def __init__(self, client: PlatformApiClient):
        self.client = client

    async def get_user_memberships(self) -> list[UserEnterprise]:
        """
        Get all enterprises the authenticated user belongs to.

        Returns:
            Memberships with embedded enterprise, role and access times
        """
        data = await self.client.get("/api/user/enterprises")
        return [UserEnterprise.model_validate(item) for item in data or []]

    async def get_with_role(self, enterprise_id: str) -> tuple[Enterprise, EnterpriseRole]:
        """
        Get an enterprise and the user's role in it.

        Args:
            enterprise_id: Enterprise ID

        Returns:
            (enterprise, role); the role defaults to MEMBER when the
            platform omits it or sends one the console does not know

        Raises:
            NotFoundException: If the platform answered without an enterprise
        """
        data = await self.client.get(f"/api/enterprises/{enterprise_id}")
        if not isinstance(data, dict) or not data:
            raise NotFoundException("Enterprise not found")

        role = parse_role(data.get("userRole"))
        if data.get("userRole") and role.value != data["userRole"]:
            logger.warning(f"Unknown role '{data['userRole']}' in {enterprise_id}, treating as {role.value}")
        return Enterprise.model_validate(data), role

    async def record_access(self, enterprise_id: str) -> None:
        """Ask the platform to bump lastAccessed for this membership."""
        await self.client.post("/api/user/enterprises/access", json={"enterpriseId": enterprise_id})

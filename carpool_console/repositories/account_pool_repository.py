from carpool_console.api_client import PlatformApiClient
from carpool_console.models.account_pool import AccountPool


class AccountPoolRepository:
    """Repository for an enterprise's account pools"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str):
        self.client = client
        self.path = f"/api/enterprises/{enterprise_id}/account-pools"

    async def get_all(self) -> list[AccountPool]:
        data = await self.client.get(self.path)
        return [AccountPool.model_validate(item) for item in data or []]

    async def create(self, payload: dict) -> AccountPool | None:
        data = await self.client.post(self.path, json=payload)
        return AccountPool.model_validate(data) if data else None

    async def update(self, pool_id: str, payload: dict) -> AccountPool | None:
        data = await self.client.put(f"{self.path}/{pool_id}", json=payload)
        return AccountPool.model_validate(data) if data else None

    async def delete(self, pool_id: str) -> None:
        await self.client.delete(f"{self.path}/{pool_id}")

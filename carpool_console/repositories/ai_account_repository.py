from carpool_console.api_client import PlatformApiClient
from carpool_console.models.ai_account import AiAccount


class AiAccountRepository:
    """Repository for an enterprise's AI provider accounts"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str):
        self.client = client
        self.path = f"/api/enterprises/{enterprise_id}/ai-accounts"

    async def get_all(self) -> list[AiAccount]:
        data = await self.client.get(self.path)
        # some platform versions wrap the list as {"accounts": [...]}
        if isinstance(data, dict):
            data = data.get("accounts", [])
        return [AiAccount.model_validate(item) for item in data or []]

    async def create(self, payload: dict) -> AiAccount | None:
        data = await self.client.post(self.path, json=payload)
        return AiAccount.model_validate(data) if data else None

    async def update(self, account_id: str, payload: dict) -> AiAccount | None:
        data = await self.client.put(f"{self.path}/{account_id}", json=payload)
        return AiAccount.model_validate(data) if data else None

    async def delete(self, account_id: str) -> None:
        await self.client.delete(f"{self.path}/{account_id}")

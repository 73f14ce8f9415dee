from carpool_console.api_client import PlatformApiClient


class OAuthRepository:
    """Repository for a group's OAuth account-linking endpoints"""

    def __init__(self, client: PlatformApiClient, group_id: str):
        self.client = client
        self.path = f"/api/groups/{group_id}/ai-accounts/oauth"

    async def generate_auth_url(self, payload: dict) -> dict:
        """Returns ``{"authUrl": ..., "sessionId": ...}``"""
        return await self.client.post(f"{self.path}/generate-auth-url", json=payload) or {}

    async def exchange_code(self, payload: dict) -> dict | None:
        return await self.client.post(f"{self.path}/exchange-code", json=payload)

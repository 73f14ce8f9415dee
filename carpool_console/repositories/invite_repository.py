from carpool_console.api_client import PlatformApiClient


class InviteRepository:
    """Repository for enterprise invitations and invite links"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str):
        self.client = client
        self.path = f"/api/enterprises/{enterprise_id}"

    async def send_invite(self, payload: dict) -> dict | None:
        return await self.client.post(f"{self.path}/invites", json=payload)

    async def create_invite_link(self, payload: dict) -> dict | None:
        """Returns the link record; its ``url`` is what gets shared"""
        return await self.client.post(f"{self.path}/invite-links", json=payload)

"""Repositories for the read-mostly monitoring endpoints."""

from carpool_console.api_client import PlatformApiClient
from carpool_console.models.alert import AlertSummary
from carpool_console.models.model_health import ModelHealth, ModelStatus


class AlertRepository:
    """Repository for an enterprise's alert summary"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str):
        self.client = client
        self.path = f"/api/enterprises/{enterprise_id}/alerts"

    async def get_summary(self) -> AlertSummary:
        data = await self.client.get(self.path, params={"summary": "true"})
        return AlertSummary.model_validate((data or {}).get("summary") or {})


class ModelHealthRepository:
    """Repository for a carpool group's model health and active model"""

    def __init__(self, client: PlatformApiClient, group_id: str):
        self.client = client
        self.path = f"/api/groups/{group_id}/models"

    async def get_health(self) -> list[ModelHealth]:
        data = await self.client.get(f"{self.path}/health")
        return [ModelHealth.model_validate(item) for item in (data or {}).get("models", [])]

    async def get_status(self) -> ModelStatus:
        data = await self.client.get(f"{self.path}/switch")
        return ModelStatus.model_validate(data or {})

    async def switch_model(self, target_model: str, reason: str = "manual") -> None:
        await self.client.post(f"{self.path}/switch", json={"targetModel": target_model, "reason": reason})

from carpool_console.api_client import PlatformApiClient
from carpool_console.models.budget import BudgetAlert, CostReport


class BudgetRepository:
    """Repository for cost reports, budget alerts and budget allocation"""

    def __init__(self, client: PlatformApiClient, enterprise_id: str):
        self.client = client
        self.path = f"/api/enterprises/{enterprise_id}"

    async def get_costs(self, time_range: str) -> CostReport:
        """Get cost summary and budget usage for a range such as '7d' or '30d'"""
        data = await self.client.get(f"{self.path}/costs", params={"timeRange": time_range})
        return CostReport.model_validate(data or {})

    async def get_alerts(self) -> list[BudgetAlert]:
        data = await self.client.get(f"{self.path}/budget-alerts")
        return [BudgetAlert.model_validate(item) for item in (data or {}).get("alerts", [])]

    async def set_allocation(self, payload: dict) -> dict | None:
        """Create or replace the budget allocation (owner/admin only on the platform)"""
        return await self.client.put(f"{self.path}/budget", json=payload)

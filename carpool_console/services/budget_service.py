import asyncio
import logging

from carpool_console.api_client import PlatformApiClient
from carpool_console.config import settings
from carpool_console.core.exceptions import ApiRequestError, ForbiddenException
from carpool_console.models.budget import BudgetAlert, BudgetStatus, BudgetUsage, CostReport, CostSummary
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.budget_repository import BudgetRepository
from carpool_console.schemas.budget_schemas import BudgetAllocation, BudgetPage, DepartmentCostShare
from carpool_console.services.page_actions import actions_for

logger = logging.getLogger(__name__)


def budget_status(usage: BudgetUsage | None) -> BudgetStatus:
    """Classify spend against budget: exceeded, >=90% critical, >=80% warning."""
    if usage is None:
        return BudgetStatus.NORMAL
    if usage.is_over_budget:
        return BudgetStatus.EXCEEDED
    if usage.percentage >= 90:
        return BudgetStatus.CRITICAL
    if usage.percentage >= 80:
        return BudgetStatus.WARNING
    return BudgetStatus.NORMAL


def department_ranking(summary: CostSummary | None) -> list[DepartmentCostShare]:
    """Departments by cost, highest first, with their share of the total in percent."""
    if summary is None:
        return []
    total = summary.total_cost or sum(summary.cost_by_department.values())
    ranking = [
        DepartmentCostShare(name=name, cost=cost, share=round(cost / total * 100, 2) if total else 0)
        for name, cost in summary.cost_by_department.items()
    ]
    return sorted(ranking, key=lambda item: item.cost, reverse=True)


class BudgetManager:
    """Costs, budget usage and budget alerts of one enterprise"""

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext):
        self.context = context
        self.budget_repo = BudgetRepository(client, context.enterprise_id)
        self.time_range = settings.DEFAULT_COST_TIME_RANGE
        self.report = CostReport()
        self.alerts: list[BudgetAlert] = []

    async def load(self, time_range: str | None = None) -> BudgetPage:
        """
        Fetch costs and budget alerts concurrently.

        A failed alert fetch leaves the page with costs and no alerts; a
        failed cost fetch fails the page.
        """
        if time_range:
            self.time_range = time_range
        self.report, self.alerts = await asyncio.gather(
            self.budget_repo.get_costs(self.time_range),
            self._alerts_or_empty(),
        )
        return self.page()

    async def _alerts_or_empty(self) -> list[BudgetAlert]:
        try:
            return await self.budget_repo.get_alerts()
        except ApiRequestError as e:
            logger.warning(f"Budget alerts of {self.context.enterprise_id} unavailable: {e.message}")
            return []

    def page(self) -> BudgetPage:
        return BudgetPage(
            time_range=self.time_range,
            cost_summary=self.report.cost_summary,
            budget_usage=self.report.budget_usage,
            status=budget_status(self.report.budget_usage),
            department_ranking=department_ranking(self.report.cost_summary),
            alerts=self.alerts,
            actions=actions_for(self.context, "view_analytics", "set_budget"),
        )

    async def set_budget(self, allocation: BudgetAllocation) -> BudgetPage:
        """
        Set the budget allocation (ADMIN or OWNER), then reload.

        Raises:
            ForbiddenException: If user lacks admin permissions
        """
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can set budgets")

        payload = allocation.to_payload()
        payload.setdefault("entityId", self.context.enterprise_id)
        await self.budget_repo.set_allocation(payload)
        logger.info(
            f"Budget {allocation.budget_amount}/{allocation.budget_period} set for "
            f"{allocation.entity_type} {payload['entityId']}"
        )
        return await self.load()

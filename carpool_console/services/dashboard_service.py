import asyncio

from carpool_console.api_client import PlatformApiClient
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.account_pool_repository import AccountPoolRepository
from carpool_console.repositories.department_repository import DepartmentRepository
from carpool_console.schemas.dashboard_schemas import DashboardOverview
from carpool_console.services.department_service import flatten
from carpool_console.services.page_actions import actions_for


class DashboardComposer:
    """Builds the enterprise overview from departments and account pools"""

    def __init__(self, client: PlatformApiClient, context: EnterpriseContext):
        self.context = context
        self.department_repo = DepartmentRepository(client, context.enterprise_id)
        self.pool_repo = AccountPoolRepository(client, context.enterprise_id)

    async def compose(self) -> DashboardOverview:
        """
        Fetch both sources concurrently; if either fails the overview fails.

        Raises:
            ApiRequestError: From whichever fetch failed
        """
        tree, pools = await asyncio.gather(
            self.department_repo.get_tree(),
            self.pool_repo.get_all(),
        )
        departments = flatten(tree.departments)

        return DashboardOverview(
            enterprise=self.context.enterprise,
            role=self.context.role,
            department_count=tree.total_count or len(departments),
            group_count=sum(department.group_count or len(department.groups) for department in departments),
            pool_count=len(pools),
            active_pool_count=sum(1 for pool in pools if pool.is_active),
            account_count=sum(pool.account_binding_count or len(pool.account_bindings) for pool in pools),
            actions=actions_for(self.context, "view_analytics", "create_department", "create_pool"),
        )

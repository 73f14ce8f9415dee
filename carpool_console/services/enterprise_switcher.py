from carpool_console.config import settings
from carpool_console.models.enterprise import UserEnterprise
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.schemas.enterprise_schemas import SwitcherEntry, SwitcherListing
from carpool_console.services.enterprise_service import EnterpriseService


def partition_enterprises(
    memberships: list[UserEnterprise],
    search: str | None = None,
    recent_count: int | None = None,
) -> tuple[list[UserEnterprise], list[UserEnterprise]]:
    """
    Split memberships into recently accessed and the rest.

    Args:
        memberships: The user's memberships
        search: Case-insensitive substring filter on the enterprise name
        recent_count: Size of the recent bucket (default from settings)

    Returns:
        (recent, other), both ordered by lastAccessed, newest first
    """
    if recent_count is None:
        recent_count = settings.RECENT_ENTERPRISE_COUNT

    if search and search.strip():
        needle = search.strip().lower()
        memberships = [m for m in memberships if needle in m.name.lower()]

    ordered = sorted(memberships, key=lambda m: m.access_sort_key(), reverse=True)
    return ordered[:recent_count], ordered[recent_count:]


class EnterpriseSwitcher:
    """Enterprise picker: lists memberships and switches between them"""

    def __init__(self, enterprise_service: EnterpriseService, current_enterprise_id: str | None = None):
        self.enterprise_service = enterprise_service
        self.current_enterprise_id = current_enterprise_id

    def _current_id(self) -> str | None:
        if self.current_enterprise_id:
            return self.current_enterprise_id
        current = self.enterprise_service.current_enterprise
        return current.id if current else None

    def _entry(self, membership: UserEnterprise) -> SwitcherEntry:
        return SwitcherEntry(
            id=membership.id,
            name=membership.name,
            plan_type=membership.enterprise.plan_type,
            role=membership.role,
            last_accessed=membership.last_accessed,
            is_current=membership.id == self._current_id(),
        )

    async def open(self, search: str | None = None) -> SwitcherListing:
        """Fetch memberships and build the recent/other listing."""
        memberships = await self.enterprise_service.list_memberships()
        recent, other = partition_enterprises(memberships, search)
        return SwitcherListing(
            recent=[self._entry(m) for m in recent],
            other=[self._entry(m) for m in other],
            total=len(recent) + len(other),
        )

    async def select(self, enterprise_id: str) -> EnterpriseContext | None:
        """
        Switch to an enterprise unless it is already current.

        Returns:
            The new context, or None when nothing changed (no platform call)
        """
        if enterprise_id == self._current_id():
            return None

        context = await self.enterprise_service.switch_enterprise(enterprise_id)
        self.current_enterprise_id = enterprise_id
        return context

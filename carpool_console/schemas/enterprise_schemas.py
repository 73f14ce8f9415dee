from datetime import datetime
from pydantic import Field

from carpool_console.models.base import ApiModel
from carpool_console.models.enterprise import Enterprise
from carpool_console.models.role import EnterpriseRole
from carpool_console.schemas.common_schemas import PageAction


class SwitcherEntry(ApiModel):
    """One enterprise offered by the switcher"""

    id: str
    name: str
    plan_type: str
    role: EnterpriseRole
    last_accessed: datetime | None = None
    is_current: bool = False


class SwitcherListing(ApiModel):
    """Memberships split into the most recently accessed and the rest"""

    recent: list[SwitcherEntry] = Field(default_factory=list)
    other: list[SwitcherEntry] = Field(default_factory=list)
    total: int = 0


class SwitchRequest(ApiModel):
    enterprise_id: str = Field(..., min_length=1)
    current_enterprise_id: str | None = None


class EnterpriseContextResponse(ApiModel):
    """The current enterprise with the caller's role and permissions"""

    enterprise: Enterprise
    role: EnterpriseRole
    permissions: list[str] = Field(default_factory=list)
    actions: list[PageAction] = Field(default_factory=list)


class SwitchResponse(ApiModel):
    """
    Result of a switch.

    ``switched`` is False when the requested enterprise was already the
    current one; no platform call is made in that case.
    """

    switched: bool
    enterprise_id: str
    context: EnterpriseContextResponse | None = None

"""Enterprise (tenant) and membership models."""

from datetime import datetime, timezone
from typing import Any
from pydantic import field_validator, model_validator

from carpool_console.models.base import ApiModel, TimestampMixin, lift_counts
from carpool_console.models.role import EnterpriseRole, parse_role

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Enterprise(TimestampMixin):
    """
    Root tenant boundary of the carpool platform.

    Created outside the console; the console only displays the name,
    plan and counts. Member/group counts arrive in the platform's
    ``_count`` object under different keys depending on the endpoint.
    """

    id: str
    name: str
    plan_type: str = "basic"
    organization_type: str | None = None
    feature_set: dict[str, Any] | None = None
    member_count: int = 0
    group_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _lift_counts(cls, data: Any) -> Any:
        return lift_counts(
            data,
            {"members": "memberCount", "userEnterprises": "memberCount", "groups": "groupCount"},
        )


class UserEnterprise(ApiModel):
    """
    A user's membership in one enterprise.

    One membership per (user, enterprise). ``last_accessed`` is refreshed by
    the platform on every switch; memberships never switched to fall back
    to ``joined_at``.
    """

    enterprise: Enterprise
    role: EnterpriseRole = EnterpriseRole.MEMBER
    joined_at: datetime | None = None
    last_accessed: datetime | None = None
    is_active: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def _known_role(cls, value: Any) -> EnterpriseRole:
        return parse_role(value)

    @model_validator(mode="after")
    def _default_last_accessed(self) -> "UserEnterprise":
        if self.last_accessed is None:
            self.last_accessed = self.joined_at
        return self

    @property
    def id(self) -> str:
        return self.enterprise.id

    @property
    def name(self) -> str:
        return self.enterprise.name

    def access_sort_key(self) -> datetime:
        """Most-recent-first sort key; naive timestamps are taken as UTC."""
        moment = self.last_accessed or EPOCH
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment

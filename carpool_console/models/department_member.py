"""Department membership models."""

from datetime import datetime
from enum import Enum as PyEnum
from pydantic import Field

from carpool_console.models.base import ApiModel


class DepartmentRole(str, PyEnum):
    """Role of a user inside one department, independent of the enterprise role."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class MemberUser(ApiModel):
    id: str
    name: str | None = None
    email: str | None = None
    avatar: str | None = None
    status: str | None = None


class DepartmentMember(ApiModel):
    """
    A user's membership in a department.

    ``id`` is the membership id used by the update and remove endpoints,
    not the user id. The department owner cannot be changed or removed
    from the console.
    """

    id: str
    user_id: str
    department_id: str | None = None
    role: DepartmentRole = DepartmentRole.MEMBER
    status: str = "active"
    joined_at: datetime | None = None
    user: MemberUser | None = None

    @property
    def display_name(self) -> str:
        if self.user is not None:
            return self.user.name or self.user.email or self.user_id
        return self.user_id


class UserDepartmentRef(ApiModel):
    id: str
    name: str | None = None
    role: str | None = None


class EnterpriseUser(ApiModel):
    """A user of the enterprise, as listed when picking someone to add."""

    id: str
    name: str | None = None
    email: str | None = None
    avatar: str | None = None
    status: str | None = None
    departments: list[UserDepartmentRef] = Field(default_factory=list)

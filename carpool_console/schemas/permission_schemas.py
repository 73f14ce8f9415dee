from datetime import datetime
from pydantic import Field

from carpool_console.models.base import ApiModel
from carpool_console.models.permission import Permission, Role, UserPermission
from carpool_console.schemas.common_schemas import PageAction


class RoleAssignment(ApiModel):
    """Grant a role to a user, optionally scoped to a department or group"""

    role_id: str = Field(..., min_length=1)
    department_id: str | None = None
    group_id: str | None = None
    expires_at: datetime | None = None


class PermissionPage(ApiModel):
    roles: list[Role] = Field(default_factory=list)
    permissions: list[Permission] = Field(default_factory=list)
    actions: list[PageAction] = Field(default_factory=list)


class UserRolesPage(ApiModel):
    user_id: str
    roles: list[UserPermission] = Field(default_factory=list)
    actions: list[PageAction] = Field(default_factory=list)

from datetime import datetime
from enum import Enum as PyEnum
from pydantic import Field

from carpool_console.models.base import ApiModel


class RoleLevel(str, PyEnum):
    """Scope level a custom role is defined for"""

    ENTERPRISE = "enterprise"
    DEPARTMENT = "department"
    GROUP = "group"
    USER = "user"


class Permission(ApiModel):
    """A (resource, action) grant, e.g. ("budget", "manage")."""

    id: str
    name: str
    resource: str
    action: str
    description: str | None = None


class Role(ApiModel):
    id: str
    name: str
    description: str | None = None
    level: RoleLevel = RoleLevel.ENTERPRISE
    permissions: list[Permission] = Field(default_factory=list)
    is_built_in: bool = False
    enterprise_id: str | None = None


class PermissionCatalog(ApiModel):
    """Roles and permissions defined for an enterprise."""

    permissions: list[Permission] = Field(default_factory=list)
    roles: list[Role] = Field(default_factory=list)


class RoleScope(ApiModel):
    enterprise: str | None = None
    department: str | None = None
    group: str | None = None


class UserPermission(ApiModel):
    """
    A role bound to a user at one scope, optionally expiring.

    Returned by the platform as the user's "effective roles".
    """

    role_id: str
    role_name: str
    role_level: RoleLevel = RoleLevel.ENTERPRISE
    scope: RoleScope = Field(default_factory=RoleScope)
    granted_by: str | None = None
    granted_at: datetime | None = None
    expires_at: datetime | None = None
    is_active: bool = True

"""Enterprise context for role-gating console actions."""

from dataclasses import dataclass, field
from typing import Iterable

from carpool_console.models.enterprise import Enterprise
from carpool_console.models.role import EnterpriseRole, has_role, role_permissions


@dataclass
class EnterpriseContext:
    """
    The enterprise a user is working in, with their role there.

    Built from the platform's enterprise endpoint and handed explicitly to
    every manager and route that gates admin-only actions. The checks are
    advisory: they decide what the console offers, while the platform
    remains the authority on what is allowed.

    Attributes:
        user_id: Platform user id (JWT 'sub')
        enterprise: The current enterprise
        role: The user's role within this enterprise
        permissions: Permission ids derived from the role
    """

    user_id: str
    enterprise: Enterprise
    role: EnterpriseRole
    permissions: list[str] = field(default_factory=list)

    @classmethod
    def for_role(cls, user_id: str, enterprise: Enterprise, role: EnterpriseRole | str) -> "EnterpriseContext":
        role = EnterpriseRole(role)
        return cls(user_id=user_id, enterprise=enterprise, role=role, permissions=role_permissions(role))

    @property
    def enterprise_id(self) -> str:
        return self.enterprise.id

    def has_role(self, required: EnterpriseRole | str | Iterable[EnterpriseRole | str]) -> bool:
        """True if the user's role meets or exceeds any of the required roles."""
        return has_role(self.role, required)

    def has_permission(self, permission_id: str) -> bool:
        return permission_id in self.permissions

    def can_access(
        self,
        required_roles: Iterable[EnterpriseRole | str],
        required_permissions: Iterable[str] = (),
    ) -> bool:
        """Any one required role and every required permission."""
        return self.has_role(list(required_roles)) and all(
            self.has_permission(permission) for permission in required_permissions
        )

    def is_owner(self) -> bool:
        """Check if user is the enterprise owner."""
        return self.role == EnterpriseRole.OWNER

    def is_admin_or_higher(self) -> bool:
        """Check if user is admin or owner."""
        return self.has_role(EnterpriseRole.ADMIN)

    def __repr__(self) -> str:
        return f"<EnterpriseContext(user_id={self.user_id}, enterprise_id={self.enterprise.id}, role={self.role.value})>"

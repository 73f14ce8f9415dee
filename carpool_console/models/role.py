"""Enterprise role enum and the pure role-gating predicate."""

from enum import Enum as PyEnum
from typing import Iterable


class EnterpriseRole(str, PyEnum):
    """
    Enterprise membership roles with hierarchical permissions.

    Role Hierarchy (highest to lowest):
    1. OWNER - Full control, can delete enterprise, manage budgets
    2. ADMIN - Manage departments, pools, accounts, invite members
    3. MEMBER - Use assigned AI resources, view own analytics
    4. VIEWER - Read-only access
    """

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"


ROLE_HIERARCHY = {
    EnterpriseRole.OWNER: 4,
    EnterpriseRole.ADMIN: 3,
    EnterpriseRole.MEMBER: 2,
    EnterpriseRole.VIEWER: 1,
}

ADMIN_ROLES = (EnterpriseRole.OWNER, EnterpriseRole.ADMIN)


def has_role(
    user_role: EnterpriseRole | str | None,
    required: EnterpriseRole | str | Iterable[EnterpriseRole | str],
) -> bool:
    """
    Check whether a role satisfies one of the required roles.

    A role satisfies a requirement when it sits at the same level or above
    it in the hierarchy, so OWNER satisfies ADMIN. With several required
    roles any one of them is enough.

    Args:
        user_role: The user's role in the enterprise (None if unknown)
        required: A role or a collection of roles

    Returns:
        True if the user's role meets at least one requirement
    """
    if user_role is None:
        return False

    if isinstance(required, (str, EnterpriseRole)):
        required = [required]

    level = ROLE_HIERARCHY[EnterpriseRole(user_role)]
    return any(level >= ROLE_HIERARCHY[EnterpriseRole(role)] for role in required)


ROLE_PERMISSIONS: dict[EnterpriseRole, tuple[str, ...]] = {
    EnterpriseRole.OWNER: (
        "enterprise.manage",
        "enterprise.delete",
        "groups.create",
        "groups.manage",
        "groups.delete",
        "members.invite",
        "members.manage",
        "resources.manage",
        "budget.manage",
        "analytics.view",
    ),
    EnterpriseRole.ADMIN: (
        "groups.create",
        "groups.manage",
        "members.invite",
        "members.manage",
        "resources.manage",
        "analytics.view",
    ),
    EnterpriseRole.MEMBER: (
        "groups.view",
        "resources.use",
        "analytics.view.own",
    ),
    EnterpriseRole.VIEWER: (
        "groups.view",
        "analytics.view.own",
    ),
}


def role_permissions(role: EnterpriseRole | str | None) -> list[str]:
    """Default permission ids granted by an enterprise role."""
    if role is None:
        return []
    return list(ROLE_PERMISSIONS[EnterpriseRole(role)])


def parse_role(value: EnterpriseRole | str | None, default: EnterpriseRole = EnterpriseRole.MEMBER) -> EnterpriseRole:
    """Role from a platform value; missing or unknown roles fall back to ``default``."""
    try:
        return EnterpriseRole(value)
    except ValueError:
        return default

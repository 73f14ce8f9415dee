from pydantic import Field

from carpool_console.models.base import ApiModel
from carpool_console.models.department_member import DepartmentMember, DepartmentRole, EnterpriseUser
from carpool_console.schemas.common_schemas import PageAction


class DepartmentMemberAdd(ApiModel):
    """Add an enterprise user to a department (ADMIN or OWNER)"""

    user_id: str = Field(..., min_length=1)
    role: DepartmentRole = DepartmentRole.MEMBER


class DepartmentMemberRoleUpdate(ApiModel):
    role: DepartmentRole


class DepartmentMemberPage(ApiModel):
    department_id: str
    members: list[DepartmentMember] = Field(default_factory=list)
    total_count: int = 0
    admin_count: int = 0
    actions: list[PageAction] = Field(default_factory=list)


class AvailableUsers(ApiModel):
    users: list[EnterpriseUser] = Field(default_factory=list)

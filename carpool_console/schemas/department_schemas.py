from pydantic import Field

from carpool_console.models.base import ApiModel
from carpool_console.models.department import Department
from carpool_console.schemas.common_schemas import PageAction


class DepartmentCreate(ApiModel):
    """Create department (ADMIN or OWNER)"""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    parent_id: str | None = None
    budget_limit: float | None = Field(None, ge=0)


class DepartmentUpdate(ApiModel):
    """Update department; omitted fields are left unchanged"""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    parent_id: str | None = None
    budget_limit: float | None = Field(None, ge=0)


class ParentOption(ApiModel):
    id: str
    name: str
    depth: int = 0


class DepartmentPage(ApiModel):
    departments: list[Department] = Field(default_factory=list)
    total_count: int = 0
    actions: list[PageAction] = Field(default_factory=list)

"""Department tree models."""

from typing import Any
from pydantic import Field, model_validator

from carpool_console.models.base import ApiModel, TimestampMixin, lift_counts
from carpool_console.models.enterprise import Enterprise


class DepartmentGroup(ApiModel):
    """A carpool group attached to a department."""

    id: str
    name: str
    description: str | None = None
    max_members: int = 0
    status: str = "active"


class Department(TimestampMixin):
    """
    Node of an enterprise's department tree.

    The platform returns roots with their children nested. Cycles are not
    checked by anything the console can see, so the console itself never
    offers a department or one of its descendants as its new parent.
    """

    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None
    budget_limit: float | None = None
    children: list["Department"] = Field(default_factory=list)
    groups: list[DepartmentGroup] = Field(default_factory=list)
    child_count: int = 0
    group_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _lift_counts(cls, data: Any) -> Any:
        return lift_counts(data, {"children": "childCount", "groups": "groupCount"})

    def walk(self):
        """Yield this department and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def descendant_ids(self) -> set[str]:
        return {department.id for department in self.walk() if department.id != self.id}


class DepartmentTree(ApiModel):
    """Payload of the departments endpoint."""

    enterprise: Enterprise
    departments: list[Department] = Field(default_factory=list)
    total_count: int = 0

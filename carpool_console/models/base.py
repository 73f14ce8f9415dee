from datetime import datetime
from typing import Any
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for every shape exchanged with the platform API or the console UI.

    Fields are snake_case in Python and camelCase on the wire; both
    spellings are accepted when parsing.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_payload(self) -> dict:
        """Serialize for a platform request body (camelCase, no nulls)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TimestampMixin(ApiModel):
    """Audit timestamps the platform attaches to most entities."""

    created_at: datetime | None = None
    updated_at: datetime | None = None


def lift_counts(data: Any, mapping: dict[str, str]) -> Any:
    """
    Copy entries of the platform's ``_count`` object onto top-level fields.

    Example: ``{"_count": {"groups": 2}}`` with ``{"groups": "groupCount"}``
    becomes ``{"_count": {...}, "groupCount": 2}``. Explicit top-level
    values win, and the first matching source wins for a shared target.
    """
    if not isinstance(data, dict) or not isinstance(data.get("_count"), dict):
        return data

    counts = data["_count"]
    lifted = dict(data)
    for source, target in mapping.items():
        if source in counts:
            lifted.setdefault(target, counts[source])
    return lifted

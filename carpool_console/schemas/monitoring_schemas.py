from pydantic import Field

from carpool_console.models.alert import AlertSummary
from carpool_console.models.base import ApiModel
from carpool_console.models.model_health import ModelHealth, ModelStatus
from carpool_console.schemas.common_schemas import PageAction


class AlertPage(ApiModel):
    summary: AlertSummary
    refresh_seconds: float
    actions: list[PageAction] = Field(default_factory=list)


class ModelPage(ApiModel):
    group_id: str
    models: list[ModelHealth] = Field(default_factory=list)
    status: ModelStatus = Field(default_factory=ModelStatus)
    refresh_seconds: float
    actions: list[PageAction] = Field(default_factory=list)


class ModelSwitchRequest(ApiModel):
    target_model: str = Field(..., min_length=1)
    reason: str = "manual"

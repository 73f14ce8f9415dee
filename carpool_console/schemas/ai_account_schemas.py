from pydantic import Field, model_validator

from carpool_console.models.ai_account import AiAccount, AuthType, Credentials, ProxyConfig
from carpool_console.models.base import ApiModel
from carpool_console.schemas.common_schemas import PageAction


class AiAccountCreate(ApiModel):
    """
    Create an AI account from a form (ADMIN or OWNER).

    The credential variant must match ``auth_type``.
    """

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    platform: str = Field(..., min_length=1)
    auth_type: AuthType = AuthType.API_KEY
    credentials: Credentials
    proxy: ProxyConfig | None = None
    daily_limit: int = Field(0, ge=0)
    cost_per_token: float = Field(0, ge=0)

    @model_validator(mode="after")
    def _credentials_match_auth_type(self) -> "AiAccountCreate":
        if self.credentials.type != self.auth_type.value:
            raise ValueError(f"{self.auth_type.value} accounts need {self.auth_type.value} credentials")
        return self


class AiAccountEnabledUpdate(ApiModel):
    is_enabled: bool


class AiAccountPage(ApiModel):
    accounts: list[AiAccount] = Field(default_factory=list)
    actions: list[PageAction] = Field(default_factory=list)

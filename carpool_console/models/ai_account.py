"""AI provider account models, with credentials as a tagged union."""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Annotated, Any, Literal, Union
from pydantic import AliasChoices, Field, model_validator

from carpool_console.models.base import ApiModel, TimestampMixin, lift_counts


class AuthType(str, PyEnum):
    OAUTH = "oauth"
    API_KEY = "api_key"


class ProxyType(str, PyEnum):
    HTTP = "http"
    HTTPS = "https"
    SOCKS5 = "socks5"


class ProxyConfig(ApiModel):
    """Outbound proxy an account's traffic is routed through."""

    type: ProxyType = ProxyType.HTTP
    host: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    username: str | None = None
    password: str | None = None


class ApiKeyCredentials(ApiModel):
    type: Literal["api_key"] = "api_key"
    api_key: str = Field(..., min_length=1)


class OAuthCredentials(ApiModel):
    type: Literal["oauth"] = "oauth"
    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    expires_at: datetime | None = None


Credentials = Annotated[Union[ApiKeyCredentials, OAuthCredentials], Field(discriminator="type")]


class BoundGroup(ApiModel):
    """A carpool group an account is bound to."""

    id: str
    name: str | None = None
    priority: int | None = None
    is_active: bool = True


class AiAccount(TimestampMixin):
    """
    Credential set for one external AI provider.

    Accounts can only be deleted once no pool or group binds them; the
    platform answers 409 otherwise, and the console refuses up front when
    the bindings are known. The account list carries ``boundGroups``;
    ``_count`` binding counts are honoured when present.

    Credentials are accepted when parsing but never serialized back out.
    """

    id: str
    name: str
    description: str | None = None
    platform: str = Field(validation_alias=AliasChoices("platform", "serviceType", "service_type"))
    auth_type: AuthType = AuthType.API_KEY
    status: str = "active"
    is_enabled: bool = True
    daily_limit: int = 0
    cost_per_token: float = 0
    proxy: ProxyConfig | None = None
    credentials: Credentials | None = Field(default=None, exclude=True)
    bound_groups: list[BoundGroup] = Field(default_factory=list)
    group_binding_count: int = 0
    pool_binding_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _lift_counts(cls, data: Any) -> Any:
        return lift_counts(
            data,
            {"groupBindings": "groupBindingCount", "poolBindings": "poolBindingCount"},
        )

    @model_validator(mode="after")
    def _count_bound_groups(self) -> "AiAccount":
        self.group_binding_count = max(self.group_binding_count, len(self.bound_groups))
        return self

    @property
    def is_bound(self) -> bool:
        return self.group_binding_count > 0 or self.pool_binding_count > 0

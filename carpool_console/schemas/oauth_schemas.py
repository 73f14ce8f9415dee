from typing import Any
from pydantic import Field

from carpool_console.models.ai_account import ProxyConfig
from carpool_console.models.base import ApiModel


class GenerateAuthUrlRequest(ApiModel):
    platform: str = Field(..., min_length=1)
    proxy: ProxyConfig | None = None


class AuthUrlResponse(ApiModel):
    auth_url: str
    session_id: str


class ExchangeCodeRequest(ApiModel):
    """
    Second step of the linking flow.

    Carries back the url and session from the first step together with
    the code (or, for Gemini, the whole redirect URL) the user pasted.
    """

    platform: str = Field(..., min_length=1)
    auth_url: str = ""
    session_id: str = ""
    auth_code: str = ""
    account_name: str | None = None
    description: str | None = None
    account_type: str = "shared"


class OAuthLinkResult(ApiModel):
    linked: bool
    account: dict[str, Any] | None = None

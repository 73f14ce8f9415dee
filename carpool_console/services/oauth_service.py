import json
import logging
import re
import time
from enum import Enum as PyEnum
from urllib.parse import parse_qs, urlparse

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ApiRequestError, ForbiddenException
from carpool_console.models.ai_account import ProxyConfig
from carpool_console.models.enterprise_context import EnterpriseContext
from carpool_console.repositories.oauth_repository import OAuthRepository

logger = logging.getLogger(__name__)

PLATFORM_NAMES = {"claude": "Claude", "gemini": "Gemini", "ampcode": "AMPCode"}

NETWORK_ERROR_MESSAGE = "网络连接失败，请检查网络连接后重试"

# (substrings, user-facing message), first match wins
ERROR_MESSAGES = [
    (("Invalid 'code' in request",), "授权码无效，请检查是否复制了完整正确的授权码"),
    (("OAuth session", "expired"), "授权会话已过期，请重新生成授权链接"),
    (("Network Error", "fetch"), NETWORK_ERROR_MESSAGE),
    (("401", "Unauthorized"), "认证失败，请重新登录后重试"),
    (("403", "Forbidden"), "权限不足，请检查账户权限设置"),
    (("500", "Internal Server Error"), "服务器内部错误，请稍后重试"),
]
TECHNICAL_MARKERS = ("stack", "TypeError", "undefined", "Traceback")


def format_error_message(error: Exception | str | None, default_message: str) -> str:
    """
    Turn an OAuth failure into a message fit to show the user.

    Known failures map to fixed messages. Anything empty, longer than 200
    characters or full of technical detail becomes ``default_message``.
    """
    if isinstance(error, ApiRequestError):
        if error.network_error:
            return NETWORK_ERROR_MESSAGE
        message = error.message
    elif isinstance(error, (str, Exception)):
        message = str(error)
    else:
        return default_message

    # a JSON error body may be embedded in the text
    if "{" in message and "}" in message:
        try:
            parsed = json.loads(message[message.index("{"):])
            if isinstance(parsed, dict):
                message = parsed.get("error") or parsed.get("message") or message
        except ValueError:
            pass

    message = re.sub(r"^HTTP \d+:\s*", "", message)
    message = re.sub(r"^Error:\s*", "", message).strip()

    for markers, friendly in ERROR_MESSAGES:
        if any(marker in message for marker in markers):
            return friendly

    if (
        not message
        or len(message) > 200
        or any(marker in message for marker in TECHNICAL_MARKERS)
        or re.fullmatch(r"[{\[].*[}\]]", message, re.DOTALL)
    ):
        return default_message
    return message


class OAuthState(str, PyEnum):
    AWAITING_URL = "awaiting_url"
    AWAITING_CODE = "awaiting_code"


class OAuthLinkFlow:
    """
    Links an AI provider account to a carpool group by OAuth.

    Two steps: ``generate_auth_url()`` gets a provider URL and an opaque
    session id; the user authorizes, pastes the code back through
    ``set_auth_code()``, and ``exchange_code()`` lets the platform create
    the account. No timeouts or retries; failures carry a user-facing
    message (see ``format_error_message``).
    """

    def __init__(
        self,
        client: PlatformApiClient,
        context: EnterpriseContext,
        group_id: str,
        platform: str,
        proxy: ProxyConfig | None = None,
    ):
        self.context = context
        self.oauth_repo = OAuthRepository(client, group_id)
        self.group_id = group_id
        self.platform = platform.lower()
        self.proxy = proxy
        self.auth_url = ""
        self.session_id = ""
        self.auth_code = ""
        self.error: str | None = None
        self.linked_account: dict | None = None

    @classmethod
    def resume(
        cls,
        client: PlatformApiClient,
        context: EnterpriseContext,
        group_id: str,
        platform: str,
        auth_url: str,
        session_id: str,
    ) -> "OAuthLinkFlow":
        """Rebuild a flow whose first step happened in an earlier request."""
        flow = cls(client, context, group_id, platform)
        flow.auth_url = auth_url
        flow.session_id = session_id
        return flow

    @property
    def state(self) -> OAuthState:
        return OAuthState.AWAITING_CODE if self.auth_url else OAuthState.AWAITING_URL

    @property
    def display_name(self) -> str:
        return PLATFORM_NAMES.get(self.platform, self.platform.title())

    @property
    def can_exchange(self) -> bool:
        return bool(self.auth_url) and bool(self.auth_code.strip())

    def _check_can_link(self) -> None:
        if not self.context.is_admin_or_higher():
            raise ForbiddenException("Only admins and owners can link AI accounts")

    async def generate_auth_url(self) -> str:
        """
        Ask the platform for an authorization URL.

        Raises:
            ForbiddenException: If user lacks admin permissions
            ApiRequestError: With a user-facing message on failure
        """
        self._check_can_link()
        self.error = None
        payload = {"serviceType": self.platform}
        if self.proxy is not None:
            payload["proxy"] = self.proxy.to_payload()

        try:
            data = await self.oauth_repo.generate_auth_url(payload)
            if not data.get("authUrl"):
                raise ApiRequestError("生成授权链接失败")
        except ApiRequestError as e:
            self.error = format_error_message(e, "生成授权链接失败")
            logger.warning(f"OAuth url for group {self.group_id} ({self.platform}) failed: {e.message}")
            raise ApiRequestError(self.error, status_code=e.status_code) from e

        self.auth_url = data["authUrl"]
        self.session_id = data.get("sessionId", "")
        return self.auth_url

    def set_auth_code(self, value: str) -> str:
        """
        Store the pasted code.

        Gemini redirects to a localhost URL; when such a URL is pasted its
        ``code`` query parameter is kept instead.
        """
        value = (value or "").strip()
        if self.platform == "gemini" and value.startswith(("http://", "https://")):
            code = parse_qs(urlparse(value).query).get("code")
            if code and code[0]:
                value = code[0]
        self.auth_code = value
        return self.auth_code

    async def exchange_code(
        self,
        account_name: str | None = None,
        description: str | None = None,
        account_type: str = "shared",
    ) -> dict | None:
        """
        Exchange the code for a linked account.

        Returns:
            The platform's result, or None without any call when there is
            no URL or no code yet

        Raises:
            ForbiddenException: If user lacks admin permissions
            ApiRequestError: With a user-facing message on failure
        """
        if not self.can_exchange:
            return None
        self._check_can_link()
        self.error = None

        payload = {
            "sessionId": self.session_id,
            "authCodeOrUrl": self.auth_code.strip(),
            "accountName": account_name or f"{self.display_name} Account {int(time.time() * 1000)}",
            "description": description or f"通过OAuth授权创建的{self.display_name}账户",
            "accountType": account_type,
        }
        try:
            self.linked_account = await self.oauth_repo.exchange_code(payload) or {}
        except ApiRequestError as e:
            self.error = format_error_message(e, "授权失败")
            logger.warning(f"OAuth exchange for group {self.group_id} ({self.platform}) failed: {e.message}")
            raise ApiRequestError(self.error, status_code=e.status_code) from e

        logger.info(f"{self.display_name} account linked to group {self.group_id}")
        return self.linked_account

    async def regenerate(self) -> str:
        """Drop url, code and error and start over."""
        self.auth_url = ""
        self.auth_code = ""
        self.error = None
        return await self.generate_auth_url()

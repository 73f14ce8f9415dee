import httpx
import pytest

from carpool_console.api_client import PlatformApiClient
from carpool_console.core.exceptions import ApiRequestError, ForbiddenException
from carpool_console.core.security import TokenStore
from carpool_console.models.ai_account import ProxyConfig
from carpool_console.services.oauth_service import OAuthLinkFlow, OAuthState, format_error_message

OAUTH_PATH = "/api/groups/g-1/ai-accounts/oauth"


class TestFormatErrorMessage:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Invalid 'code' in request", "授权码无效，请检查是否复制了完整正确的授权码"),
            ("OAuth session not found", "授权会话已过期，请重新生成授权链接"),
            ("token expired", "授权会话已过期，请重新生成授权链接"),
            ("Network Error", "网络连接失败，请检查网络连接后重试"),
            ("HTTP 401: Unauthorized", "认证失败，请重新登录后重试"),
            ("Forbidden", "权限不足，请检查账户权限设置"),
            ("Internal Server Error", "服务器内部错误，请稍后重试"),
        ],
    )
    def test_known_failures(self, raw, expected):
        assert format_error_message(raw, "默认") == expected

    def test_json_body_in_message(self):
        assert format_error_message('Error: {"error": "Quota exhausted"}', "默认") == "Quota exhausted"

    def test_prefixes_stripped(self):
        assert format_error_message("Error: Proxy refused", "默认") == "Proxy refused"

    @pytest.mark.parametrize("raw", ["", "x" * 201, "TypeError: cannot read", "[1, 2]"])
    def test_unhelpful_text_falls_back_to_default(self, raw):
        assert format_error_message(raw, "默认") == "默认"

    def test_api_error_and_none(self):
        assert format_error_message(ApiRequestError("Proxy refused", 400), "默认") == "Proxy refused"
        assert format_error_message(None, "默认") == "默认"


class TestAuthCode:
    def test_gemini_url_code_extracted(self, api_client, admin_context):
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "gemini")

        code = flow.set_auth_code(" http://localhost:45462/?state=s&code=4%2F0Abc-123&scope=x ")

        assert code == "4/0Abc-123"

    def test_gemini_url_without_code_kept(self, api_client, admin_context):
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "gemini")
        assert flow.set_auth_code("http://localhost:45462/?state=s") == "http://localhost:45462/?state=s"

    def test_claude_keeps_url_as_is(self, api_client, admin_context):
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "claude")
        assert flow.set_auth_code("https://console.test/cb?code=abc") == "https://console.test/cb?code=abc"


class TestOAuthLinkFlow:
    async def test_exchange_is_noop_without_url(self, api_client, platform, admin_context):
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "claude")
        flow.set_auth_code("code-1")

        assert flow.state is OAuthState.AWAITING_URL
        assert not flow.can_exchange
        assert await flow.exchange_code() is None
        assert platform.calls == []

    async def test_exchange_is_noop_without_code(self, api_client, platform, admin_context):
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "claude")
        await flow.generate_auth_url()
        flow.set_auth_code("   ")

        assert await flow.exchange_code() is None
        assert platform.paths() == [f"{OAUTH_PATH}/generate-auth-url"]

    async def test_full_flow(self, api_client, platform, admin_context):
        flow = OAuthLinkFlow(
            api_client, admin_context, "g-1", "claude", proxy=ProxyConfig(host="proxy.local", port=8080)
        )

        url = await flow.generate_auth_url()
        assert url.startswith("https://auth.claude.test/")
        assert flow.state is OAuthState.AWAITING_CODE
        assert flow.session_id == "sess-1"

        flow.set_auth_code("code-xyz")
        account = await flow.exchange_code()

        assert account["id"] == "acc-linked"
        assert flow.linked_account == account
        sent = platform.exchanges[0]
        assert sent["sessionId"] == "sess-1"
        assert sent["authCodeOrUrl"] == "code-xyz"
        assert sent["accountName"].startswith("Claude Account ")
        assert sent["description"] == "通过OAuth授权创建的Claude账户"
        assert sent["accountType"] == "shared"

    async def test_exchange_failure_formatted(self, api_client, admin_context):
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "claude")
        await flow.generate_auth_url()
        flow.set_auth_code("bad-code")

        with pytest.raises(ApiRequestError) as exc_info:
            await flow.exchange_code()

        assert exc_info.value.message == "授权码无效，请检查是否复制了完整正确的授权码"
        assert exc_info.value.status_code == 400
        assert flow.error == exc_info.value.message

    async def test_generate_failure_formatted(self, api_client, platform, admin_context):
        platform.failures[("POST", f"{OAUTH_PATH}/generate-auth-url")] = (500, "Internal Server Error")
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "gemini")

        with pytest.raises(ApiRequestError, match="服务器内部错误"):
            await flow.generate_auth_url()

        assert flow.state is OAuthState.AWAITING_URL

    async def test_unreachable_platform_reported_as_network_failure(self, admin_context):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = PlatformApiClient(
            TokenStore("token-abc"), base_url="http://platform.test", transport=httpx.MockTransport(handler)
        )
        async with client:
            flow = OAuthLinkFlow(client, admin_context, "g-1", "claude")
            with pytest.raises(ApiRequestError) as exc_info:
                await flow.generate_auth_url()

        assert exc_info.value.message == "网络连接失败，请检查网络连接后重试"
        assert exc_info.value.status_code is None
        assert flow.error == exc_info.value.message

    async def test_regenerate_clears_code_and_error(self, api_client, platform, admin_context):
        flow = OAuthLinkFlow(api_client, admin_context, "g-1", "claude")
        await flow.generate_auth_url()
        flow.set_auth_code("bad-code")
        with pytest.raises(ApiRequestError):
            await flow.exchange_code()

        await flow.regenerate()

        assert flow.auth_code == ""
        assert flow.error is None
        assert flow.state is OAuthState.AWAITING_CODE
        assert platform.paths().count(f"{OAUTH_PATH}/generate-auth-url") == 2

    async def test_member_cannot_link(self, api_client, platform, member_context):
        flow = OAuthLinkFlow(api_client, member_context, "g-1", "claude")

        with pytest.raises(ForbiddenException):
            await flow.generate_auth_url()

        assert platform.calls == []


class TestOAuthRoutes:
    def test_two_step_linking(self, client, platform, auth_headers):
        base = "/api/console/enterprises/ent-1/groups/g-1/oauth"

        step_one = client.post(f"{base}/generate-auth-url", json={"platform": "gemini"}, headers=auth_headers)
        assert step_one.status_code == 200
        started = step_one.json()

        step_two = client.post(
            f"{base}/exchange-code",
            json={
                "platform": "gemini",
                "authUrl": started["authUrl"],
                "sessionId": started["sessionId"],
                "authCode": "http://localhost:45462/?code=gem-code&scope=all",
            },
            headers=auth_headers,
        )

        assert step_two.status_code == 200
        assert step_two.json()["linked"] is True
        assert platform.exchanges[0]["authCodeOrUrl"] == "gem-code"
        assert platform.exchanges[0]["accountName"].startswith("Gemini Account ")

    def test_exchange_without_code_is_400(self, client, platform, auth_headers):
        response = client.post(
            "/api/console/enterprises/ent-1/groups/g-1/oauth/exchange-code",
            json={"platform": "claude", "authUrl": "https://auth.claude.test/a", "sessionId": "sess-1"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert platform.exchanges == []

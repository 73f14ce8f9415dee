import httpx
import pytest

from carpool_console.api_client import DEFAULT_ERROR_MESSAGE, PlatformApiClient
from carpool_console.core.exceptions import ApiRequestError, UnauthorizedException
from carpool_console.core.security import TokenStore

BASE_URL = "http://platform.test"


def make_client(handler, token: str | None = "token-abc") -> PlatformApiClient:
    return PlatformApiClient(TokenStore(token), base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestEnvelope:
    async def test_returns_data_of_successful_envelope(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "data": {"id": "ent-1"}})

        async with make_client(handler) as client:
            assert await client.get("/api/enterprises/ent-1") == {"id": "ent-1"}

    async def test_attaches_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json={"success": True, "data": None})

        async with make_client(handler) as client:
            await client.get("/api/user/enterprises")

        assert seen["auth"] == "Bearer token-abc"

    async def test_success_false_raises_with_backend_error(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "Quota reached"})

        async with make_client(handler) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.post("/api/x", json={})

        assert exc_info.value.message == "Quota reached"
        assert exc_info.value.status_code == 200

    async def test_non_2xx_uses_message_field(self):
        def handler(request):
            return httpx.Response(409, json={"success": False, "message": "Account still bound"})

        async with make_client(handler) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.delete("/api/x")

        assert exc_info.value.message == "Account still bound"
        assert exc_info.value.status_code == 409

    async def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        async with make_client(handler) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.get("/api/x")

        assert exc_info.value.message == "Bad Gateway"
        assert exc_info.value.status_code == 502

    async def test_empty_error_body_gets_default_message(self):
        def handler(request):
            return httpx.Response(500, json={"success": False})

        async with make_client(handler) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.get("/api/x")

        assert exc_info.value.message == DEFAULT_ERROR_MESSAGE

    async def test_network_error_collapses_to_api_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(ApiRequestError) as exc_info:
                await client.get("/api/x")

        assert exc_info.value.message == DEFAULT_ERROR_MESSAGE
        assert exc_info.value.status_code is None
        assert exc_info.value.network_error


class TestAuthentication:
    async def test_401_clears_token_store(self):
        def handler(request):
            return httpx.Response(401, json={"success": False, "error": "Token expired"})

        client = make_client(handler)
        async with client:
            with pytest.raises(UnauthorizedException, match="Token expired"):
                await client.get("/api/x")

        assert not client.token_store
        assert client.token_store.get() is None

    async def test_no_token_raises_without_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"success": True})

        async with make_client(handler, token=None) as client:
            with pytest.raises(UnauthorizedException):
                await client.get("/api/x")

        assert calls == []

    async def test_token_read_on_every_request(self):
        seen = []

        def handler(request):
            seen.append(request.headers.get("authorization"))
            return httpx.Response(200, json={"success": True, "data": None})

        client = make_client(handler)
        async with client:
            await client.get("/api/x")
            client.token_store.set("token-new")
            await client.get("/api/x")

        assert seen == ["Bearer token-abc", "Bearer token-new"]


async def test_none_query_params_dropped():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"success": True, "data": None})

    async with make_client(handler) as client:
        await client.delete("/api/x", params={"roleId": "r-1", "groupId": None})

    assert seen["params"] == {"roleId": "r-1"}

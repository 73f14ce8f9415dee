import logging
from typing import Any

import httpx

from carpool_console.config import settings
from carpool_console.core.exceptions import ApiRequestError, UnauthorizedException
from carpool_console.core.security import TokenStore

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Operation failed"


class BearerTokenAuth(httpx.Auth):
    """Attach the current token from the store to every outgoing request."""

    def __init__(self, token_store: TokenStore):
        self.token_store = token_store

    def auth_flow(self, request: httpx.Request):
        token = self.token_store.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


class PlatformApiClient:
    """
    Async JSON client for the carpool platform REST API.

    Every endpoint answers with the envelope
    ``{"success": bool, "data": ..., "error" | "message": str}``.
    Network failures, non-2xx statuses and ``success: false`` are all raised
    as ApiRequestError; a 401 additionally clears the token store.

    Usage:
        async with PlatformApiClient(TokenStore(token)) as client:
            data = await client.get("/api/user/enterprises")
    """

    def __init__(
        self,
        token_store: TokenStore,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token_store = token_store
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.PLATFORM_API_URL,
            auth=BearerTokenAuth(token_store),
            headers={"Content-Type": "application/json"},
            timeout=timeout or settings.PLATFORM_API_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "PlatformApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """
        Send a request and return the envelope's ``data``.

        Raises:
            UnauthorizedException: No token, or the platform answered 401
            ApiRequestError: Any other failure
        """
        if not self.token_store:
            raise UnauthorizedException("Not authenticated")

        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            logger.error(f"[platform] {method} {path} network error: {e}")
            raise ApiRequestError(DEFAULT_ERROR_MESSAGE, network_error=True) from e

        payload = self._parse_body(response)
        message = payload.get("error") or payload.get("message") or DEFAULT_ERROR_MESSAGE

        if response.status_code == 401:
            logger.warning(f"[platform] {method} {path} rejected token, clearing it")
            self.token_store.clear()
            raise UnauthorizedException(message)

        if response.is_error or not payload.get("success"):
            logger.error(f"[platform] {method} {path} failed ({response.status_code}): {message}")
            raise ApiRequestError(message, status_code=response.status_code)

        return payload.get("data")

    @staticmethod
    def _parse_body(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {"error": response.text.strip() or None}
        return body if isinstance(body, dict) else {"success": False}

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("POST", path, params=params, json=json)

    async def put(self, path: str, json: Any = None, params: dict[str, Any] | None = None) -> Any:
        return await self.request("PUT", path, params=params, json=json)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)

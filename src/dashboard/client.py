"""HTTP helper used by the dashboard to talk to the REST API."""

import logging
from typing import Any

import httpx

from src.core.config import settings
from src.core.exceptions import ApiConnectionError, ApiRequestError


def _error_message(response: httpx.Response) -> str:
    """Human-readable message of a failed response, as sent by the server."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    text = response.text.strip()
    return text or response.reason_phrase or f"HTTP {response.status_code}"


class ApiClient:
    """
    Thin async wrapper over httpx.

    Successful responses are unwrapped from the standard
    ``{"success", "data", "message"}`` envelope. Non-2xx responses raise
    ApiRequestError carrying the server's message verbatim.

    Usage:
        async with ApiClient() as api:
            clients = await api.get("/clients")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.api_timeout_seconds,
        )
        self.logger = logger or logging.getLogger(__name__)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    def url_for(self, path: str) -> str:
        """Absolute URL of an API path (for browser-native navigation such as downloads)."""
        return f"{self.base_url}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            response = await self.http.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            self.logger.warning("%s %s failed: %s", method, path, e)
            raise ApiConnectionError(str(e) or "Could not reach the server")

        self.logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.is_error:
            message = _error_message(response)
            raise ApiRequestError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        body = response.json()
        if isinstance(body, dict) and "success" in body and "data" in body:
            return body["data"]
        return body

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

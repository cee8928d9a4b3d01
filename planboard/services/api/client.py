"""Shared async HTTP client for the remote task/owner/team/status/holiday APIs."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Self

import httpx

from planboard.core.config import settings
from planboard.core.logging import get_logger
from planboard.services.api.errors import ApiError, NetworkError, error_for_status

logger = get_logger(__name__)

_JSON_CONTENT_TYPE = "application/json"


def _error_details(response: httpx.Response) -> tuple[str | None, object]:
    content_type = response.headers.get("content-type", "")
    if _JSON_CONTENT_TYPE in content_type:
        try:
            data = response.json()
        except ValueError:
            return None, None
        if isinstance(data, dict):
            message = data.get("message") or data.get("error")
            return (str(message) if message else None), data
        return None, data
    text = response.text.strip()
    return (text or None), None


def decode_response(response: httpx.Response) -> Any:
    """Return the decoded body, raising the mapped :class:`ApiError` on failure.

    Empty or non-JSON success bodies (typical for DELETE) decode to
    ``{"success": True}``.
    """
    if response.is_error:
        message, data = _error_details(response)
        raise error_for_status(response.status_code, message, data)
    if response.status_code == 204 or not response.content:
        return {"success": True}
    if _JSON_CONTENT_TYPE in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("Malformed JSON response", response.status_code) from exc
    return {"success": True}


class ApiClient:
    """Thin wrapper over :class:`httpx.AsyncClient` with typed error mapping.

    Relative paths resolve against ``settings.api_base_url``; absolute URLs
    (the public holiday calendar) are requested as-is.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": _JSON_CONTENT_TYPE}
        bearer = settings.api_token if token is None else token
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        self.timeout = settings.request_timeout_seconds if timeout is None else timeout
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.api_base_url).rstrip("/"),
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, url: str, *, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.TimeoutException as exc:
            logger.warning(
                "api.request.timeout",
                extra={"method": method, "url": url, "timeout": self.timeout},
            )
            raise NetworkError("Request timed out", data={"timeout": self.timeout}) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "api.request.transport_failed",
                extra={"method": method, "url": url, "error": str(exc) or type(exc).__name__},
            )
            raise NetworkError(str(exc) or None) from exc
        try:
            return decode_response(response)
        except ApiError as exc:
            logger.warning(
                "api.request.failed",
                extra={"method": method, "url": url, "status": exc.status, "error": exc.message},
            )
            raise

    async def get(self, url: str) -> Any:
        return await self.request("GET", url)

    async def post(self, url: str, payload: Any) -> Any:
        return await self.request("POST", url, json=payload)

    async def put(self, url: str, payload: Any) -> Any:
        return await self.request("PUT", url, json=payload)

    async def delete(self, url: str) -> Any:
        return await self.request("DELETE", url)

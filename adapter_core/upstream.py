# =============================================================================
# adapter_core/upstream.py  —  Upstream HTTP Client
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Wraps an httpx.AsyncClient pointed at ONE third-party API.  Each adapter
#   server builds exactly one UpstreamClient at startup with its base URL and
#   credential, and every tool handler issues its requests through it.
#
# CONTRACT:
#   await client.call(method, path, params=..., json=...)  →  decoded JSON
#
#   Failures are raised as typed ToolErrors so the envelope can word them:
#     404                 → UpstreamError(not found)
#     5xx                 → UpstreamError(service unavailable)
#     other non-2xx       → UpstreamError("<label> error: <status> <detail>")
#     DNS / refused / timeout → ConnectivityError
#
#   One attempt per call.  No retries, no caching.
# =============================================================================

import logging
from typing import Any, Mapping

import httpx

from adapter_core.errors import ConnectivityError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# JSON fields that different APIs use for a human-readable error message.
_MESSAGE_FIELDS = ("message", "detail", "error_message", "title")


class UpstreamClient:
    def __init__(
        self,
        base_url: str,
        *,
        label: str = "Upstream API",
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        not_found_message: str | None = None,
        unavailable_message: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.label = label
        self.not_found_message = not_found_message
        self.unavailable_message = unavailable_message
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=dict(headers or {}),
            params=dict(params or {}),
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._http.base_url)

    @property
    def closed(self) -> bool:
        return self._http.is_closed

    async def call(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Issue one request and return the decoded body.

        ``None`` values are dropped from ``params`` and from a dict ``json``
        body so handlers can pass optional arguments straight through.
        """
        query = _drop_none(params) if params else None
        body = _drop_none(json) if isinstance(json, Mapping) else json

        logger.debug("%s %s %s params=%s", self.label, method, path, query)
        try:
            response = await self._http.request(method, path, params=query, json=body)
        except httpx.TimeoutException as e:
            raise ConnectivityError(f"Request to {self.label} timed out. Please try again later.") from e
        except httpx.TransportError as e:
            raise ConnectivityError(
                f"Unable to connect to {self.label}. Please check your internet connection."
            ) from e

        if not response.is_success:
            raise UpstreamError(self._error_message(response), response.status_code)

        return _decode(response)

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.call("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: Mapping[str, Any] | None = None) -> Any:
        return await self.call("POST", path, params=params, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.call("PATCH", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.call("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.call("DELETE", path)

    def _error_message(self, response: httpx.Response) -> str:
        status = response.status_code
        detail = _extract_message(response)
        if status == 404:
            return self.not_found_message or detail or "Resource not found"
        if status >= 500:
            return self.unavailable_message or f"{self.label} temporarily unavailable"
        return f"{self.label} error: {status} {detail or response.reason_phrase}".rstrip()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _drop_none(mapping: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in mapping.items() if value is not None}


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _extract_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, Mapping):
        return None
    for key in _MESSAGE_FIELDS:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None

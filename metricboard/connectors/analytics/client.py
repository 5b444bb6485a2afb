"""Metricboard — Analytics Backend Client.

Thin async HTTP client for the analytics backend. One request per logical
fetch; failures surface to the caller as AnalyticsAPIError.
"""

import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from metricboard.config import settings
from metricboard.core.logging import get_logger

logger = get_logger("analytics.client")


class AnalyticsAPIError(Exception):
    """Raised when the analytics backend fails or returns an error."""

    def __init__(self, message: str, status_code: int = 500):
        self.status_code = status_code
        super().__init__(message)


def company_path(company: str, resource: str = "") -> str:
    """Build ``/api/companies/<company>/<resource>`` with the name URL-encoded."""
    path = f"/api/companies/{quote(company, safe='')}"
    return f"{path}/{resource}" if resource else path


class AnalyticsClient:
    """Async HTTP client for the analytics backend."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.analytics_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "AnalyticsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ── Core Request Method ──

    async def request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
        json: Dict[str, Any] | None = None,
    ) -> Any:
        """Make a single request and return the decoded JSON body."""
        client = await self._get_client()
        params = {k: v for k, v in (params or {}).items() if v is not None}
        started = time.perf_counter()

        try:
            resp = await client.request(method, path, params=params or None, json=json)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = _json_or_empty(e.response)
            message = (
                body.get("error") if isinstance(body, dict) else None
            ) or str(e)
            logger.error(
                f"Backend {method} {path} returned {e.response.status_code}: {message}",
                extra={"endpoint": path, "status_code": e.response.status_code},
            )
            raise AnalyticsAPIError(message, e.response.status_code) from e
        except httpx.TimeoutException as e:
            logger.error(f"Backend {method} {path} timed out after {self.timeout}s")
            raise AnalyticsAPIError(f"Request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            logger.error(f"Backend {method} {path} unreachable: {e}")
            raise AnalyticsAPIError(f"Connection failed: {e}") from e

        duration = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            f"{method} {path} → {resp.status_code}",
            extra={"endpoint": path, "status_code": resp.status_code, "duration_ms": duration},
        )
        try:
            return resp.json()
        except ValueError as e:
            raise AnalyticsAPIError(f"Invalid JSON from backend for {path}", 502) from e

    async def get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, payload: Dict[str, Any]) -> Any:
        return await self.request("POST", path, json=payload)


def _json_or_empty(response: httpx.Response) -> Any:
    if not response.headers.get("content-type", "").startswith("application/json"):
        return {}
    try:
        return response.json()
    except ValueError:
        return {}

"""Metricboard — Shared API Dependencies."""

from fastapi import HTTPException

from metricboard.connectors.analytics.client import AnalyticsAPIError, AnalyticsClient
from metricboard.connectors.analytics.endpoints import AnalyticsEndpoints


async def get_backend():
    """Dependency — yields backend endpoints bound to a fresh client."""
    client = AnalyticsClient()
    try:
        yield AnalyticsEndpoints(client)
    finally:
        await client.close()


def backend_http_error(e: AnalyticsAPIError, what: str) -> HTTPException:
    """Translate a backend failure into the matching HTTP error."""
    return HTTPException(status_code=e.status_code, detail=f"Failed to fetch {what}: {e}")

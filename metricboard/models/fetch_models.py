"""Metricboard — Per-Fetch Result Values.

Each backend fetch resolves to its own FetchResult instead of toggling shared
loading/error flags, so one failed section never blanks another.
"""

import asyncio
import time
from typing import Any, Awaitable, Dict, Optional

from pydantic import BaseModel

from metricboard.core.logging import get_logger

logger = get_logger("models.fetch")


class FetchResult(BaseModel):
    """Outcome of one independent backend fetch."""

    status: str  # "success" | "error"
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == "success"


async def run_fetch(name: str, fetch: Awaitable[Any]) -> FetchResult:
    """Await one fetch and capture its outcome as a value."""
    started = time.perf_counter()
    try:
        data = await fetch
    except Exception as e:
        duration = round((time.perf_counter() - started) * 1000, 2)
        logger.warning(
            f"Fetch '{name}' failed: {e}",
            extra={"endpoint": name, "duration_ms": duration},
        )
        return FetchResult(
            status="error",
            error=str(e),
            status_code=getattr(e, "status_code", None),
            duration_ms=duration,
        )
    duration = round((time.perf_counter() - started) * 1000, 2)
    return FetchResult(status="success", data=data, duration_ms=duration)


async def gather_fetches(**fetches: Awaitable[Any]) -> Dict[str, FetchResult]:
    """Run named fetches concurrently; each settles independently."""
    names = list(fetches)
    results = await asyncio.gather(*(run_fetch(n, fetches[n]) for n in names))
    return dict(zip(names, results))

"""Metricboard — Chart Series API Routes."""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from metricboard.analyzer.cluster_engine import ClusterRow, InvalidClusterPayload, transform_clusters
from metricboard.analyzer.efficiency_engine import annotate_efficiency
from metricboard.analyzer.series_builder import build_series
from metricboard.api.deps import backend_http_error, get_backend
from metricboard.connectors.analytics.client import AnalyticsAPIError
from metricboard.connectors.analytics.endpoints import AnalyticsEndpoints
from metricboard.connectors.analytics.transformer import to_entities
from metricboard.core.logging import get_logger
from metricboard.models.series_models import SeriesTable

logger = get_logger("api.series")

router = APIRouter(prefix="/api", tags=["Series"])


# ── Request / Response Models ──


class BuildSeriesRequest(BaseModel):
    """Request body for POST /api/series/build."""

    entities: List[Any] = []
    """Entities as ``{id, monthlyRecords}``; backend shapes are accepted too."""
    metric: Optional[str] = None
    """roi | conversion_rate | conversion | acquisition_cost | acquisition | ctr | spend | cpa"""
    reference_year: Optional[int] = Field(None, ge=1970, le=9999)
    """Year for the month keys; defaults to the configured reference year."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "entities": [
                        {"id": "A", "monthlyRecords": [{"month": 1, "roi": 2.5}]},
                        {"id": "B", "monthlyRecords": [{"month": 2, "roi": 3.0}]},
                    ],
                    "metric": "roi",
                    "reference_year": 2024,
                }
            ]
        }
    }


class ClustersResponse(BaseModel):
    """Response for GET /audiences/clusters."""

    company: str
    clusters: List[ClusterRow]


# ── Endpoints ──


@router.post("/series/build")
async def build_series_from_payload(request: BuildSeriesRequest):
    """Build a chart table from posted entities. No backend call."""
    table = build_series(request.entities, request.metric, request.reference_year)
    return table.model_dump()


async def _monthly_series(
    fetch, company: str, kind: str, metric: Optional[str], year: Optional[int]
) -> SeriesTable:
    try:
        payload = await fetch
    except AnalyticsAPIError as e:
        raise backend_http_error(e, f"{kind} monthly metrics")
    entities, dropped = to_entities(payload, kind)
    table = build_series(entities, metric, year)
    table.skipped += dropped
    logger.info(
        f"Served {table.metric} series for {len(entities)} {kind}s",
        extra={"company": company, "skipped": table.skipped},
    )
    return table


@router.get("/companies/{company}/audiences/monthly_series")
async def audience_monthly_series(
    company: str,
    metric: Optional[str] = Query(None, description="Chart metric; unknown names fall back to roi"),
    year: Optional[int] = Query(None, ge=1970, le=9999, description="Year for the month keys"),
    audience_ids: Optional[List[str]] = Query(None),
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    """Monthly audience trend, one column per audience."""
    table = await _monthly_series(
        backend.audience_monthly_metrics(company, audience_ids),
        company,
        "audience",
        metric,
        year,
    )
    return table.model_dump()


@router.get("/companies/{company}/channels/monthly_series")
async def channel_monthly_series(
    company: str,
    metric: Optional[str] = Query(None, description="Chart metric; unknown names fall back to roi"),
    year: Optional[int] = Query(None, ge=1970, le=9999),
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    """Monthly channel trend, one column per channel."""
    table = await _monthly_series(
        backend.channel_monthly_metrics(company), company, "channel", metric, year
    )
    return table.model_dump()


@router.get("/companies/{company}/channels/efficiency")
async def channel_efficiency(
    company: str, backend: AnalyticsEndpoints = Depends(get_backend)
):
    """Channels with estimated spend, median reference lines, and quadrants."""
    try:
        data = await backend.channel_efficiency(company)
    except AnalyticsAPIError as e:
        raise backend_http_error(e, "channel efficiency data")
    if not isinstance(data, dict):
        data = {}
    channels = data.get("channels")
    channels = [c for c in channels if isinstance(c, dict)] if isinstance(channels, list) else []
    return {"company": data.get("company", company), **annotate_efficiency(channels)}


@router.get("/companies/{company}/audiences/clusters", response_model=ClustersResponse)
async def audience_clusters(
    company: str,
    limit: int = Query(5, ge=1, le=100),
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    """High-ROI and high-conversion audience clusters as display rows."""
    try:
        payload = await backend.audience_clusters(company, limit)
    except AnalyticsAPIError as e:
        raise backend_http_error(e, "audience clusters")
    try:
        clusters = transform_clusters(payload)
    except InvalidClusterPayload as e:
        logger.error(f"Cluster payload rejected: {e}", extra={"company": company})
        raise HTTPException(status_code=502, detail=str(e))
    return ClustersResponse(company=company, clusters=clusters)

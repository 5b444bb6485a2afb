"""Metricboard — Company Passthrough API Routes.

Each handler validates its parameters, makes one backend call and returns
the backend's JSON. Backend failures keep the backend's status code.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from metricboard.api.deps import backend_http_error, get_backend
from metricboard.connectors.analytics.client import AnalyticsAPIError
from metricboard.connectors.analytics.endpoints import AnalyticsEndpoints
from metricboard.core.logging import get_logger
from metricboard.models.fetch_models import gather_fetches

logger = get_logger("api.companies")

router = APIRouter(prefix="/api", tags=["Companies"])


class AskRequest(BaseModel):
    """Request body for POST /api/ask."""

    question: str = ""
    company: str = ""


async def _passthrough(fetch, what: str):
    try:
        return await fetch
    except AnalyticsAPIError as e:
        raise backend_http_error(e, what)


# ── Companies ──


@router.get("/companies")
async def list_companies(backend: AnalyticsEndpoints = Depends(get_backend)):
    """All companies, as a bare list."""
    return await _passthrough(backend.list_companies(), "companies")


@router.get("/companies/{company}/monthly_metrics")
async def company_monthly_metrics(
    company: str,
    include_anomalies: bool = False,
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.company_monthly_metrics(company, include_anomalies), "monthly metrics"
    )


@router.get("/companies/{company}/insights")
async def company_insights(company: str, backend: AnalyticsEndpoints = Depends(get_backend)):
    return await _passthrough(backend.insights(company), "insights")


@router.get("/companies/{company}/overview")
async def company_overview(company: str, backend: AnalyticsEndpoints = Depends(get_backend)):
    """Dashboard landing data. Each section reports its own status."""
    results = await gather_fetches(
        monthly_metrics=backend.company_monthly_metrics(company),
        insights=backend.insights(company),
        campaign_rankings=backend.campaign_performance_rankings(company),
        channel_anomalies=backend.channel_anomalies(company),
    )
    failed = [name for name, r in results.items() if not r.ok]
    if failed:
        logger.warning(
            f"Overview for {company} partially failed: {', '.join(failed)}",
            extra={"company": company},
        )
    return {
        "company": company,
        "sections": {name: r.model_dump() for name, r in results.items()},
    }


# ── Audiences ──


@router.get("/companies/{company}/audiences/monthly_metrics")
async def audience_monthly_metrics(
    company: str,
    audience_ids: Optional[list[str]] = Query(None),
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.audience_monthly_metrics(company, audience_ids),
        "audience monthly metrics",
    )


@router.get("/companies/{company}/audiences/performance_matrix")
async def audience_performance_matrix(
    company: str,
    dimension_type: Optional[str] = None,
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.audience_performance_matrix(company, dimension_type),
        "audience performance matrix",
    )


@router.get("/companies/{company}/audience_performance_matrix")
async def audience_matrix_summary(
    company: str, backend: AnalyticsEndpoints = Depends(get_backend)
):
    return await _passthrough(
        backend.audience_matrix_summary(company), "audience performance matrix"
    )


@router.get("/companies/{company}/audience_anomalies")
async def audience_anomalies(
    company: str,
    threshold: float = Query(2.0, gt=0),
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.audience_anomalies(company, threshold), "audience anomalies"
    )


# ── Channels ──


@router.get("/companies/{company}/channels/monthly_metrics")
async def channel_monthly_metrics(
    company: str, backend: AnalyticsEndpoints = Depends(get_backend)
):
    return await _passthrough(
        backend.channel_monthly_metrics(company), "channel monthly metrics"
    )


@router.get("/companies/{company}/channels/performance_matrix")
async def channel_performance_matrix(
    company: str,
    dimension_type: Optional[str] = None,
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.channel_performance_matrix(company, dimension_type),
        "channel performance matrix",
    )


@router.get("/companies/{company}/channels/benchmarks")
async def channel_benchmarks(company: str, backend: AnalyticsEndpoints = Depends(get_backend)):
    return await _passthrough(backend.channel_benchmarks(company), "channel benchmarks")


@router.get("/companies/{company}/channels/budget_optimizer")
async def channel_budget_optimizer(
    company: str,
    total_budget: float = Query(0, ge=0),
    optimization_goal: str = "roi",
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.channel_budget_optimizer(company, total_budget, optimization_goal),
        "channel budget optimizer data",
    )


@router.get("/companies/{company}/channel_anomalies")
async def channel_anomalies(company: str, backend: AnalyticsEndpoints = Depends(get_backend)):
    return await _passthrough(backend.channel_anomalies(company), "channel anomalies")


# ── Campaigns ──


@router.get("/companies/{company}/campaign_performance_rankings")
async def campaign_performance_rankings(
    company: str,
    limit: int = Query(5, ge=1, le=100),
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.campaign_performance_rankings(company, limit),
        "campaign performance rankings",
    )


@router.get("/companies/{company}/campaign_duration_analysis")
async def campaign_duration_analysis(
    company: str,
    dimension: str = "audience",
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.campaign_duration_analysis(company, dimension),
        "campaign duration analysis",
    )


@router.get("/companies/{company}/campaign_future_forecast")
async def campaign_future_forecast(
    company: str,
    metric: str = "roi",
    backend: AnalyticsEndpoints = Depends(get_backend),
):
    return await _passthrough(
        backend.campaign_future_forecast(company, metric), "campaign forecast"
    )


# ── Questions ──


@router.post("/ask")
async def ask(request: AskRequest, backend: AnalyticsEndpoints = Depends(get_backend)):
    """Forward a natural-language question about a company's data."""
    if not request.question.strip() or not request.company.strip():
        raise HTTPException(status_code=400, detail="Question and company are required")
    return await _passthrough(
        backend.ask(request.question, request.company), "an answer"
    )

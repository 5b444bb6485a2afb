"""Metricboard — Audience Cluster Engine.

Flattens the backend's high-ROI / high-conversion cluster lists into
display rows compared against the company's audience averages.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from metricboard.core.logging import get_logger
from metricboard.core.numbers import num

logger = get_logger("analyzer.clusters")

DEFAULT_BUDGET_ALLOCATION = 20.0

CLUSTER_KINDS = {
    # payload key: (cluster_type, label, metric field, company average field)
    "high_roi": ("roi", "High ROI", "roi", "avg_audience_roi"),
    "high_conversion": (
        "conversion",
        "High Conversion",
        "conversion_rate",
        "avg_audience_conversion_rate",
    ),
}


class InvalidClusterPayload(ValueError):
    """Raised when the backend cluster response has neither cluster list."""


class ClusterRow(BaseModel):
    """One audience cluster, ready for the cohort table."""

    cluster_id: str
    audiences: List[str]
    goal: str
    location: str
    cluster_type: str
    avg_roi: float = 0.0
    avg_conversion_rate: float = 0.0
    avg_acquisition_cost: float = 0.0
    avg_ctr: float = 0.0
    performance_index: float = 0.0
    recommended_budget_allocation: float = DEFAULT_BUDGET_ALLOCATION
    campaign_count: Optional[int] = None
    company_avg_roi: float = 0.0
    company_avg_conversion_rate: float = 0.0
    company_avg_acquisition_cost: float = 0.0
    company_avg_ctr: float = 0.0
    vs_company_avg: Optional[float] = None  # % difference on the cluster's metric


def vs_average(value: float, average: float) -> Optional[float]:
    """Percentage difference of value against average; None without a baseline."""
    if not average:
        return None
    return round(value / average * 100 - 100, 1)


def _to_row(cluster: Dict[str, Any], kind: str) -> ClusterRow:
    cluster_type, label, metric_field, avg_field = CLUSTER_KINDS[kind]
    audience_id = str(cluster.get("audience_id", ""))
    goal = cluster.get("goal") or "All Goals"
    campaign_count = cluster.get("campaign_count")
    return ClusterRow(
        cluster_id=f"{audience_id} - {goal} ({label})",
        audiences=[audience_id],
        goal=goal,
        location=cluster.get("location") or "All Locations",
        cluster_type=cluster_type,
        avg_roi=num(cluster.get("roi")),
        avg_conversion_rate=num(cluster.get("conversion_rate")),
        avg_acquisition_cost=num(cluster.get("acquisition_cost")),
        avg_ctr=num(cluster.get("ctr")),
        performance_index=num(cluster.get("performance_score")) * 100,
        campaign_count=int(num(campaign_count)) if campaign_count else None,
        company_avg_roi=num(cluster.get("avg_audience_roi")),
        company_avg_conversion_rate=num(cluster.get("avg_audience_conversion_rate")),
        company_avg_acquisition_cost=num(cluster.get("avg_audience_acquisition_cost")),
        company_avg_ctr=num(cluster.get("avg_audience_ctr")),
        vs_company_avg=vs_average(
            num(cluster.get(metric_field)), num(cluster.get(avg_field))
        ),
    )


def transform_clusters(payload: Dict[str, Any]) -> List[ClusterRow]:
    """Transform ``{high_roi: [...], high_conversion: [...]}`` into rows."""
    if not isinstance(payload, dict) or not any(k in payload for k in CLUSTER_KINDS):
        raise InvalidClusterPayload("Invalid cluster data format")

    rows: List[ClusterRow] = []
    for kind in CLUSTER_KINDS:
        clusters = payload.get(kind)
        if not isinstance(clusters, list):
            continue
        rows.extend(_to_row(c, kind) for c in clusters if isinstance(c, dict))

    logger.info(f"Transformed {len(rows)} audience clusters")
    return rows

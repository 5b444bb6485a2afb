"""Metricboard — Chart Metric Registry.

Defines the closed set of metrics a trend chart can plot, the record field
that feeds each one, and how user-facing names resolve onto them.
"""

from enum import Enum
from typing import Dict, Optional

from metricboard.core.logging import get_logger

logger = get_logger("core.metrics")


class ChartMetric(str, Enum):
    """Metrics selectable on a monthly trend chart."""

    ROI = "roi"
    CONVERSION_RATE = "conversion_rate"
    ACQUISITION_COST = "acquisition_cost"
    CTR = "ctr"
    SPEND = "spend"
    CPA = "cpa"  # Derived: estimated cost per acquired customer


class MetricDefinition:
    """Describes a single chart metric."""

    def __init__(
        self,
        name: str,
        source_field: Optional[str],
        unit: str = "",
        description: str = "",
        lower_is_better: bool = False,
    ):
        self.name = name
        self.source_field = source_field
        self.unit = unit
        self.description = description
        self.lower_is_better = lower_is_better

    @property
    def derived(self) -> bool:
        return self.source_field is None

    def __repr__(self) -> str:
        return f"<Metric {self.name} ({self.unit})>"


# ─────────────────────────────────────────────
# CHART METRICS — Canonical Registry
# ─────────────────────────────────────────────

CHART_METRICS: Dict[ChartMetric, MetricDefinition] = {
    ChartMetric.ROI: MetricDefinition(
        "roi", "roi", "ratio", "Return on investment"
    ),
    ChartMetric.CONVERSION_RATE: MetricDefinition(
        "conversion_rate", "conversion_rate", "%", "Conversions / clicks"
    ),
    ChartMetric.ACQUISITION_COST: MetricDefinition(
        "acquisition_cost",
        "acquisition_cost",
        "currency",
        "Reported acquisition cost per campaign",
        lower_is_better=True,
    ),
    ChartMetric.CTR: MetricDefinition("ctr", "ctr", "%", "Click-through rate"),
    ChartMetric.SPEND: MetricDefinition(
        "spend", "total_spend", "currency", "Total amount spent"
    ),
    ChartMetric.CPA: MetricDefinition(
        "cpa",
        None,
        "currency",
        "Customer acquisition cost: (acquisition_cost × campaign_count) / (clicks × conversion_rate)",
        lower_is_better=True,
    ),
}

# Names the dashboard's metric pickers send
METRIC_ALIASES: Dict[str, ChartMetric] = {
    "conversion": ChartMetric.CONVERSION_RATE,
    "acquisition": ChartMetric.ACQUISITION_COST,
}

DEFAULT_METRIC = ChartMetric.ROI


# ─────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────


def resolve_chart_metric(name: str | ChartMetric | None) -> ChartMetric:
    """Map a metric name or alias onto a ChartMetric.

    Unknown or empty names fall back to ROI rather than producing an empty
    chart. The fallback is logged so a mistyped picker value is visible.
    """
    if isinstance(name, ChartMetric):
        return name
    key = (name or "").strip().lower()
    if key in METRIC_ALIASES:
        return METRIC_ALIASES[key]
    try:
        return ChartMetric(key)
    except ValueError:
        logger.warning(f"Unknown chart metric {name!r}, falling back to {DEFAULT_METRIC.value}")
        return DEFAULT_METRIC


def get_metric(metric: ChartMetric) -> MetricDefinition:
    """Look up the definition for a chart metric."""
    return CHART_METRICS[metric]

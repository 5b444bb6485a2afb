"""Metricboard — Display Formatting for chart tooltips and tables."""

from typing import Optional

from metricboard.core.metric_registry import ChartMetric, resolve_chart_metric

MISSING = "N/A"


def format_currency_k(value: float) -> str:
    """12345.6 → '12.35K'."""
    return f"{value / 1000:.2f}K"


def format_metric_value(value: Optional[float], metric: ChartMetric | str) -> str:
    """Render a chart value for display. Missing values are 'N/A', never '0'."""
    if value is None:
        return MISSING

    metric = resolve_chart_metric(metric)
    if metric == ChartMetric.ROI:
        return f"{value:.1f}x"
    if metric == ChartMetric.CONVERSION_RATE:
        return f"{value * 100:.1f}%"
    if metric == ChartMetric.CTR:
        return f"{value * 100:.2f}%"
    if metric in (ChartMetric.ACQUISITION_COST, ChartMetric.CPA):
        return f"${value:.2f}"
    if metric == ChartMetric.SPEND:
        return f"${format_currency_k(value)}" if value >= 1000 else f"${value:.2f}"
    return f"{value:.2f}"

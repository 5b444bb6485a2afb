"""Metricboard — Channel Efficiency Engine.

Spend vs ROI view of channels: fills in estimated spend, computes the median
reference lines that split the bubble chart into quadrants, and picks out
top and inefficient channels.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from metricboard.core.logging import get_logger
from metricboard.core.numbers import num

logger = get_logger("analyzer.efficiency")


class QuadrantReference(BaseModel):
    """Median reference lines for the efficiency chart."""

    median_roi: float
    median_spend: float


def channel_spend(channel: Dict[str, Any]) -> float:
    """Reported total spend, else avg acquisition cost × campaign count."""
    spend = num(channel.get("total_spend"))
    if spend:
        return spend
    return num(channel.get("avg_acquisition_cost")) * num(channel.get("campaign_count"))


def fill_total_spend(channels: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return copies of channels with ``total_spend`` estimated where missing."""
    filled: List[Dict[str, Any]] = []
    estimated = 0
    for channel in channels:
        out = dict(channel)
        if (
            not out.get("total_spend")
            and out.get("avg_acquisition_cost")
            and out.get("campaign_count")
        ):
            out["total_spend"] = num(out["avg_acquisition_cost"]) * num(
                out["campaign_count"]
            )
            estimated += 1
        filled.append(out)
    if estimated:
        logger.info(f"Estimated total_spend for {estimated}/{len(channels)} channels")
    return filled


def quadrant_medians(channels: List[Dict[str, Any]]) -> Optional[QuadrantReference]:
    """Median ROI and spend across channels.

    Uses the upper-middle element for even counts so the reference line
    always sits on a real channel.
    """
    if not channels:
        return None
    mid = len(channels) // 2
    rois = sorted(num(c.get("avg_roi")) for c in channels)
    spends = sorted(channel_spend(c) for c in channels)
    return QuadrantReference(median_roi=rois[mid], median_spend=spends[mid])


def classify_quadrant(channel: Dict[str, Any], reference: QuadrantReference) -> str:
    """Place a channel into star | efficient | inefficient | underused."""
    high_roi = num(channel.get("avg_roi")) >= reference.median_roi
    high_spend = channel_spend(channel) >= reference.median_spend
    if high_roi:
        return "star" if high_spend else "efficient"
    return "inefficient" if high_spend else "underused"


def top_performers(channels: List[Dict[str, Any]], limit: int = 3) -> List[Dict[str, Any]]:
    """Channels ranked by ROI, best first."""
    ranked = sorted(channels, key=lambda c: num(c.get("avg_roi")), reverse=True)
    return ranked[:limit]


def inefficient_channels(
    channels: List[Dict[str, Any]],
    roi_threshold: float = 2.5,
    spend_threshold: float = 10000,
) -> List[Dict[str, Any]]:
    """Low-ROI channels that still carry heavy spend, cheapest first."""
    flagged = [
        c
        for c in channels
        if num(c.get("avg_roi")) < roi_threshold
        and num(c.get("total_spend")) > spend_threshold
    ]
    return sorted(flagged, key=lambda c: num(c.get("total_spend")))


def annotate_efficiency(channels: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Full efficiency view: filled spend, medians, and per-channel quadrant."""
    filled = fill_total_spend(channels)
    reference = quadrant_medians(filled)
    if reference is not None:
        for channel in filled:
            channel["quadrant"] = classify_quadrant(channel, reference)
    return {
        "channels": filled,
        "quadrants": reference.model_dump() if reference else None,
        "top_performers": [c.get("channel_id") for c in top_performers(filled)],
        "inefficient": [c.get("channel_id") for c in inefficient_channels(filled)],
    }

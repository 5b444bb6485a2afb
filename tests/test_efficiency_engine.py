"""Tests for metricboard.analyzer.efficiency_engine."""

from metricboard.analyzer.efficiency_engine import (
    annotate_efficiency,
    classify_quadrant,
    fill_total_spend,
    inefficient_channels,
    quadrant_medians,
    top_performers,
)

CHANNELS = [
    {"channel_id": "email", "avg_roi": 5.0, "total_spend": 2000},
    {"channel_id": "search", "avg_roi": 4.0, "total_spend": 30000},
    {"channel_id": "display", "avg_roi": 1.5, "total_spend": 25000},
    {"channel_id": "social", "avg_roi": 2.0, "avg_acquisition_cost": 100, "campaign_count": 10},
]


# ── Spend Estimation ─────────────────────────────────────────────────


def test_fill_total_spend_estimates_missing():
    filled = fill_total_spend(CHANNELS)
    assert filled[3]["total_spend"] == 1000
    assert filled[0]["total_spend"] == 2000


def test_fill_total_spend_leaves_input_untouched():
    fill_total_spend(CHANNELS)
    assert "total_spend" not in CHANNELS[3]


def test_fill_total_spend_needs_both_inputs():
    filled = fill_total_spend([{"channel_id": "tv", "avg_acquisition_cost": 50}])
    assert "total_spend" not in filled[0]


# ── Quadrants ────────────────────────────────────────────────────────


def test_medians_use_upper_middle():
    ref = quadrant_medians(fill_total_spend(CHANNELS))
    # ROI sorted: 1.5, 2.0, 4.0, 5.0 → index 2
    assert ref.median_roi == 4.0
    # spend sorted: 1000, 2000, 25000, 30000 → index 2
    assert ref.median_spend == 25000


def test_medians_empty():
    assert quadrant_medians([]) is None


def test_classify_quadrant():
    ref = quadrant_medians(fill_total_spend(CHANNELS))
    assert classify_quadrant({"avg_roi": 4.0, "total_spend": 30000}, ref) == "star"
    assert classify_quadrant({"avg_roi": 5.0, "total_spend": 2000}, ref) == "efficient"
    assert classify_quadrant({"avg_roi": 1.5, "total_spend": 25000}, ref) == "inefficient"
    assert classify_quadrant({"avg_roi": 2.0, "total_spend": 1000}, ref) == "underused"


# ── Rankings ─────────────────────────────────────────────────────────


def test_top_performers():
    assert [c["channel_id"] for c in top_performers(CHANNELS, limit=2)] == ["email", "search"]


def test_inefficient_channels_sorted_by_spend():
    channels = CHANNELS + [{"channel_id": "tv", "avg_roi": 1.0, "total_spend": 12000}]
    assert [c["channel_id"] for c in inefficient_channels(channels)] == ["tv", "display"]


def test_annotate_efficiency():
    view = annotate_efficiency(CHANNELS)
    assert view["quadrants"] == {"median_roi": 4.0, "median_spend": 25000.0}
    assert {c["channel_id"]: c["quadrant"] for c in view["channels"]} == {
        "email": "efficient",
        "search": "star",
        "display": "inefficient",
        "social": "underused",
    }
    assert view["top_performers"] == ["email", "search", "social"]
    assert view["inefficient"] == ["display"]


def test_annotate_efficiency_empty():
    assert annotate_efficiency([])["quadrants"] is None


def test_non_finite_values_count_as_zero():
    channels = [
        {"channel_id": "email", "avg_roi": "NaN", "total_spend": 100},
        {"channel_id": "search", "avg_roi": 3.0, "total_spend": float("inf")},
        {"channel_id": "social", "avg_roi": 2.0, "total_spend": 300},
    ]
    ref = quadrant_medians(channels)
    # ROI sorted: 0, 2.0, 3.0; spend sorted: 0, 100, 300
    assert ref.median_roi == 2.0
    assert ref.median_spend == 100
    assert [c["channel_id"] for c in top_performers(channels, limit=1)] == ["search"]

"""Tests for metricboard.analyzer.formatting."""

import pytest

from metricboard.analyzer.formatting import format_currency_k, format_metric_value


@pytest.mark.parametrize("metric", ["roi", "conversion", "ctr", "cpa", "spend"])
def test_missing_renders_na(metric):
    assert format_metric_value(None, metric) == "N/A"


def test_zero_is_not_missing():
    assert format_metric_value(0.0, "roi") == "0.0x"


@pytest.mark.parametrize(
    "value, metric, expected",
    [
        (2.54, "roi", "2.5x"),
        (0.123, "conversion", "12.3%"),
        (0.0456, "ctr", "4.56%"),
        (12.3456, "acquisition", "$12.35"),
        (1.0, "cpa", "$1.00"),
        (999.5, "spend", "$999.50"),
        (12345.6, "spend", "$12.35K"),
    ],
)
def test_format_by_metric(value, metric, expected):
    assert format_metric_value(value, metric) == expected


def test_format_currency_k():
    assert format_currency_k(2500) == "2.50K"

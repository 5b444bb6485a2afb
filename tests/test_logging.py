"""Tests for metricboard.core.logging."""

import json
import logging

from metricboard.core.logging import JSONFormatter, get_logger


def test_json_line_with_extra_fields():
    record = logging.makeLogRecord(
        {"name": "metricboard.test", "levelname": "WARNING", "msg": "skipped %d", "args": (2,), "skipped": 2}
    )
    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "skipped 2"
    assert entry["level"] == "WARNING"
    assert entry["skipped"] == 2
    assert "args" not in entry


def test_logger_namespace_and_single_handler():
    first = get_logger("unit")
    second = get_logger("unit")
    assert first is second
    assert first.name == "metricboard.unit"
    assert len(first.handlers) == 1

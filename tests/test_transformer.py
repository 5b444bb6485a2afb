"""Tests for metricboard.connectors.analytics.transformer."""

from metricboard.connectors.analytics.transformer import to_entities


def test_audiences_to_entities():
    payload = {
        "audiences": [
            {"audience_id": "A", "monthly_metrics": [{"month": 1, "roi": 2.0}, {"month": 2}]},
            {"audience_id": "B", "monthly_metrics": []},
        ]
    }
    entities, skipped = to_entities(payload, "audience")
    assert [e.id for e in entities] == ["A", "B"]
    assert [r.month for r in entities[0].monthly_records] == [1, 2]
    assert entities[0].monthly_records[1].roi is None
    assert skipped == 0


def test_channels_drop_malformed():
    payload = {
        "channels": [
            {"channel_id": "email", "monthly_metrics": [{"roi": 1.0}, {"month": 3, "roi": 1.0}]},
            {"monthly_metrics": [{"month": 1}]},
            None,
        ]
    }
    entities, skipped = to_entities(payload, "channel")
    assert [e.id for e in entities] == ["email"]
    assert len(entities[0].monthly_records) == 1
    assert skipped == 3


def test_missing_list_is_empty():
    assert to_entities({}, "channel") == ([], 0)
    assert to_entities(None, "audience") == ([], 0)


def test_non_list_monthly_metrics_keeps_entity():
    payload = {
        "audiences": [
            {"audience_id": "A", "monthly_metrics": 5},
            {"audience_id": "B", "monthly_metrics": [{"month": 1, "roi": 1.0}]},
            {"audience_id": "C", "monthly_metrics": "Jan"},
        ]
    }
    entities, skipped = to_entities(payload, "audience")
    assert [e.id for e in entities] == ["A", "B", "C"]
    assert entities[0].monthly_records == []
    assert entities[2].monthly_records == []
    assert skipped == 2


def test_non_list_entity_collection_counts_once():
    assert to_entities({"audiences": 7}, "audience") == ([], 1)
    assert to_entities({"channels": "email"}, "channel") == ([], 1)

"""Tests for the analytics backend client and endpoints (offline, MockTransport)."""

import asyncio

import httpx
import pytest

from metricboard.connectors.analytics.client import (
    AnalyticsAPIError,
    AnalyticsClient,
    company_path,
)
from metricboard.connectors.analytics.endpoints import AnalyticsEndpoints


def _endpoints(handler) -> AnalyticsEndpoints:
    client = AnalyticsClient(base_url="http://backend.test", transport=httpx.MockTransport(handler))
    return AnalyticsEndpoints(client)


def _run(coro):
    return asyncio.run(coro)


# ── Paths ────────────────────────────────────────────────────────────


def test_company_path_encodes_name():
    assert company_path("Acme Co/EU", "insights") == "/api/companies/Acme%20Co%2FEU/insights"
    assert company_path("Acme") == "/api/companies/Acme"


# ── Requests ─────────────────────────────────────────────────────────


def test_list_companies_unwraps_array():
    def handler(request):
        assert request.url.path == "/api/companies"
        return httpx.Response(200, json={"companies": [{"company": "Acme"}]})

    assert _run(_endpoints(handler).list_companies()) == [{"company": "Acme"}]


def test_list_companies_missing_key():
    assert _run(_endpoints(lambda r: httpx.Response(200, json={})).list_companies()) == []


def test_list_companies_non_object_body():
    assert _run(_endpoints(lambda r: httpx.Response(200, json=[{"company": "Acme"}])).list_companies()) == []
    assert _run(_endpoints(lambda r: httpx.Response(200, json={"companies": "Acme"})).list_companies()) == []


def test_audience_matrix_summary_path():
    def handler(request):
        assert request.url.path == "/api/companies/Acme/audience_performance_matrix"
        return httpx.Response(200, json={"matrix": []})

    assert _run(_endpoints(handler).audience_matrix_summary("Acme")) == {"matrix": []}


def test_query_params_forwarded_and_none_dropped():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"ok": True})

    backend = _endpoints(handler)
    _run(backend.channel_budget_optimizer("Acme", 5000, "conversion"))
    assert seen["path"] == "/api/companies/Acme/channel_budget_optimizer"
    assert seen["params"] == {"total_budget": "5000", "optimization_goal": "conversion"}

    _run(backend.audience_performance_matrix("Acme"))
    assert seen["params"] == {}


def test_audience_monthly_metrics_filters_ids():
    payload = {
        "audiences": [
            {"audience_id": "A", "monthly_metrics": []},
            {"audience_id": "B", "monthly_metrics": []},
        ]
    }
    backend = _endpoints(lambda r: httpx.Response(200, json=payload))
    data = _run(backend.audience_monthly_metrics("Acme", ["B"]))
    assert [a["audience_id"] for a in data["audiences"]] == ["B"]


def test_channel_efficiency_fills_spend():
    def handler(request):
        assert request.url.params["include_metrics"] == "true"
        return httpx.Response(
            200,
            json={"channels": [{"channel_id": "email", "avg_acquisition_cost": 20, "campaign_count": 3}]},
        )

    data = _run(_endpoints(handler).channel_efficiency("Acme"))
    assert data["channels"][0]["total_spend"] == 60


def test_ask_posts_json():
    def handler(request):
        assert request.method == "POST"
        assert request.url.path == "/api/ask"
        return httpx.Response(200, content=request.content, headers={"content-type": "application/json"})

    assert _run(_endpoints(handler).ask("Best channel?", "Acme")) == {
        "question": "Best channel?",
        "company": "Acme",
    }


# ── Errors ───────────────────────────────────────────────────────────


def test_backend_error_keeps_status_and_message():
    backend = _endpoints(lambda r: httpx.Response(404, json={"error": "Company not found"}))
    with pytest.raises(AnalyticsAPIError) as exc:
        _run(backend.insights("Nope"))
    assert exc.value.status_code == 404
    assert str(exc.value) == "Company not found"


def test_single_attempt_on_server_error():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, text="unavailable")

    with pytest.raises(AnalyticsAPIError) as exc:
        _run(_endpoints(handler).channel_anomalies("Acme"))
    assert exc.value.status_code == 503
    assert len(calls) == 1


def test_timeout_becomes_api_error():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(AnalyticsAPIError) as exc:
        _run(_endpoints(handler).insights("Acme"))
    assert exc.value.status_code == 500
    assert "timed out" in str(exc.value)


def test_invalid_json_is_bad_gateway():
    backend = _endpoints(lambda r: httpx.Response(200, text="<html>"))
    with pytest.raises(AnalyticsAPIError) as exc:
        _run(backend.insights("Acme"))
    assert exc.value.status_code == 502

"""Metricboard — Analytics Backend Endpoints.

Fetch functions for each backend resource the dashboard reads. Most are
passthroughs; a few reshape the payload the way the charts need it.
"""

from typing import Any, Dict, List, Optional

from metricboard.analyzer.efficiency_engine import fill_total_spend
from metricboard.connectors.analytics.client import AnalyticsClient, company_path
from metricboard.core.logging import get_logger

logger = get_logger("analytics.endpoints")


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


class AnalyticsEndpoints:
    """Typed access to the analytics backend's company resources."""

    def __init__(self, client: AnalyticsClient):
        self.client = client

    # ── Companies ──

    async def list_companies(self) -> List[Dict[str, Any]]:
        """All companies known to the backend."""
        data = await self.client.get("/api/companies")
        companies = data.get("companies") if isinstance(data, dict) else None
        return companies if isinstance(companies, list) else []

    async def company_monthly_metrics(
        self, company: str, include_anomalies: bool = False
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "monthly_metrics"),
            {"include_anomalies": _bool_param(include_anomalies)},
        )

    async def insights(self, company: str) -> Dict[str, Any]:
        return await self.client.get(company_path(company, "insights"))

    # ── Audiences ──

    async def audience_monthly_metrics(
        self, company: str, audience_ids: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Monthly metrics per audience, optionally narrowed to some ids.

        The backend has no id filter, so one request is made for all
        audiences and the selection is applied here.
        """
        data = await self.client.get(company_path(company, "audiences/monthly_metrics"))
        if audience_ids and isinstance(data, dict):
            wanted = set(audience_ids)
            data = {
                **data,
                "audiences": [
                    a
                    for a in data.get("audiences") or []
                    if isinstance(a, dict) and a.get("audience_id") in wanted
                ],
            }
        return data

    async def audience_performance_matrix(
        self, company: str, dimension_type: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "audiences/performance_matrix"),
            {"dimension_type": dimension_type},
        )

    async def audience_matrix_summary(self, company: str) -> Dict[str, Any]:
        """Company-level audience matrix, without a dimension breakdown."""
        return await self.client.get(
            company_path(company, "audience_performance_matrix")
        )

    async def audience_clusters(self, company: str, limit: int = 5) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "campaign_clusters"), {"limit": limit}
        )

    async def audience_anomalies(
        self, company: str, threshold: float = 2.0
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "audience_anomalies"), {"threshold": threshold}
        )

    # ── Channels ──

    async def channel_monthly_metrics(self, company: str) -> Dict[str, Any]:
        return await self.client.get(company_path(company, "channels/monthly_metrics"))

    async def channel_performance_matrix(
        self, company: str, dimension_type: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "channels/performance_matrix"),
            {"dimension_type": dimension_type},
        )

    async def channel_efficiency(self, company: str) -> Dict[str, Any]:
        """Channels with metrics, with total_spend estimated where missing."""
        data = await self.client.get(
            company_path(company, "channels"), {"include_metrics": "true"}
        )
        if isinstance(data, dict) and isinstance(data.get("channels"), list):
            data = {**data, "channels": fill_total_spend(data["channels"])}
        return data

    async def channel_benchmarks(self, company: str) -> Dict[str, Any]:
        return await self.client.get(company_path(company, "channels/benchmarks"))

    async def channel_budget_optimizer(
        self,
        company: str,
        total_budget: float = 0,
        optimization_goal: str = "roi",
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "channel_budget_optimizer"),
            {"total_budget": total_budget, "optimization_goal": optimization_goal},
        )

    async def channel_anomalies(self, company: str) -> Dict[str, Any]:
        return await self.client.get(company_path(company, "channel_anomalies"))

    # ── Campaigns ──

    async def campaign_performance_rankings(
        self, company: str, limit: int = 5
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "campaign_performance_rankings"), {"limit": limit}
        )

    async def campaign_duration_analysis(
        self, company: str, dimension: str = "audience"
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "campaign_duration_analysis"), {"dimension": dimension}
        )

    async def campaign_future_forecast(
        self, company: str, metric: str = "roi"
    ) -> Dict[str, Any]:
        return await self.client.get(
            company_path(company, "campaign_future_forecast"), {"metric": metric}
        )

    # ── Natural-Language Questions ──

    async def ask(self, question: str, company: str) -> Dict[str, Any]:
        return await self.client.post(
            "/api/ask", {"question": question, "company": company}
        )

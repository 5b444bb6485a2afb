"""Metricboard — Monthly Series Models.

Typed shapes for the backend's per-entity monthly metrics and for the dense
chart table built from them. Optional metrics are real ``None`` values so a
missing month never reads as zero performance.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_serializer


class MetricRecord(BaseModel):
    """One entity's reported values for one calendar month."""

    month: int = Field(ge=1, le=12)
    roi: Optional[float] = None
    conversion_rate: Optional[float] = None
    acquisition_cost: Optional[float] = None
    ctr: Optional[float] = None
    clicks: Optional[float] = None
    campaign_count: Optional[float] = None
    total_spend: Optional[float] = None

    model_config = {"extra": "ignore"}


class Entity(BaseModel):
    """An audience segment or marketing channel with its monthly records."""

    id: str = Field(min_length=1)
    monthly_records: List[MetricRecord] = []


class ChartRow(BaseModel):
    """One calendar month with a value slot per entity id."""

    date_key: str
    values: Dict[str, Optional[float]] = {}

    @model_serializer
    def flatten(self) -> Dict[str, object]:
        # Chart renderers read {dateKey, <entity_id>: value} rows
        values = {k: v for k, v in self.values.items() if k != "dateKey"}
        return {"dateKey": self.date_key, **values}


class SeriesTable(BaseModel):
    """Dense chart-ready table, rows ascending by date key."""

    metric: str
    rows: List[ChartRow] = []
    entity_ids: List[str] = []
    skipped: int = 0

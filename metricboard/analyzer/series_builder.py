"""Metricboard — Monthly Series Builder.

Turns per-entity sparse monthly records into one dense table for a multi-line
time-series chart: one row per calendar month, one column per entity.
Bad input degrades to partial output; one broken data point must not blank
the whole chart.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from metricboard.config import settings
from metricboard.core.logging import get_logger
from metricboard.core.metric_registry import ChartMetric, get_metric, resolve_chart_metric
from metricboard.core.numbers import safe_float
from metricboard.models.series_models import ChartRow, Entity, MetricRecord, SeriesTable

logger = get_logger("analyzer.series")

ENTITY_ID_KEYS = ("id", "audience_id", "channel_id")
RECORD_LIST_KEYS = ("monthly_records", "monthlyRecords", "monthly_metrics")
# Row key the chart reads for the x-axis; no entity column may shadow it
DATE_KEY_FIELD = "dateKey"

NUMERIC_FIELDS = (
    "roi",
    "conversion_rate",
    "acquisition_cost",
    "ctr",
    "clicks",
    "campaign_count",
    "total_spend",
)


def date_key(reference_year: int, month: int) -> str:
    """Synthesize a sortable ``YYYY-MM-01`` key from a bare month number."""
    return f"{reference_year}-{month:02d}-01"


# ── Metric Resolution ──


def estimate_cpa(record: MetricRecord) -> Optional[float]:
    """Estimate cost per acquired customer.

    (acquisition_cost × campaign_count) / (clicks × conversion_rate), falling
    back to the raw acquisition cost when the estimated conversions are zero.
    """
    clicks = record.clicks or 0
    conversion_rate = record.conversion_rate or 0
    if record.acquisition_cost is None:
        return None
    if clicks > 0 and conversion_rate > 0:
        campaigns = max(record.campaign_count or 1, 1)
        return (record.acquisition_cost * campaigns) / (clicks * conversion_rate)
    return record.acquisition_cost


def resolve_metric_value(
    record: MetricRecord, metric: ChartMetric | str
) -> Optional[float]:
    """Return the value a chart should plot for one record."""
    metric = resolve_chart_metric(metric)
    if metric == ChartMetric.CPA:
        return estimate_cpa(record)
    return getattr(record, get_metric(metric).source_field)


# ── Input Coercion ──


def coerce_record(raw: Any) -> Optional[MetricRecord]:
    """Build a MetricRecord from a raw dict; None if month is unusable.

    Unparseable numeric fields are treated as missing, not as a reason to
    drop the whole month.
    """
    if isinstance(raw, MetricRecord):
        return raw
    if not isinstance(raw, dict):
        return None
    fields = {name: safe_float(raw.get(name)) for name in NUMERIC_FIELDS}
    try:
        return MetricRecord(month=raw.get("month"), **fields)
    except ValidationError:
        return None


def _coerce_entity(raw: Any) -> Tuple[Optional[str], List[Any]]:
    if isinstance(raw, Entity):
        return raw.id, list(raw.monthly_records)
    if not isinstance(raw, dict):
        return None, []
    entity_id = next((raw[k] for k in ENTITY_ID_KEYS if raw.get(k) not in (None, "")), None)
    records = next((raw[k] for k in RECORD_LIST_KEYS if isinstance(raw.get(k), list)), [])
    return (str(entity_id) if entity_id is not None else None), records


# ── Builder ──


def build_series(
    entities: Optional[Iterable[Any]],
    selected_metric: ChartMetric | str | None = None,
    reference_year: Optional[int] = None,
) -> SeriesTable:
    """Build a dense, date-sorted chart table for the selected metric.

    Entities without an id (or whose id is the reserved ``dateKey``) and
    records without a valid month are skipped
    and counted in ``SeriesTable.skipped``. Entity/month pairs with no
    record hold ``None``.
    """
    metric = resolve_chart_metric(
        selected_metric if selected_metric is not None else settings.default_chart_metric
    )
    year = reference_year if reference_year is not None else settings.effective_reference_year

    entity_ids: List[str] = []
    cells: Dict[str, Dict[str, Optional[float]]] = {}
    skipped = 0

    for raw_entity in entities or []:
        entity_id, raw_records = _coerce_entity(raw_entity)
        if entity_id is None:
            skipped += 1
            continue
        if entity_id == DATE_KEY_FIELD:
            logger.warning(f"Entity id {entity_id!r} collides with the row date key, skipping")
            skipped += 1
            continue
        if entity_id not in entity_ids:
            entity_ids.append(entity_id)

        for raw_record in raw_records:
            record = coerce_record(raw_record)
            if record is None:
                skipped += 1
                continue
            key = date_key(year, record.month)
            cells.setdefault(key, {})[entity_id] = resolve_metric_value(record, metric)

    rows = [
        ChartRow(
            date_key=key,
            values={eid: cells[key].get(eid) for eid in entity_ids},
        )
        for key in sorted(cells)
    ]

    if skipped:
        logger.warning(
            f"Skipped {skipped} malformed entities/records while building {metric.value} series",
            extra={"skipped": skipped},
        )
    logger.debug(
        f"Built {metric.value} series: {len(rows)} months × {len(entity_ids)} entities"
    )
    return SeriesTable(metric=metric.value, rows=rows, entity_ids=entity_ids, skipped=skipped)

"""Metricboard — Backend Monthly Metrics → Entity Transformer.

Converts the backend's ``{audiences: [...]}`` / ``{channels: [...]}`` monthly
metric payloads into typed Entity models for the series builder.
"""

from typing import Any, Dict, List, Tuple

from metricboard.analyzer.series_builder import coerce_record
from metricboard.core.logging import get_logger
from metricboard.models.series_models import Entity

logger = get_logger("analytics.transformer")

# entity kind → (payload list key, id field)
ENTITY_KINDS = {
    "audience": ("audiences", "audience_id"),
    "channel": ("channels", "channel_id"),
}


def to_entities(payload: Dict[str, Any], kind: str) -> Tuple[List[Entity], int]:
    """Extract entities of one kind.

    Returns the entities plus the number of malformed entities and records
    that were dropped along the way.
    """
    list_key, id_field = ENTITY_KINDS[kind]
    raw_entities = payload.get(list_key) if isinstance(payload, dict) else None

    entities: List[Entity] = []
    skipped = 0
    if raw_entities is not None and not isinstance(raw_entities, list):
        # A non-list where the entity list belongs counts as one bad entry
        skipped += 1
        raw_entities = None

    for raw in raw_entities or []:
        entity_id = raw.get(id_field) if isinstance(raw, dict) else None
        if entity_id in (None, ""):
            skipped += 1
            continue

        raw_records = raw.get("monthly_metrics")
        if raw_records is not None and not isinstance(raw_records, list):
            skipped += 1
            raw_records = None

        records = []
        for raw_record in raw_records or []:
            record = coerce_record(raw_record)
            if record is None:
                skipped += 1
                continue
            records.append(record)
        entities.append(Entity(id=str(entity_id), monthly_records=records))

    if skipped:
        logger.warning(
            f"Dropped {skipped} malformed {kind} entries from backend payload",
            extra={"skipped": skipped},
        )
    logger.info(f"Transformed {len(entities)} {kind}s")
    return entities, skipped

from __future__ import annotations

from typing import List, Optional, Sequence

from schemas.viewer import DATE_FIELD, Record, record_fields
from utils.formatting import is_numeric


def discover_metrics(records: Sequence[Record], *, date_field: str = DATE_FIELD) -> List[str]:
    """
    Chartable fields: numeric values, excluding the date field.
    Ordered by first appearance across records.
    """
    seen: dict = {}
    for record in records:
        for key, value in record_fields(record).items():
            if key == date_field or key in seen:
                continue
            if is_numeric(value):
                seen[key] = None
    return list(seen)


def resolve_metric(selected: Optional[str], metrics: Sequence[str]) -> Optional[str]:
    if selected and selected in metrics:
        return selected
    return metrics[0] if metrics else None

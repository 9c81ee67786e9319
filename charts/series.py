from __future__ import annotations

from typing import List, Optional, Sequence

from schemas.viewer import DATE_FIELD, ChartPoint, Record, record_fields
from utils.dates import parse_date
from utils.formatting import is_numeric, json_safe


def build_series(
    records: Sequence[Record],
    metric_key: Optional[str],
    *,
    date_field: str = DATE_FIELD,
) -> List[ChartPoint]:
    """
    (date, value) points for one metric, oldest first.

    Ordering comes from the parsed dates, not from the input order, so the
    chart stays chronological whatever the table sort is. Records whose date
    can't be parsed are kept at the end in input order.
    """
    if not metric_key:
        return []

    dated = []
    undated: List[ChartPoint] = []
    for record in records:
        fields = record_fields(record)
        raw_date = fields.get(date_field)
        raw_value = fields.get(metric_key)

        point = ChartPoint(
            date="" if raw_date is None else str(raw_date),
            value=json_safe(raw_value) if is_numeric(raw_value) else None,
        )

        ts = parse_date(raw_date)
        if ts is None:
            undated.append(point)
        else:
            dated.append((ts, point))

    dated.sort(key=lambda item: item[0])
    return [point for _, point in dated] + undated

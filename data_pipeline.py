from __future__ import annotations

from typing import Any, Callable, List, Sequence, Tuple

import numpy as np
from schemas.viewer import DATE_FIELD, Filters, Record, SortConfig, record_fields
from utils.dates import bound_timestamp, parse_date
from utils.formatting import display_str, is_numeric

Predicate = Callable[[Any], bool]


# -------------------------
# Filtering
# -------------------------


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, (float, np.floating)) and bool(np.isnan(value))


def matches_query(record: Record, needle: str) -> bool:
    """
    Case-insensitive substring match against field values, and against the
    names of fields that hold a value in this record.
    `needle` must already be lowercased.
    """
    for key, value in record_fields(record).items():
        if needle in display_str(value).lower():
            return True
        if not _is_missing(value) and needle in str(key).lower():
            return True
    return False


def build_predicates(filters: Filters, *, date_field: str = DATE_FIELD) -> List[Predicate]:
    """
    One predicate per active filter dimension. A record is kept only if all pass.
    """
    predicates: List[Predicate] = []

    if filters.date_from is not None:
        lower = bound_timestamp(filters.date_from)

        def on_or_after(record: Any) -> bool:
            d = parse_date(record_fields(record).get(date_field))
            return d is not None and d >= lower

        predicates.append(on_or_after)

    if filters.date_to is not None:
        upper = bound_timestamp(filters.date_to)

        def on_or_before(record: Any) -> bool:
            d = parse_date(record_fields(record).get(date_field))
            return d is not None and d <= upper

        predicates.append(on_or_before)

    if filters.query:
        needle = filters.query.lower()
        predicates.append(lambda record: matches_query(record, needle))

    return predicates


def filter_records(records: Sequence[Record], filters: Filters) -> List[Record]:
    if not filters.is_active():
        return list(records)
    predicates = build_predicates(filters)
    return [r for r in records if all(p(r) for p in predicates)]


# -------------------------
# Sorting
# -------------------------


def _sort_key(value: Any) -> Tuple[int, Any]:
    # numbers before strings so mixed columns still compare
    if is_numeric(value) or isinstance(value, bool):
        return (0, float(value))
    return (1, display_str(value))


def sort_records(records: Sequence[Record], sort_config: SortConfig) -> List[Record]:
    """
    Stable sort on sort_config.key. Records without a value for the key
    always come last, in their original order, whatever the direction.
    """
    key = sort_config.key
    if not key:
        return list(records)

    present: List[Record] = []
    missing: List[Record] = []
    for record in records:
        if _is_missing(record_fields(record).get(key)):
            missing.append(record)
        else:
            present.append(record)

    present = sorted(
        present,
        key=lambda r: _sort_key(record_fields(r)[key]),
        reverse=sort_config.direction == "descending",
    )
    return present + missing


def next_sort_config(current: SortConfig, key: str) -> SortConfig:
    """
    Column header activation: same key while ascending flips to descending,
    anything else sorts the key ascending.
    """
    if current.key == key and current.direction == "ascending":
        return SortConfig(key=key, direction="descending")
    return SortConfig(key=key, direction="ascending")


def process(
    records: Sequence[Record], filters: Filters, sort_config: SortConfig
) -> List[Record]:
    """
    Records as displayed: active filters, then sort. Never mutates `records`.
    """
    return sort_records(filter_records(records, filters), sort_config)

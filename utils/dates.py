import datetime as dt
from typing import Any, Optional

import pandas as pd


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Best-effort parse of a record's date field.
    Returns a tz-naive Timestamp, or None when the value can't be read as a date.
    """
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (str, int, float, dt.date)):
        return None

    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None

    if ts is None or pd.isna(ts):
        return None

    # mixed offsets in one dataset would otherwise be incomparable
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts


def parse_filter_date(text: Optional[str]) -> Optional[dt.date]:
    """
    Parse a date typed into a filter control. Empty input clears the bound.
    """
    if text is None:
        return None
    text = text.strip()
    if not text or text.lower() in ("clear", "none", "-"):
        return None

    ts = parse_date(text)
    if ts is None:
        raise ValueError(f"Not a date: {text!r}")
    return ts.date()


def bound_timestamp(day: dt.date) -> pd.Timestamp:
    return pd.Timestamp(day).normalize()

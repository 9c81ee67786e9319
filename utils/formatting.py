from __future__ import annotations

import json
from typing import Any

import numpy as np
import pandas as pd

from utils.dates import parse_date


def is_numeric(v: Any) -> bool:
    return isinstance(v, (int, float, np.number)) and not isinstance(v, (bool, np.bool_))


def json_safe(v: Any) -> Any:
    # pandas Timestamp / datetime64
    if isinstance(v, pd.Timestamp):
        return v.date().isoformat() if v.tzinfo is None else v.isoformat()

    if v is pd.NaT:
        return None

    # numpy scalars
    if isinstance(v, np.integer):
        return int(v)
    if isinstance(v, np.floating):
        x = float(v)
        if np.isnan(x) or np.isinf(x):
            return None
        return x

    # python float NaN/inf
    if isinstance(v, float) and (np.isnan(v) or np.isinf(v)):
        return None

    return v


def display_str(v: Any) -> str:
    """
    Text form of a field value, as a user would type it into a search box.
    """
    if v is None:
        return "null"
    if isinstance(v, (bool, np.bool_)):
        return "true" if v else "false"
    if isinstance(v, (float, np.floating)):
        x = float(v)
        if np.isfinite(x) and x.is_integer():
            return str(int(x))
        return repr(x)
    if isinstance(v, (dict, list)):
        return json.dumps(v, ensure_ascii=False, separators=(",", ":"))
    return str(v)


def format_value(v: Any) -> str:
    """
    Table cell text: grouped thousands, at most three fraction digits.
    """
    if v is None:
        return ""
    if not is_numeric(v):
        return display_str(v)

    if isinstance(v, (int, np.integer)):
        return f"{int(v):,}"

    x = float(v)
    if np.isnan(x):
        return "NaN"
    if np.isinf(x):
        return "∞" if x > 0 else "-∞"

    text = f"{x:,.3f}".rstrip("0").rstrip(".")
    return text


def format_tick_date(value: Any) -> str:
    ts = parse_date(value)
    if ts is None:
        return "" if value is None else str(value)
    return ts.strftime("%b %y")

from __future__ import annotations

from typing import Optional, Sequence

from schemas.chart_spec import AxisSpec, ChartSpec, SeriesSpec
from schemas.viewer import ChartPoint
from utils.dates import parse_date


def chart_type_label(metric: str) -> str:
    return f"Line chart showing {metric} over time"


def chart_policy(*, metric: Optional[str], points: Sequence[ChartPoint]) -> ChartSpec | None:
    if not metric or not points:
        return None

    dated = [p.date for p in points if parse_date(p.date) is not None]

    return ChartSpec(
        chart_type="line",
        title=f"{metric} over time",
        x=AxisSpec(field="date", label="Date", tickformat="%b %y"),
        y=AxisSpec(field="value", label=metric, tickformat=","),
        series=[SeriesSpec(name=metric, metric=metric)],
        start=dated[0] if dated else None,
        end=dated[-1] if dated else None,
    )

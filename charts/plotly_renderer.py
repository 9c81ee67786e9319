from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from schemas.chart_spec import ChartSpec
from schemas.viewer import ChartPoint
from utils.dates import parse_date


def points_frame(points: Sequence[ChartPoint]) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "date": [parse_date(p.date) for p in points],
            "value": [p.value for p in points],
        }
    )
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    return df


def render_plotly(spec: Optional[ChartSpec], points: Sequence[ChartPoint]) -> go.Figure:
    if spec is None or not points:
        fig = go.Figure()
        fig.update_layout(title="No data to chart")
        return fig

    d = points_frame(points)

    if spec.chart_type != "line":
        raise ValueError(f"Unsupported chart_type: {spec.chart_type}")

    fig = px.line(d, x=spec.x.field, y=spec.y.field, title=spec.title)

    series_name = spec.series[0].name if spec.series else spec.y.label
    fig.update_traces(name=series_name, showlegend=True)
    fig.update_xaxes(title_text=spec.x.label, tickformat=spec.x.tickformat)
    fig.update_yaxes(title_text=spec.y.label, tickformat=spec.y.tickformat)

    fig.update_layout(margin=dict(l=20, r=20, t=50, b=20))
    return fig

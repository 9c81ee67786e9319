from __future__ import annotations

import numpy as np

from answers.chart_policy import chart_policy, chart_type_label
from answers.metrics import discover_metrics, resolve_metric
from charts.plotly_renderer import render_plotly
from charts.series import build_series
from schemas.viewer import ChartPoint


def test_discover_metrics_empty():
    assert discover_metrics([]) == []


def test_discover_metrics_excludes_date_and_non_numeric():
    records = [
        {"date": "2024-01-01", "OMO": 1, "label": "x", "flag": True, "T-Bill": None},
        {"date": "2024-01-02", "OMO": 2, "T-Bill": 3.5, "extra": np.float64(1.0)},
    ]

    assert discover_metrics(records) == ["OMO", "T-Bill", "extra"]


def test_discover_metrics_keeps_first_seen_order(cashflow_records):
    assert discover_metrics(cashflow_records) == ["OMO", "T-Repo", "T-Bill"]


def test_resolve_metric():
    metrics = ["OMO", "T-Repo"]

    assert resolve_metric(None, metrics) == "OMO"
    assert resolve_metric("T-Repo", metrics) == "T-Repo"
    assert resolve_metric("gone", metrics) == "OMO"
    assert resolve_metric("OMO", []) is None


def test_build_series_is_chronological():
    records = [{"date": "2024-01-02", "OMO": 5}, {"date": "2024-01-01", "OMO": 3}]

    series = build_series(records, "OMO")

    assert series == [
        ChartPoint(date="2024-01-01", value=3),
        ChartPoint(date="2024-01-02", value=5),
    ]


def test_build_series_ignores_table_order(cashflow_records):
    series = build_series(list(reversed(cashflow_records)), "T-Repo")

    assert [p.date for p in series] == ["2023-12-29", "2024-01-01", "2024-01-02", "2024-01-03"]
    assert [p.value for p in series] == [30, 55, 30, 40]


def test_build_series_without_metric_is_empty(cashflow_records):
    assert build_series(cashflow_records, None) == []
    assert build_series(cashflow_records, "") == []


def test_build_series_degrades_on_bad_rows():
    records = [
        {"date": "garbage", "OMO": 1},
        {"date": "2024-03-01", "OMO": "n/a"},
        {"date": "2024-02-01"},
    ]

    series = build_series(records, "OMO")

    assert [(p.date, p.value) for p in series] == [
        ("2024-02-01", None),
        ("2024-03-01", None),
        ("garbage", 1),
    ]


def test_chart_type_label():
    assert chart_type_label("OMO") == "Line chart showing OMO over time"


def test_chart_policy_and_render(cashflow_records):
    points = build_series(cashflow_records, "OMO")

    spec = chart_policy(metric="OMO", points=points)
    assert spec is not None
    assert spec.series[0].metric == "OMO"
    assert (spec.start, spec.end) == ("2023-12-29", "2024-01-03")

    fig = render_plotly(spec, points)
    assert len(fig.data) == 1
    assert fig.data[0].name == "OMO"
    assert fig.layout.xaxis.tickformat == "%b %y"


def test_render_without_data():
    assert chart_policy(metric="OMO", points=[]) is None
    assert chart_policy(metric=None, points=[ChartPoint(date="2024-01-01", value=1)]) is None

    fig = render_plotly(None, [])
    assert fig.layout.title.text == "No data to chart"


def test_chart_range_ignores_unparsable_dates():
    records = [
        {"date": "2024-01-02", "OMO": 5},
        {"date": "garbage", "OMO": 7},
        {"date": "2024-01-01", "OMO": 3},
    ]
    points = build_series(records, "OMO")

    spec = chart_policy(metric="OMO", points=points)

    assert points[-1].date == "garbage"
    assert (spec.start, spec.end) == ("2024-01-01", "2024-01-02")


def test_chart_range_is_empty_when_nothing_parses():
    points = build_series([{"date": "soon", "OMO": 1}], "OMO")

    spec = chart_policy(metric="OMO", points=points)

    assert spec.start is None and spec.end is None

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from answers.chart_policy import chart_type_label
from answers.metrics import discover_metrics, resolve_metric
from chart_describer import ChartDescriber
from charts.series import build_series
from data_pipeline import next_sort_config, process
from pydantic import BaseModel, Field
from schemas.viewer import ChartPoint, Filters, SortConfig, SourceRef
from settings import DEFAULT_DATA_URL
from tools.json_adapter import FetchError, JSONDatasetAdapter, LoadResult

logger = logging.getLogger(__name__)


class ViewerState(BaseModel):
    """
    Everything one viewer session shows. Replaced, never mutated in place.
    """

    url: str = DEFAULT_DATA_URL
    records: List[Any] = Field(default_factory=list)
    source: Optional[SourceRef] = None

    is_loading: bool = False
    error: Optional[str] = None

    draft_filters: Filters = Field(default_factory=Filters)
    active_filters: Filters = Field(default_factory=Filters)
    sort_config: SortConfig = Field(
        default_factory=lambda: SortConfig(key="date", direction="descending")
    )

    selected_metric: Optional[str] = None
    description: str = ""
    is_generating: bool = False


# -----------------------
# State transitions (pure)
# -----------------------


def displayed_records(state: ViewerState) -> List[Any]:
    return process(state.records, state.active_filters, state.sort_config)


def available_metrics(state: ViewerState) -> List[str]:
    return discover_metrics(displayed_records(state))


def chart_series(state: ViewerState) -> List[ChartPoint]:
    return build_series(displayed_records(state), state.selected_metric)


def reconcile_metric(state: ViewerState) -> ViewerState:
    metric = resolve_metric(state.selected_metric, available_metrics(state))
    if metric == state.selected_metric:
        return state
    return state.model_copy(update={"selected_metric": metric})


def sort_by(state: ViewerState, key: str) -> ViewerState:
    return state.model_copy(
        update={"sort_config": next_sort_config(state.sort_config, key)}
    )


def set_draft_filters(state: ViewerState, **changes: Any) -> ViewerState:
    draft = state.draft_filters.model_copy(update=changes)
    return state.model_copy(update={"draft_filters": draft})


def apply_filters(state: ViewerState) -> ViewerState:
    applied = state.model_copy(
        update={"active_filters": state.draft_filters.model_copy()}
    )
    return reconcile_metric(applied)


def select_metric(state: ViewerState, metric: str) -> ViewerState:
    if metric not in available_metrics(state):
        raise ValueError(f"Unknown metric: {metric}")
    return state.model_copy(update={"selected_metric": metric})


def loaded(state: ViewerState, result: LoadResult) -> ViewerState:
    updated = state.model_copy(
        update={
            "records": list(result.records),
            "source": result.source,
            "is_loading": False,
            "error": None,
        }
    )
    return reconcile_metric(updated)


def load_failed(state: ViewerState, error: FetchError) -> ViewerState:
    return state.model_copy(
        update={
            "records": [],
            "source": None,
            "is_loading": False,
            "error": error.message,
            "selected_metric": None,
        }
    )


def can_generate(state: ViewerState) -> bool:
    return not state.is_generating and bool(state.records)


# -----------------------
# Session (owns the single mutable state)
# -----------------------


class ViewerSession:
    """
    One user's viewer. Async operations are numbered; only the result of the
    most recently issued fetch / description request is applied.
    """

    def __init__(
        self,
        *,
        loader: JSONDatasetAdapter,
        describer: ChartDescriber,
        url: str = DEFAULT_DATA_URL,
    ):
        self.loader = loader
        self.describer = describer
        self.state = ViewerState(url=url)

        self._fetch_seq = 0
        self._describe_seq = 0

    # ---- synchronous actions ----

    def sort_by(self, key: str) -> ViewerState:
        self.state = sort_by(self.state, key)
        return self.state

    def set_draft_filters(self, **changes: Any) -> ViewerState:
        self.state = set_draft_filters(self.state, **changes)
        return self.state

    def apply_filters(self) -> ViewerState:
        self.state = apply_filters(self.state)
        return self.state

    def select_metric(self, metric: str) -> ViewerState:
        self.state = select_metric(self.state, metric)
        return self.state

    def displayed(self) -> List[Any]:
        return displayed_records(self.state)

    def metrics(self) -> List[str]:
        return available_metrics(self.state)

    def series(self) -> List[ChartPoint]:
        return chart_series(self.state)
    # ---- async actions ----

    async def fetch(self, url: Optional[str] = None) -> ViewerState:
        url = url or self.state.url

        self._fetch_seq += 1
        seq = self._fetch_seq
        self.state = self.state.model_copy(
            update={"url": url, "is_loading": True, "error": None}
        )

        try:
            result = await asyncio.to_thread(self.loader.load, url)
        except FetchError as e:
            if seq != self._fetch_seq:
                logger.info("Discarding stale fetch failure for %s", url)
                return self.state
            logger.warning("Fetch failed (%s): %s", e.kind.value, e.message)
            self.state = load_failed(self.state, e)
            return self.state
        finally:
            # cancelled or unexpected failure: don't leave the session loading
            if seq == self._fetch_seq and self.state.is_loading:
                self.state = self.state.model_copy(update={"is_loading": False})

        if seq != self._fetch_seq:
            logger.info("Discarding stale fetch result for %s", url)
            return self.state

        self.state = loaded(self.state, result)
        return self.state

    async def generate_description(self) -> ViewerState:
        if not can_generate(self.state):
            return self.state

        metric = self.state.selected_metric
        series = self.series()

        self._describe_seq += 1
        seq = self._describe_seq
        self.state = self.state.model_copy(
            update={"is_generating": True, "description": ""}
        )

        try:
            description = await self.describer.adescribe(
                series, chart_type_label(metric or "")
            )
        finally:
            if seq == self._describe_seq and self.state.is_generating:
                self.state = self.state.model_copy(update={"is_generating": False})

        if seq != self._describe_seq:
            logger.info("Discarding stale chart description")
            return self.state

        self.state = self.state.model_copy(update={"description": description})
        return self.state

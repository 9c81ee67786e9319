# viewer/schemas/viewer.py
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field

DATE_FIELD = "date"

# One observation: a date string plus an open-ended set of numeric metrics.
Record = Dict[str, Any]

SortDirection = Literal["ascending", "descending"]


def record_fields(record: Any) -> Mapping[str, Any]:
    """
    Fields of a fetched item. Non-object items expose no fields.
    """
    if isinstance(record, Mapping):
        return record
    return {}


class Filters(BaseModel):
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None
    query: str = ""

    def is_active(self) -> bool:
        return bool(self.date_from or self.date_to or self.query)


class SortConfig(BaseModel):
    key: Optional[str] = None
    direction: SortDirection = "ascending"


class ChartPoint(BaseModel):
    date: str
    value: Optional[Union[int, float]] = None


class SourceRef(BaseModel):
    label: str
    reference: str
    parameters: Optional[dict] = None
    retrieved_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )


class TableView(BaseModel):
    columns: List[str]
    headers: List[str]
    rows: List[List[str]]
    caption: str

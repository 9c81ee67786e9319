# viewer/tools/json_adapter.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Tuple

import requests
from schemas.viewer import SourceRef

logger = logging.getLogger(__name__)


class FetchErrorKind(str, Enum):
    HTTP_STATUS = "http_status"
    PARSE_ERROR = "parse_error"
    NO_ARRAY_FOUND = "no_array_found"
    TRANSPORT = "transport"


class FetchError(Exception):
    def __init__(
        self,
        kind: FetchErrorKind,
        message: str,
        *,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class LoadResult:
    records: List[Any]
    source: SourceRef


def locate_array(payload: Any) -> Tuple[Optional[str], List[Any]]:
    """
    Find the record array in a parsed JSON body.

    Returns (key, items): key is None for a top-level array, otherwise the
    first object field (in document order) whose value is an array.
    """
    if isinstance(payload, list):
        return None, payload

    if isinstance(payload, dict):
        for key, value in payload.items():
            if isinstance(value, list):
                return key, value

    raise FetchError(FetchErrorKind.NO_ARRAY_FOUND, "No array found in JSON data")


def extract_records(payload: Any) -> List[Any]:
    _, items = locate_array(payload)
    return items


class JSONDatasetAdapter:
    """
    Fetches a JSON dataset from a URL and normalizes it to a list of records.

    One GET per call. No caching, no retry.
    """

    def __init__(
        self,
        *,
        session: Any = None,
        timeout: Optional[float] = 60.0,
    ):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def load(self, url: str) -> LoadResult:
        logger.info("Fetching dataset from %s", url)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(FetchErrorKind.TRANSPORT, str(e)) from e

        if not response.ok:
            raise FetchError(
                FetchErrorKind.HTTP_STATUS,
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(
                FetchErrorKind.PARSE_ERROR, f"Invalid JSON in response: {e}"
            ) from e

        key, records = locate_array(payload)
        records = list(records)

        logger.info(
            "Loaded %d records from %s (array at %s)",
            len(records),
            url,
            key or "top level",
        )

        src = self._make_source(url=url, array_key=key)
        return LoadResult(records=records, source=src)

    def _make_source(self, *, url: str, array_key: Optional[str]) -> SourceRef:
        return SourceRef(
            label="JSON dataset",
            reference=url,
            parameters={"array_key": array_key},
            retrieved_at=datetime.now(timezone.utc),
        )

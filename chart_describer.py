# viewer/chart_describer.py
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Protocol, Sequence

from openai import OpenAI
from schemas.description import DescriptionRequest, DescriptionResponse
from schemas.viewer import ChartPoint
from utils.formatting import json_safe

logger = logging.getLogger(__name__)

DEFAULT_MAX_POINTS = 50

FALLBACK_DESCRIPTION = "Sorry, I was unable to generate a description for this chart."

SYSTEM_INSTRUCTIONS = (
    "You are an expert data analyst. Given the following data and chart type, "
    "generate a concise description of the chart, highlighting key trends and patterns."
)


class DescriptionError(Exception):
    pass


class DescriptionService(Protocol):
    def generate(self, request: DescriptionRequest) -> Any:
        ...


def serialize_series(
    series: Sequence[ChartPoint], max_points: int = DEFAULT_MAX_POINTS
) -> str:
    """
    Compact JSON of the first `max_points` points. Longer series are truncated.
    """
    rows = [
        {"date": p.date, "value": json_safe(p.value)} for p in list(series)[:max_points]
    ]
    return json.dumps(rows, ensure_ascii=False, separators=(",", ":"))


def render_prompt(request: DescriptionRequest) -> str:
    return f"Data: {request.data}\nChart Type: {request.chart_type}\n\nDescription: "


class OpenAIDescriptionService:
    """
    Description service backed by the OpenAI Responses API.
    The client is created on first use (expects OPENAI_API_KEY in env).
    """

    def __init__(self, *, model: str = "gpt-4o-mini", client: Any = None):
        self.model = model
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = OpenAI()
        return self._client

    def generate(self, request: DescriptionRequest) -> DescriptionResponse:
        resp = self.client.responses.create(
            model=self.model,
            instructions=SYSTEM_INSTRUCTIONS,
            input=render_prompt(request),
        )

        text = (resp.output_text or "").strip()
        if not text:
            raise DescriptionError("Model returned an empty description")
        return DescriptionResponse(description=text)


class ChartDescriber:
    """
    Turns a chart series into a natural-language description.
    Failures never reach the caller: they come back as FALLBACK_DESCRIPTION.
    """

    def __init__(
        self,
        service: DescriptionService,
        *,
        max_points: int = DEFAULT_MAX_POINTS,
        fallback: str = FALLBACK_DESCRIPTION,
    ):
        self.service = service
        self.max_points = max_points
        self.fallback = fallback

    def build_request(
        self, series: Sequence[ChartPoint], chart_type: str
    ) -> DescriptionRequest:
        return DescriptionRequest(
            data=serialize_series(series, self.max_points),
            chart_type=chart_type,
        )

    def describe(self, series: Sequence[ChartPoint], chart_type: str) -> str:
        request = self.build_request(series, chart_type)
        try:
            description = self._generate(request)
        except Exception:
            logger.warning("Failed to generate chart description", exc_info=True)
            return self.fallback
        return description

    async def adescribe(self, series: Sequence[ChartPoint], chart_type: str) -> str:
        return await asyncio.to_thread(self.describe, series, chart_type)

    def _generate(self, request: DescriptionRequest) -> str:
        raw = self.service.generate(request)

        # services may hand back a plain {"description": ...} mapping
        if isinstance(raw, DescriptionResponse):
            response = raw
        else:
            response = DescriptionResponse.model_validate(raw)

        text = response.description.strip()
        if not text:
            raise DescriptionError("Empty description")
        return text

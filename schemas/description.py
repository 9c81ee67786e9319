# viewer/schemas/description.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DescriptionRequest(BaseModel):
    """
    Input of the text-generation service.
    """

    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(..., description="The JSON data for the chart.")
    chart_type: str = Field(
        ...,
        alias="chartType",
        description="The type of chart to be described (e.g., line, bar, pie).",
    )


class DescriptionResponse(BaseModel):
    description: str = Field(
        ..., description="A textual description of the chart data and trends."
    )

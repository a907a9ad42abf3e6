"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from flowsight.models.nodes import DesignNode


class AnalyzeRequest(BaseModel):
    nodes: list[DesignNode] = Field(..., description="Forest of design nodes (documents, pages or frames)")
    options: dict[str, bool] = Field(
        default_factory=dict,
        description="Optional run switches (e.g., skip_patterns=True, skip_flows=True)",
    )


class ClassifyRequest(BaseModel):
    node: DesignNode = Field(..., description="Single design node to classify")


class DeviceRequest(BaseModel):
    width: float = Field(..., description="Frame width")
    height: float = Field(..., description="Frame height")

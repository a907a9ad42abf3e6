"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from flowsight.models.analysis import AnalysisOutput


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    environment: str = "development"
    stages_registered: int = 0


class AnalyzeResponse(BaseModel):
    analysis: AnalysisOutput
    summary_text: str = ""
    processing_time_ms: float = 0.0
    stages_completed: int = 0
    stages_failed: int = 0
    errors: dict[str, str] = Field(default_factory=dict)


class ClassifyResponse(BaseModel):
    semantic_type: str | None = None
    confidence: float = 0.0
    detected: list[str] = Field(default_factory=list)
    reasons: list[str] = Field(default_factory=list)
    heading_level: int = 0


class DeviceResponse(BaseModel):
    device_type: str
    orientation: str
    confidence: float
    width: float
    height: float
    aspect_ratio: float
    pixel_density: str
    category: str
    recommendations: list[str] = Field(default_factory=list)

"""FastAPI dependency injection."""

from __future__ import annotations

from flowsight.config import settings
from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig


def get_settings():
    return settings


def get_detection_config() -> DetectionConfig:
    return DEFAULT_CONFIG

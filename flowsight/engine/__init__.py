"""FlowSight classification and flow-clustering engine."""

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.context import AnalysisContext
from flowsight.engine.pipeline import Pipeline, create_pipeline
from flowsight.engine.registry import Layer, get_registry, stage

__all__ = [
    "stage",
    "Layer",
    "get_registry",
    "AnalysisContext",
    "DetectionConfig",
    "DEFAULT_CONFIG",
    "Pipeline",
    "create_pipeline",
]

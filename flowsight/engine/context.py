"""AnalysisContext: the single mutable state object flowing through all stages.

Stage outputs land on named fields; ``errors`` maps a failed stage id to its
message so a partial run is still reportable.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from flowsight.engine.config import DEFAULT_CONFIG, DetectionConfig
from flowsight.engine.structures import (
    CrossFlowConsistency,
    FlowDetectionResult,
    PatternAnalysis,
    ScreenStructure,
    UserRole,
)
from flowsight.models.nodes import DesignNode


@dataclass
class AnalysisContext:
    nodes: list[DesignNode]
    config: DetectionConfig = DEFAULT_CONFIG
    # Run switches: skip_patterns, skip_flows
    options: dict[str, bool] = field(default_factory=dict)

    # S0: structure
    screens: list[ScreenStructure] = field(default_factory=list)
    # S1: roles
    roles: list[UserRole] = field(default_factory=list)
    # S2: flows
    flow_result: FlowDetectionResult | None = None
    # S3: patterns, keyed by screen id / flow id
    screen_patterns: dict[str, PatternAnalysis] = field(default_factory=dict)
    flow_patterns: dict[str, PatternAnalysis] = field(default_factory=dict)
    cross_flow: CrossFlowConsistency | None = None

    completed_stages: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)
    # Set by Pipeline.run_streaming while a stage runs; takes a 0-1 fraction
    progress_callback: Callable[[float], None] | None = None

    def report_progress(self, fraction: float) -> None:
        if self.progress_callback is not None:
            self.progress_callback(fraction)

"""S2.01 Flow detection: cluster screens into user journeys."""

from __future__ import annotations

from flowsight.engine.context import AnalysisContext
from flowsight.engine.flows.engine import FlowDetectionEngine
from flowsight.engine.registry import Layer, stage


@stage(
    id="S2.01",
    layer=Layer.FLOWS,
    dependencies=["S0.01", "S1.01"],
    description="Cluster screens into flows, merge, score and assign roles",
)
def detect_flows(ctx: AnalysisContext) -> None:
    ctx.flow_result = FlowDetectionEngine(ctx.config).detect(ctx.screens, ctx.roles)

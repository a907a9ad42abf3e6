"""S3 Pattern and consistency analysis, per screen and per flow."""

from __future__ import annotations

import logging

from flowsight.engine.context import AnalysisContext
from flowsight.engine.patterns import PatternAnalyzer, cross_flow_consistency
from flowsight.engine.registry import Layer, stage

logger = logging.getLogger(__name__)


@stage(
    id="S3.01",
    layer=Layer.PATTERNS,
    dependencies=["S0.01"],
    description="Detect UI patterns and score consistency for each screen",
)
def analyze_screen_patterns(ctx: AnalysisContext) -> None:
    analyzer = PatternAnalyzer(ctx.config)
    total = len(ctx.screens)
    for i, screen in enumerate(ctx.screens):
        try:
            ctx.screen_patterns[screen.id] = analyzer.analyze_screen(screen)
        except Exception as e:
            logger.warning("Pattern analysis failed for screen %r: %s", screen.name, e)
        if total > 10:
            ctx.report_progress((i + 1) / total)


@stage(
    id="S3.02",
    layer=Layer.PATTERNS,
    dependencies=["S2.01"],
    description="Pattern analysis per flow and consistency across flows",
)
def analyze_flow_patterns(ctx: AnalysisContext) -> None:
    if ctx.flow_result is None:
        return
    analyzer = PatternAnalyzer(ctx.config)
    for flow in ctx.flow_result.flows:
        ctx.flow_patterns[flow.id] = analyzer.analyze_flow(flow)
    ctx.cross_flow = cross_flow_consistency(ctx.flow_result.flows)

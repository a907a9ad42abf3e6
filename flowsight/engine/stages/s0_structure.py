"""S0.01 Screen structure: discover screens in the node forest and build their trees."""

from __future__ import annotations

from flowsight.engine.context import AnalysisContext
from flowsight.engine.registry import Layer, stage
from flowsight.engine.screens import ScreenBuilder


@stage(
    id="S0.01",
    layer=Layer.STRUCTURE,
    description="Build classified screen structures from top-level frames",
)
def build_screen_structures(ctx: AnalysisContext) -> None:
    builder = ScreenBuilder(ctx.config)
    ctx.screens = builder.build_all(ctx.nodes)

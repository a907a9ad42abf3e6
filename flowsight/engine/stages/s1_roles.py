"""S1.01 Role detection over every layer of the document."""

from __future__ import annotations

from flowsight.engine.context import AnalysisContext
from flowsight.engine.detectors.role import RoleDetector
from flowsight.engine.registry import Layer, stage
from flowsight.models.nodes import iter_nodes


@stage(
    id="S1.01",
    layer=Layer.ROLES,
    description="Detect user roles from layer names and ancestry",
)
def detect_user_roles(ctx: AnalysisContext) -> None:
    ctx.roles = RoleDetector(ctx.config).detect(iter_nodes(ctx.nodes))

"""Stage registry: every analysis stage is a standalone function registered via decorator.

Usage:
    @stage(id="S2.01", layer=Layer.FLOWS, dependencies=["S0.01", "S1.01"])
    def detect_flows(ctx: AnalysisContext) -> None:
        ctx.flow_result = FlowDetectionEngine(ctx.config).detect(ctx.screens, ctx.roles)

Adding a stage means writing one decorated function in ``engine/stages``.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from flowsight.engine.context import AnalysisContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    STRUCTURE = 0
    ROLES = 1
    FLOWS = 2
    PATTERNS = 3


@dataclass
class StageSpec:
    id: str
    layer: Layer
    fn: Callable[["AnalysisContext"], None]
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class StageRegistry:
    """Ordered collection of stages; resolves a dependency-respecting run order."""

    def __init__(self) -> None:
        self._stages: dict[str, StageSpec] = {}

    def register(self, spec: StageSpec) -> None:
        if spec.id in self._stages:
            raise ValueError(f"Duplicate stage ID: {spec.id}")
        self._stages[spec.id] = spec
        logger.debug("Registered stage %s (%s)", spec.id, spec.layer.name)

    def get(self, stage_id: str) -> StageSpec:
        return self._stages[stage_id]

    def all(self) -> list[StageSpec]:
        return sorted(self._stages.values(), key=lambda s: (s.layer, s.id))

    def dependents(self, stage_ids: set[str]) -> set[str]:
        """Every stage that transitively depends on one of ``stage_ids``."""
        found: set[str] = set()
        frontier = set(stage_ids)
        while frontier:
            nxt = {
                sid for sid, spec in self._stages.items()
                if sid not in found and frontier.intersection(spec.dependencies)
            }
            found |= nxt
            frontier = nxt
        return found

    def resolve_order(self, requested_ids: set[str] | None = None) -> list[StageSpec]:
        """Kahn topological sort; ties broken by id. ``None`` means every stage."""
        pool = self._stages
        if requested_ids is not None:
            pool = {k: v for k, v in pool.items() if k in requested_ids}

        in_degree = {
            sid: sum(1 for dep in spec.dependencies if dep in pool)
            for sid, spec in pool.items()
        }
        queue = sorted(sid for sid, d in in_degree.items() if d == 0)
        ordered: list[StageSpec] = []

        while queue:
            sid = queue.pop(0)
            ordered.append(pool[sid])
            for other_id, other in pool.items():
                if sid in other.dependencies:
                    in_degree[other_id] -= 1
                    if in_degree[other_id] == 0:
                        queue.append(other_id)
                        queue.sort()

        if len(ordered) != len(pool):
            missing = set(pool) - {s.id for s in ordered}
            raise ValueError(f"Circular dependency detected among: {sorted(missing)}")
        return ordered

    @property
    def count(self) -> int:
        return len(self._stages)


_registry = StageRegistry()


def get_registry() -> StageRegistry:
    return _registry


def stage(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    description: str = "",
    registry: StageRegistry | None = None,
):
    """Decorator to register a stage function (on the global registry by default)."""

    def decorator(fn: Callable[["AnalysisContext"], None]):
        (registry or _registry).register(
            StageSpec(
                id=id,
                layer=layer,
                fn=fn,
                dependencies=dependencies or [],
                description=description,
            )
        )
        return fn

    return decorator

"""Pipeline orchestrator: runs registered stages in dependency order with option gating."""

from __future__ import annotations

import logging
import time
from collections.abc import Generator
from typing import Any

from flowsight.engine.context import AnalysisContext
from flowsight.engine.errors import ErrorSink, logging_error_sink
from flowsight.engine.registry import Layer, StageRegistry, get_registry

logger = logging.getLogger(__name__)

# option name -> layer it switches off
_SKIP_OPTIONS = {
    "skip_flows": Layer.FLOWS,
    "skip_patterns": Layer.PATTERNS,
}


class Pipeline:
    """Orchestrates the analysis stages over one AnalysisContext."""

    def __init__(
        self,
        registry: StageRegistry | None = None,
        error_sink: ErrorSink | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.error_sink: ErrorSink = error_sink or logging_error_sink

    def _ordered(self, ctx: AnalysisContext):
        skip_ids = self._adaptive_gate(ctx)
        requested = {s.id for s in self.registry.all()} - skip_ids
        return self.registry.resolve_order(requested), skip_ids

    def _run_stage(self, spec, ctx: AnalysisContext) -> str:
        """Run one stage; a failure is recorded on the context and reported, never raised."""
        try:
            spec.fn(ctx)
        except Exception as e:
            ctx.errors[spec.id] = str(e)
            logger.warning("  %s FAILED: %s", spec.id, e)
            self.error_sink(e, {"module": "Pipeline", "operation": spec.id, "stage": spec.description})
            return str(e)
        ctx.completed_stages.add(spec.id)
        return ""

    def run(self, ctx: AnalysisContext) -> AnalysisContext:
        """Run the full pipeline on the given context."""
        start = time.perf_counter()
        ordered, skip_ids = self._ordered(ctx)
        logger.info("Pipeline: %d stages queued (%d skipped)", len(ordered), len(skip_ids))

        for spec in ordered:
            t0 = time.perf_counter()
            if not self._run_stage(spec, ctx):
                logger.debug("  %s completed in %.1fms", spec.id, (time.perf_counter() - t0) * 1000)

        logger.info(
            "Pipeline complete: %d/%d stages in %.0fms",
            len(ctx.completed_stages),
            len(ordered),
            (time.perf_counter() - start) * 1000,
        )
        return ctx

    def run_streaming(self, ctx: AnalysisContext) -> Generator[dict[str, Any], None, None]:
        """Run the pipeline, yielding a progress dict before and after each stage.

        The caller's ``ctx`` is mutated in place, so once the generator is
        exhausted the context holds the same results ``run()`` would produce.
        """
        ordered, _ = self._ordered(ctx)
        total = len(ordered)
        sub_events: list[dict[str, Any]] = []

        def _event(spec, index: int, status: str, elapsed_ms: float = 0.0, error: str = "") -> dict[str, Any]:
            return {
                "stage_id": spec.id,
                "description": spec.description,
                "layer": spec.layer.name,
                "index": index,
                "total": total,
                "elapsed_ms": elapsed_ms,
                "status": status,
                "error": error,
            }

        for i, spec in enumerate(ordered):
            yield _event(spec, i, "running")

            def _on_sub_progress(pct: float, _spec=spec, _i=i) -> None:
                evt = _event(_spec, _i, "running")
                evt["sub_progress"] = round(pct, 2)
                sub_events.append(evt)

            ctx.progress_callback = _on_sub_progress
            t0 = time.perf_counter()
            error = self._run_stage(spec, ctx)
            ctx.progress_callback = None

            yield from sub_events
            sub_events.clear()

            elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)
            yield _event(spec, i, "error" if error else "ok", elapsed_ms, error)

    def _adaptive_gate(self, ctx: AnalysisContext) -> set[str]:
        """Stages switched off by run options, plus everything depending on them.

        - skip_flows drops flow detection and the flow-level pattern stage
        - skip_patterns drops every pattern/consistency stage
        """
        skip: set[str] = set()
        for option, layer in _SKIP_OPTIONS.items():
            if ctx.options.get(option):
                skip.update(s.id for s in self.registry.all() if s.layer == layer)
        skip |= self.registry.dependents(skip)
        return skip


def create_pipeline(error_sink: ErrorSink | None = None) -> Pipeline:
    """Factory: a pipeline over the global registry with every stage module loaded."""
    from flowsight.engine.stages import register_stages

    register_stages()
    return Pipeline(error_sink=error_sink)

"""POST /api/analyze: full pipeline analysis (standard + SSE streaming)."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from flowsight.dependencies import get_detection_config
from flowsight.engine.config import DetectionConfig
from flowsight.engine.context import AnalysisContext
from flowsight.engine.pipeline import create_pipeline
from flowsight.formatter import context_to_output, context_to_summary_text
from flowsight.models.requests import AnalyzeRequest
from flowsight.models.responses import AnalyzeResponse

logger = logging.getLogger(__name__)

router = APIRouter()


_SENTINEL = object()  # marks end of queue


def _build_response(ctx: AnalysisContext, start: float) -> AnalyzeResponse:
    elapsed = (time.perf_counter() - start) * 1000
    return AnalyzeResponse(
        analysis=context_to_output(ctx),
        summary_text=context_to_summary_text(ctx),
        processing_time_ms=round(elapsed, 1),
        stages_completed=len(ctx.completed_stages),
        stages_failed=len(ctx.errors),
        errors=ctx.errors,
    )


async def _stream_analyze(ctx: AnalysisContext) -> AsyncGenerator[str, None]:
    """Drive pipeline.run_streaming() in a thread, yielding SSE events as they arrive."""
    start = time.perf_counter()
    pipeline = create_pipeline()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def _run_pipeline() -> None:
        """Sync pipeline in thread: pushes progress dicts onto the async queue."""
        try:
            for progress in pipeline.run_streaming(ctx):
                loop.call_soon_threadsafe(queue.put_nowait, progress)
        finally:
            loop.call_soon_threadsafe(queue.put_nowait, _SENTINEL)

    # Start pipeline in a thread so the event loop stays free to flush SSE
    loop.run_in_executor(None, _run_pipeline)

    while True:
        item = await queue.get()
        if item is _SENTINEL:
            break
        yield f"event: progress\ndata: {json.dumps(item)}\n\n"

    try:
        response = _build_response(ctx, start)
    except Exception as e:
        logger.exception("Failed to format streamed analysis")
        yield f"event: error\ndata: {json.dumps({'type': 'error', 'message': str(e)})}\n\n"
        return

    yield f"event: result\ndata: {response.model_dump_json()}\n\n"
    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/analyze/stream")
async def analyze_stream(
    req: AnalyzeRequest,
    config: DetectionConfig = Depends(get_detection_config),
) -> StreamingResponse:
    ctx = AnalysisContext(nodes=req.nodes, config=config, options=req.options)
    return StreamingResponse(
        _stream_analyze(ctx),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    req: AnalyzeRequest,
    config: DetectionConfig = Depends(get_detection_config),
) -> AnalyzeResponse:
    start = time.perf_counter()
    ctx = AnalysisContext(nodes=req.nodes, config=config, options=req.options)

    pipeline = create_pipeline()
    ctx = pipeline.run(ctx)

    return _build_response(ctx, start)

"""Error sink: where top-level failures are reported before a fallback result is returned."""

from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class ErrorSink(Protocol):
    def __call__(self, error: BaseException, context: dict[str, Any]) -> None: ...


def logging_error_sink(error: BaseException, context: dict[str, Any]) -> None:
    """Default sink: log with traceback."""
    logger.error(
        "%s failed during %s: %s",
        context.get("module", "engine"),
        context.get("operation", "analysis"),
        error,
        exc_info=error,
    )


class CollectingErrorSink:
    """Logs and keeps every report, for callers that inspect failures afterwards."""

    def __init__(self) -> None:
        self.reports: list[tuple[BaseException, dict[str, Any]]] = []

    def __call__(self, error: BaseException, context: dict[str, Any]) -> None:
        logging_error_sink(error, context)
        self.reports.append((error, context))

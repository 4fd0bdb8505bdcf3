"""Span processor that logs spans when they finish."""

from __future__ import annotations

import logging
from typing import Optional

from lambda_tracing.tracer.provider import SpanProcessor


class LoggingSpanProcessor(SpanProcessor):
    """Logs a one-line span summary on finish using the standard logging module."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO) -> None:
        self.logger = logger or logging.getLogger("lambda_tracing.traces")
        self.level = level

    def on_end(self, span) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        self.logger.log(
            self.level,
            "[trace] name=%s trace_id=%s span_id=%s parent_id=%s status=%s tags=%s",
            span.name,
            span.context.trace_id,
            span.context.span_id,
            span.parent_span_id,
            span.status.name,
            span.tags,
        )

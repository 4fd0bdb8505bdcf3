"""Span implementation - minimal wrapper around OpenTelemetry Span."""

from __future__ import annotations

import threading
import time
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from opentelemetry.trace import Span as OTelSpan, Status, StatusCode
from opentelemetry.trace import set_span_in_context
from opentelemetry import context as context_api

from lambda_tracing.tracer.span_context import SpanContext

if TYPE_CHECKING:
    from lambda_tracing.tracer.tracer import Tracer

_PRIMITIVES = (bool, str, bytes, int, float)


class SpanStatus(Enum):
    UNSET = 0
    OK = 1
    ERROR = 2


def _to_attribute_value(value: Any) -> Any:
    """OTel attributes must be primitives or sequences of primitives."""
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, (list, tuple)) and all(isinstance(v, _PRIMITIVES) for v in value):
        return list(value)
    return str(value)


class Span:
    """
    Minimal wrapper around OpenTelemetry Span.

    Tags map onto OTel attributes and log entries onto OTel events. A span is
    finished at most once; later calls to finish() are ignored.

    Used as a context manager, the span is the active span for the block and
    is finished on every exit path.
    """

    def __init__(
        self,
        otel_span: OTelSpan,
        tracer: "Tracer",
        parent: Optional[SpanContext] = None,
    ) -> None:
        """
        Initialize span wrapper.

        Args:
            otel_span: OpenTelemetry Span instance
            tracer: lambda_tracing Tracer that started the span
            parent: Parent span context, None for a root span
        """
        self._otel_span = otel_span
        self.tracer = tracer
        self.parent = parent
        self._finished = False
        self._finish_lock = threading.Lock()
        self._activation_token = None

        self.context = SpanContext.from_otel(otel_span.get_span_context())
        self.name = getattr(otel_span, 'name', 'unknown')
        self.start_time_ns = time.time_ns()
        self.end_time_ns: Optional[int] = None

        self.status = SpanStatus.UNSET
        self.status_description: Optional[str] = None

        self._tags: Dict[str, Any] = {}
        self._logs: List[Dict[str, Any]] = []

    @property
    def parent_span_id(self) -> Optional[str]:
        return self.parent.span_id if self.parent else None

    @property
    def tags(self) -> Dict[str, Any]:
        """Tags set on this span (copy)."""
        return dict(self._tags)

    @property
    def logs(self) -> List[Dict[str, Any]]:
        """Log entries recorded on this span (copy)."""
        return [dict(entry) for entry in self._logs]

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def duration_ns(self) -> Optional[int]:
        if self.end_time_ns is None:
            return None
        return self.end_time_ns - self.start_time_ns

    def set_tag(self, key: str, value: Any) -> "Span":
        """Set a tag on the span. Returns the span for chaining."""
        if self._finished:
            return self
        value = _to_attribute_value(value)
        self._tags[key] = value
        self._otel_span.set_attribute(key, value)
        return self

    def log(self, fields: Dict[str, Any], timestamp_ns: Optional[int] = None) -> "Span":
        """
        Record a structured log entry.

        The entry becomes an OTel event named after its ``event`` field.
        """
        if self._finished:
            return self
        attributes = {k: _to_attribute_value(v) for k, v in fields.items()}
        self._logs.append(attributes)
        self._otel_span.add_event(
            name=str(fields.get("event", "log")),
            attributes=attributes,
            timestamp=timestamp_ns,
        )
        return self

    def set_status(self, status: SpanStatus, description: Optional[str] = None) -> None:
        if self._finished:
            return

        self.status = status
        self.status_description = description

        if status == SpanStatus.OK:
            otel_status = Status(status_code=StatusCode.OK)
        elif status == SpanStatus.ERROR:
            otel_status = Status(status_code=StatusCode.ERROR, description=description)
        else:
            otel_status = Status(status_code=StatusCode.UNSET)
        self._otel_span.set_status(otel_status)

    def finish(self) -> None:
        """
        Finish the span.

        Enrichment processors run BEFORE the OTel span ends (span is still mutable).
        Export processors run AFTER (OTel handles this automatically).
        """
        with self._finish_lock:
            if self._finished:
                return

            self.end_time_ns = time.time_ns()
            if self.status == SpanStatus.UNSET:
                self.set_status(SpanStatus.OK)

            # 1. Run enrichment processors (span is still mutable)
            self.tracer._run_enrichment_processors(self)

            # 2. End the OTel span (makes it immutable)
            self._otel_span.end(end_time=self.end_time_ns)
            self._finished = True

    def __enter__(self) -> "Span":
        ctx = set_span_in_context(self._otel_span)
        self._activation_token = context_api.attach(ctx)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc is not None and self.status != SpanStatus.ERROR:
                self.set_status(SpanStatus.ERROR, str(exc) or exc_type.__name__)
            self.finish()
        finally:
            if self._activation_token is not None:
                context_api.detach(self._activation_token)
                self._activation_token = None
        return False

    def __repr__(self) -> str:
        return (
            f"Span(name={self.name!r}, trace_id={self.context.trace_id}, "
            f"span_id={self.context.span_id}, finished={self._finished})"
        )

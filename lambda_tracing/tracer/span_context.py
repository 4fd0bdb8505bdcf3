"""Immutable trace metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from opentelemetry.trace import SpanContext as OTelSpanContext, TraceFlags, TraceState

from lambda_tracing.utils.helpers import (
    format_span_id,
    format_trace_id,
    parse_span_id,
    parse_trace_id,
)


@dataclass(frozen=True)
class SpanContext:
    trace_id: str
    span_id: str
    trace_flags: int = 1  # 1 = sampled, 0 = not sampled
    trace_state: Optional[str] = None
    is_remote: bool = False

    def is_valid(self) -> bool:
        return bool(self.trace_id and self.span_id) and self.to_otel().is_valid

    @classmethod
    def from_otel(cls, otel_context: OTelSpanContext) -> "SpanContext":
        """Build from an OpenTelemetry SpanContext."""
        trace_state = None
        if otel_context.trace_state:
            trace_state = ",".join(f"{k}={v}" for k, v in otel_context.trace_state.items()) or None
        return cls(
            trace_id=format_trace_id(otel_context.trace_id),
            span_id=format_span_id(otel_context.span_id),
            trace_flags=1 if otel_context.trace_flags.sampled else 0,
            trace_state=trace_state,
            is_remote=otel_context.is_remote,
        )

    def to_otel(self) -> OTelSpanContext:
        """Convert to an OpenTelemetry SpanContext."""
        from lambda_tracing.context.propagators import parse_tracestate

        parsed = parse_tracestate(self.trace_state or "")
        return OTelSpanContext(
            trace_id=parse_trace_id(self.trace_id),
            span_id=parse_span_id(self.span_id),
            is_remote=self.is_remote,
            trace_flags=TraceFlags(self.trace_flags),
            trace_state=TraceState(list(parsed.items())),
        )

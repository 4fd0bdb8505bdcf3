"""Active span lookup - using OpenTelemetry's context directly."""

from typing import Optional, TYPE_CHECKING

from opentelemetry.trace import get_current_span as otel_get_current_span

if TYPE_CHECKING:
    from lambda_tracing.tracer.span import Span


def get_current_span() -> Optional["Span"]:
    """
    Return the currently active span, if any.

    The returned wrapper belongs to the process-wide tracer.
    """
    otel_span = otel_get_current_span()
    if not otel_span.get_span_context().is_valid:
        return None

    from lambda_tracing.tracer import global_tracer
    from lambda_tracing.tracer.span import Span

    return Span(otel_span, global_tracer.get())

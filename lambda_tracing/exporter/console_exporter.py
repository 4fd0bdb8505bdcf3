"""Console exporter for developer visibility."""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from lambda_tracing.utils.helpers import format_span_id, format_trace_id


def format_span_line(span: ReadableSpan) -> str:
    """One line per span, so CloudWatch keeps each span in a single log event."""
    parent_id = format_span_id(span.parent.span_id) if span.parent else None
    duration_ns = span.end_time - span.start_time if span.end_time and span.start_time else None
    line = (
        f"[span] name={span.name} trace_id={format_trace_id(span.context.trace_id)} "
        f"span_id={format_span_id(span.context.span_id)} parent_id={parent_id} "
        f"status={span.status.status_code.name} duration_ns={duration_ns}"
    )
    if span.attributes:
        line += f" attrs={dict(span.attributes)}"
    return line + "\n"


def create_console_exporter(stream: Optional[TextIO] = None) -> ConsoleSpanExporter:
    """Print finished spans to stdout (or the provided stream)."""
    return ConsoleSpanExporter(out=stream or sys.stdout, formatter=format_span_line)

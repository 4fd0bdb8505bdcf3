"""Context utilities for lambda_tracing."""

from lambda_tracing.context.context import get_current_span
from lambda_tracing.context.propagators import (
    Format,
    TextMapExtractAdapter,
    extract_trace_context,
    inject_trace_context,
    parse_tracestate,
)

__all__ = [
    "get_current_span",
    "Format",
    "TextMapExtractAdapter",
    "extract_trace_context",
    "inject_trace_context",
    "parse_tracestate",
]

"""Tracer components for lambda_tracing."""

from lambda_tracing.tracer.provider import SpanProcessor, TracerProvider
from lambda_tracing.tracer.span import Span, SpanStatus
from lambda_tracing.tracer.span_context import SpanContext
from lambda_tracing.tracer.tracer import SpanBuilder, Tracer
from lambda_tracing.tracer import global_tracer

__all__ = [
    "Span",
    "SpanBuilder",
    "SpanStatus",
    "SpanContext",
    "Tracer",
    "TracerProvider",
    "SpanProcessor",
    "global_tracer",
]

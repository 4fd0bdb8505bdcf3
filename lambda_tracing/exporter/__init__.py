"""Exporters for delivering spans to backends."""

from __future__ import annotations

from typing import List, TYPE_CHECKING

from opentelemetry.sdk.trace import SpanProcessor as OTelSpanProcessor
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor

from lambda_tracing.exporter.console_exporter import create_console_exporter, format_span_line
from lambda_tracing.exporter.otlp_exporter import create_otlp_exporter

if TYPE_CHECKING:
    from lambda_tracing.config import LambdaTracingConfig


def build_export_processors(config: "LambdaTracingConfig") -> List[OTelSpanProcessor]:
    """
    OTel export processors for the exporters enabled in ``config``.

    Console output is written synchronously. OTLP export is batched; handlers
    flush the provider at the end of each invocation when ``flush_on_end`` is
    set, before the sandbox freezes.
    """
    processors: List[OTelSpanProcessor] = []
    if config.enable_console_exporter:
        processors.append(SimpleSpanProcessor(create_console_exporter()))
    if config.enable_otlp_exporter:
        exporter = create_otlp_exporter(
            endpoint=config.otlp_endpoint,
            api_key=config.api_key,
            timeout=config.otlp_timeout,
            headers=config.otlp_headers,
        )
        processors.append(BatchSpanProcessor(exporter))
    return processors


__all__ = [
    "build_export_processors",
    "create_console_exporter",
    "create_otlp_exporter",
    "format_span_line",
]

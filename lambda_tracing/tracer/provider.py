"""TracerProvider using OpenTelemetry SDK."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from opentelemetry.sdk.trace import TracerProvider as OTelTracerProvider
from opentelemetry.sdk.trace import SpanProcessor as OTelSpanProcessor
from opentelemetry.sdk.resources import Resource as OTelResource

logger = logging.getLogger(__name__)


class SpanProcessor:
    """
    Base interface for enrichment processors.

    Enrichment processors run BEFORE the OTel span ends (span is mutable).
    Export processors use OTel's SpanProcessor interface (run AFTER it ends).
    """

    def on_end(self, span) -> None:
        """
        Called when a span finishes, before the OTel span ends.

        Args:
            span: lambda_tracing Span instance (mutable)
        """
        pass

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout: Optional[float] = None) -> None:
        pass


class TracerProvider:
    """
    TracerProvider using OpenTelemetry SDK.

    Separates enrichment processors from OTel export processors.
    """

    def __init__(self, resource: Optional[Dict[str, str]] = None, flush_on_end: bool = True) -> None:
        """
        Args:
            resource: Resource attributes dictionary (converted to OTel Resource)
            flush_on_end: Whether handlers flush this provider after each invocation
        """
        otel_resource = OTelResource.create(resource or {})
        self._otel_provider = OTelTracerProvider(resource=otel_resource)

        self.resource = resource or {}
        self.flush_on_end = flush_on_end

        self._enrichment_processors: List[SpanProcessor] = []

        self._tracers: Dict[str, Any] = {}
        self._lock = threading.Lock()

        self.sampler: Optional[Any] = None

    def get_tracer(self, name: str) -> "Tracer":
        """Get (or create and cache) the tracer for an instrumentation scope."""
        with self._lock:
            tracer = self._tracers.get(name)
            if tracer is None:
                from lambda_tracing.tracer.tracer import Tracer
                tracer = Tracer(self, name)
                self._tracers[name] = tracer
            return tracer

    def add_span_processor(self, processor: Any) -> None:
        """
        Add a span processor.

        OTel processors go to the OTel provider for export; anything else is
        treated as an enrichment processor.
        """
        if isinstance(processor, OTelSpanProcessor):
            self._otel_provider.add_span_processor(processor)
        else:
            self._enrichment_processors.append(processor)

    def set_sampler(self, sampler: Any) -> None:
        self.sampler = sampler

    def force_flush(self, timeout: Optional[float] = None) -> bool:
        """Force flush all processors. Returns False if the OTel flush timed out."""
        flushed = self._otel_provider.force_flush(
            timeout_millis=int(timeout * 1000) if timeout else 30000
        )

        for processor in self._enrichment_processors:
            try:
                processor.force_flush(timeout=timeout)
            except Exception:
                logger.debug("force_flush failed for %r", processor, exc_info=True)
        return bool(flushed)

    def shutdown(self) -> None:
        """Shutdown the provider and all processors."""
        self._otel_provider.shutdown()

        for processor in self._enrichment_processors:
            try:
                processor.shutdown()
            except Exception:
                logger.debug("shutdown failed for %r", processor, exc_info=True)

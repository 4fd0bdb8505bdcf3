"""Tracer using OpenTelemetry with an OpenTracing-style builder API."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Optional, TYPE_CHECKING, Union

from opentelemetry import trace as otel_trace_api
from opentelemetry.trace import NonRecordingSpan, SpanKind, TraceFlags
from opentelemetry.trace import Tracer as OTelTracer
from opentelemetry.trace import get_current_span, set_span_in_context
from opentelemetry.sdk.trace.id_generator import RandomIdGenerator

from lambda_tracing.errors import InvalidCarrierError, UnsupportedFormatError
from lambda_tracing.tracer.span import Span
from lambda_tracing.tracer.span_context import SpanContext

if TYPE_CHECKING:
    from lambda_tracing.context.propagators import Format, TextMapExtractAdapter
    from lambda_tracing.tracer.provider import TracerProvider

logger = logging.getLogger(__name__)

Parent = Union[Span, SpanContext, None]


class SpanBuilder:
    """Collects span options before starting it. Obtain via Tracer.build_span()."""

    def __init__(self, tracer: "Tracer", name: str) -> None:
        self._tracer = tracer
        self._name = name
        self._parent: Parent = None
        self._tags: Dict[str, Any] = {}
        self._kind = SpanKind.INTERNAL
        self._ignore_active_span = False

    def as_child_of(self, parent: Parent) -> "SpanBuilder":
        """Set the parent. None is accepted and leaves the span without an explicit parent."""
        self._parent = parent
        return self

    def with_tag(self, key: str, value: Any) -> "SpanBuilder":
        self._tags[key] = value
        return self

    def with_kind(self, kind: SpanKind) -> "SpanBuilder":
        self._kind = kind
        return self

    def ignore_active_span(self) -> "SpanBuilder":
        self._ignore_active_span = True
        return self

    def start(self) -> Span:
        """Start the span without activating it."""
        return self._tracer.start_span(
            self._name,
            child_of=self._parent,
            tags=self._tags,
            kind=self._kind,
            ignore_active_span=self._ignore_active_span,
        )

    def start_active(self) -> Span:
        """
        Start the span for use in a ``with`` block.

        The span is active inside the block and finished when it exits.
        """
        return self.start()


class Tracer:
    """
    Tracer wrapper that uses an OpenTelemetry Tracer internally.

    Built by TracerProvider.get_tracer(), or directly over any OTel tracer
    (for example the OTel global one, which is a no-op until configured).
    """

    def __init__(
        self,
        provider: Optional["TracerProvider"],
        instrumentation_scope: str,
        otel_tracer: Optional[OTelTracer] = None,
    ):
        """
        Args:
            provider: lambda_tracing TracerProvider, or None for a bare OTel tracer
            instrumentation_scope: Instrumentation scope name
            otel_tracer: OTel tracer to use instead of the provider's
        """
        self._provider = provider
        self.instrumentation_scope = instrumentation_scope

        if otel_tracer is None:
            if provider is not None:
                otel_tracer = provider._otel_provider.get_tracer(instrumentation_scope)
            else:
                otel_tracer = otel_trace_api.get_tracer(instrumentation_scope)
        self._otel_tracer: OTelTracer = otel_tracer

    @property
    def provider(self) -> Optional["TracerProvider"]:
        return self._provider

    def build_span(self, name: str) -> SpanBuilder:
        return SpanBuilder(self, name)

    def start_span(
        self,
        name: str,
        child_of: Parent = None,
        tags: Optional[Dict[str, Any]] = None,
        kind: SpanKind = SpanKind.INTERNAL,
        ignore_active_span: bool = False,
    ) -> Span:
        """
        Start a new span.

        Args:
            name: Span name
            child_of: Parent Span or SpanContext; None falls back to the active span
            tags: Initial tags
            kind: OTel span kind
            ignore_active_span: Don't use the active span as implicit parent

        Returns:
            Span wrapping the OTel span
        """
        otel_parent_context = None
        parent: Optional[SpanContext] = None

        if isinstance(child_of, Span):
            otel_parent_context = set_span_in_context(child_of._otel_span)
            parent = child_of.context
        elif isinstance(child_of, SpanContext):
            otel_parent_context = set_span_in_context(NonRecordingSpan(child_of.to_otel()))
            parent = child_of

        if otel_parent_context is None and not ignore_active_span:
            current_span = get_current_span()
            if current_span.get_span_context().is_valid:
                otel_parent_context = set_span_in_context(current_span)
                parent = SpanContext.from_otel(current_span.get_span_context())

        # Head sampling for new root traces
        sampler = getattr(self._provider, "sampler", None)
        if sampler is not None and otel_parent_context is None:
            if not sampler.should_sample().sampled:
                id_generator = RandomIdGenerator()
                unsampled = NonRecordingSpan(
                    otel_trace_api.SpanContext(
                        trace_id=id_generator.generate_trace_id(),
                        span_id=id_generator.generate_span_id(),
                        is_remote=False,
                        trace_flags=TraceFlags(0),
                    )
                )
                otel_parent_context = set_span_in_context(unsampled)

        otel_span = self._otel_tracer.start_span(
            name=name,
            context=otel_parent_context,
            kind=kind,
        )
        span = Span(otel_span, self, parent)
        for key, value in (tags or {}).items():
            span.set_tag(key, value)
        return span

    def active_span(self) -> Optional[Span]:
        """Wrap the currently active OTel span, if any."""
        otel_span = get_current_span()
        if otel_span.get_span_context().is_valid:
            return Span(otel_span, self)
        return None

    def extract(
        self,
        format: "Format",
        carrier: Union["TextMapExtractAdapter", Mapping],
    ) -> Optional[SpanContext]:
        """
        Extract a propagated SpanContext from a carrier.

        Returns None when the carrier holds no valid trace context.

        Raises:
            UnsupportedFormatError: ``format`` isn't a Format member.
            InvalidCarrierError: the carrier isn't a str -> str mapping.
        """
        from lambda_tracing.context.propagators import (
            Format,
            TextMapExtractAdapter,
            extract_trace_context,
        )

        if not isinstance(format, Format):
            raise UnsupportedFormatError("unsupported propagation format", {"format": repr(format)})
        if not isinstance(carrier, TextMapExtractAdapter):
            carrier = TextMapExtractAdapter(carrier)
        return extract_trace_context(carrier.as_dict())

    def inject(self, span_context: SpanContext, format: "Format", carrier: MutableMapping) -> None:
        """Write ``span_context`` into ``carrier`` as W3C trace context headers."""
        from lambda_tracing.context.propagators import Format, inject_trace_context

        if not isinstance(format, Format):
            raise UnsupportedFormatError("unsupported propagation format", {"format": repr(format)})
        if not isinstance(carrier, MutableMapping):
            raise InvalidCarrierError("carrier must be a mutable mapping", {"type": type(carrier).__name__})
        inject_trace_context(carrier, span_context)

    def _run_enrichment_processors(self, span: Span) -> None:
        """
        Run enrichment processors before the span ends.

        Called by Span.finish() before the OTel span is ended.
        """
        if self._provider is None:
            return
        for processor in self._provider._enrichment_processors:
            try:
                processor.on_end(span)
            except Exception:
                # Processors should not crash tracing
                logger.debug("enrichment processor %r failed", processor, exc_info=True)

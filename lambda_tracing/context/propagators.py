"""W3C trace context propagation using OpenTelemetry's standard propagators."""

from __future__ import annotations

from enum import Enum
from collections.abc import Mapping
from typing import Dict, Iterator, Optional, Tuple

from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from opentelemetry.trace import get_current_span, set_span_in_context
from opentelemetry.trace import NonRecordingSpan

from lambda_tracing.errors import InvalidCarrierError
from lambda_tracing.tracer.span_context import SpanContext

# Use OTel's W3C Trace Context propagator
_propagator = TraceContextTextMapPropagator()


class Format(Enum):
    """Carrier formats understood by Tracer.extract() and Tracer.inject()."""

    HTTP_HEADERS = "http_headers"
    TEXT_MAP = "text_map"


class TextMapExtractAdapter:
    """
    Read-only carrier over a string-keyed, string-valued mapping.

    The mapping is validated and copied on construction, so later changes
    to the source don't leak into extraction.

    Raises:
        InvalidCarrierError: if ``headers`` isn't a mapping of str to str.
    """

    def __init__(self, headers: Mapping) -> None:
        if not isinstance(headers, Mapping):
            raise InvalidCarrierError(
                "carrier must be a mapping",
                {"type": type(headers).__name__},
            )
        copied: Dict[str, str] = {}
        for key, value in headers.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise InvalidCarrierError(
                    "carrier entries must be strings",
                    {"key": repr(key)},
                )
            copied[key] = value
        self._headers = copied

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._headers.items())

    def __len__(self) -> int:
        return len(self._headers)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._headers)


def parse_tracestate(header_value: str) -> Dict[str, str]:
    """
    Parse a tracestate header into a dict.

    Parses W3C Trace Context tracestate format: key1=value1,key2=value2
    """
    if not header_value:
        return {}

    result = {}
    for item in header_value.split(","):
        item = item.strip()
        if not item or "=" not in item:
            continue
        key, value = item.split("=", 1)
        key = key.strip().lower()
        value = value.strip()
        if key and value:
            result[key] = value

    return result


def _lowercase_keys(headers: Dict[str, str]) -> Dict[str, str]:
    # API Gateway forwards header names with the caller's casing.
    return {key.lower(): value for key, value in headers.items()}


def extract_trace_context(headers: Dict[str, str]) -> Optional[SpanContext]:
    """
    Extract traceparent and tracestate and return a combined SpanContext.

    Returns None when no valid traceparent is present. Malformed values are
    ignored by the propagator rather than raised.
    """
    ctx = _propagator.extract(carrier=_lowercase_keys(headers))

    span = get_current_span(context=ctx)
    otel_context = span.get_span_context()
    if not otel_context.is_valid:
        return None
    return SpanContext.from_otel(otel_context)


def inject_trace_context(headers: Dict[str, str], context: SpanContext) -> None:
    """Write traceparent (and tracestate when present) into ``headers``."""
    span = NonRecordingSpan(context.to_otel())
    _propagator.inject(carrier=headers, context=set_span_in_context(span))


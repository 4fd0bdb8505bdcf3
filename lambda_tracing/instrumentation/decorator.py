"""@traced_handler decorator for plain Lambda handler functions."""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional

from lambda_tracing.instrumentation.cold_start import ColdStartFlag
from lambda_tracing.instrumentation.handler import TracingRequestHandler
from lambda_tracing.tracer.span_context import SpanContext
from lambda_tracing.tracer.tracer import Tracer

Extractor = Callable[[Tracer, Any], Optional[SpanContext]]


class _FunctionHandler(TracingRequestHandler):
    def __init__(self, func: Callable[[Any, Any], Any], extractor: Optional[Extractor], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._func = func
        self._extractor = extractor

    def do_handle_request(self, event: Any, context: Any) -> Any:
        return self._func(event, context)

    def extract_context(self, tracer: Tracer, input: Any) -> Optional[SpanContext]:
        if self._extractor is None:
            return super().extract_context(tracer, input)
        return self._extractor(tracer, input)


def traced_handler(
    func: Optional[Callable[[Any, Any], Any]] = None,
    *,
    tracer: Optional[Tracer] = None,
    cold_start: Optional[ColdStartFlag] = None,
    flush_on_end: Optional[bool] = None,
    extract_context: Optional[Extractor] = None,
) -> Any:
    """
    Decorate a ``handler(event, context)`` function to trace each invocation.

    Works bare (``@traced_handler``) or with options
    (``@traced_handler(tracer=...)``). Behaves like TracingRequestHandler;
    ``extract_context`` replaces the default header extraction.
    """

    def decorator(fn: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
        traced = _FunctionHandler(
            fn,
            extract_context,
            tracer=tracer,
            cold_start=cold_start,
            flush_on_end=flush_on_end,
        )

        @functools.wraps(fn)
        def wrapper(event: Any, context: Any) -> Any:
            return traced.handle_request(event, context)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator

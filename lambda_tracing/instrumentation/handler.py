"""Tracing Lambda handlers.

Subclass TracingRequestHandler (event/context handlers) or
TracingRequestStreamHandler (input/output stream handlers) and implement
do_handle_request(). Every invocation of handle_request() then runs inside a
"handleRequest" server span:

    class Handler(TracingRequestHandler):
        def do_handle_request(self, event, context):
            return {"statusCode": 200}

    handler = Handler()   # Lambda handler setting: module.handler
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, TypeVar

from opentelemetry.trace import SpanKind

from lambda_tracing.instrumentation.cold_start import COLD_START, ColdStartFlag
from lambda_tracing.instrumentation.headers import parse_and_extract
from lambda_tracing.instrumentation.lambda_tags import log_error, set_tags
from lambda_tracing.tracer import global_tracer
from lambda_tracing.tracer.span_context import SpanContext
from lambda_tracing.tracer.tracer import Tracer

logger = logging.getLogger(__name__)

SPAN_NAME = "handleRequest"

T = TypeVar("T")


class _TracingHandler(ABC):
    """Span lifecycle shared by the handler flavours."""

    def __init__(
        self,
        tracer: Optional[Tracer] = None,
        cold_start: Optional[ColdStartFlag] = None,
        flush_on_end: Optional[bool] = None,
    ) -> None:
        """
        Args:
            tracer: Tracer to use; None looks up the process-wide tracer on every call
            cold_start: Cold start flag; defaults to the process-wide one
            flush_on_end: Flush the tracer's provider after each invocation;
                None follows the provider's own flush_on_end setting
        """
        self._tracer = tracer
        self._cold_start = cold_start if cold_start is not None else COLD_START
        self._flush_on_end = flush_on_end

    @property
    def tracer(self) -> Tracer:
        if self._tracer is not None:
            return self._tracer
        return global_tracer.get()

    def extract_context(self, tracer: Tracer, input: Any) -> Optional[SpanContext]:
        """
        Override to extract the upstream context from the input.

        Implementations should call tracer.extract() and return its result.

        Returns:
            Extracted SpanContext, or None if there was none or it couldn't be read
        """
        return None

    def _traced_call(self, input: Any, context: Any, call: Callable[[], T]) -> T:
        tracer = self.tracer
        span_context = self.extract_context(tracer, input)

        try:
            builder = tracer.build_span(SPAN_NAME).as_child_of(span_context).with_kind(SpanKind.SERVER)
            with builder.start_active() as span:
                set_tags(span, context, input, self._cold_start)
                try:
                    return call()
                except BaseException as error:
                    log_error(span, error)
                    raise
        finally:
            self._flush(tracer)

    def _flush(self, tracer: Tracer) -> None:
        provider = tracer.provider
        if provider is None:
            return
        flush = self._flush_on_end if self._flush_on_end is not None else provider.flush_on_end
        if not flush:
            return
        try:
            if not provider.force_flush():
                logger.warning("Timed out flushing spans at end of invocation")
        except Exception:
            logger.warning("Failed to flush spans at end of invocation", exc_info=True)


class TracingRequestStreamHandler(_TracingHandler):
    """
    Tracing stream handler that creates a span on every invocation.

    Implement do_handle_request(). The default extract_context() returns
    None, so spans are roots unless a subclass extracts a context.
    """

    @abstractmethod
    def do_handle_request(self, input: Any, output: Any, context: Any) -> None:
        """
        Handle the Lambda request. Override this in your code.

        Args:
            input: The Lambda function input stream
            output: The Lambda function output stream
            context: The Lambda execution environment context object
        """

    def handle_request(self, input: Any, output: Any, context: Any) -> None:
        """Entry point for the runtime; don't override."""
        self._traced_call(input, context, lambda: self.do_handle_request(input, output, context))


class TracingRequestHandler(_TracingHandler):
    """
    Tracing event handler that creates a span on every invocation.

    Implement do_handle_request(). Upstream context is read from the
    event's headers when it has any.
    """

    @abstractmethod
    def do_handle_request(self, event: Any, context: Any) -> Any:
        """Handle the Lambda event and return the response. Override this in your code."""

    def extract_context(self, tracer: Tracer, input: Any) -> Optional[SpanContext]:
        return parse_and_extract(tracer, input)

    def handle_request(self, event: Any, context: Any) -> Any:
        """Entry point for the runtime; don't override."""
        return self._traced_call(event, context, lambda: self.do_handle_request(event, context))

    def __call__(self, event: Any, context: Any) -> Any:
        return self.handle_request(event, context)

"""Tests for the @traced_handler decorator."""

import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

import lambda_tracing
from conftest import UPSTREAM_SPAN_ID, VALID_TRACEPARENT
from lambda_tracing import traced_handler
from lambda_tracing.instrumentation import ColdStartFlag


def test_bare_decorator_keeps_function_metadata():
    @traced_handler
    def handler(event, context):
        """Docstring."""
        return event

    assert handler.__name__ == "handler"
    assert handler.__doc__ == "Docstring."
    assert handler({"a": 1}, None) == {"a": 1}


def test_decorated_function_is_traced(tracer, exporter, lambda_context):
    @traced_handler(tracer=tracer, cold_start=ColdStartFlag())
    def handler(event, context):
        return {"statusCode": 204}

    assert handler({"headers": {"traceparent": VALID_TRACEPARENT}}, lambda_context) == {"statusCode": 204}

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    assert spans[0].name == "handleRequest"
    assert format(spans[0].parent.span_id, "016x") == UPSTREAM_SPAN_ID
    assert spans[0].attributes["aws.lambda.coldStart"] is True


def test_custom_extractor_replaces_header_sniffing(tracer, exporter, lambda_context):
    calls = []

    def no_context(tracer, event):
        calls.append(event)
        return None

    @traced_handler(tracer=tracer, cold_start=ColdStartFlag(), extract_context=no_context)
    def handler(event, context):
        return None

    event = {"headers": {"traceparent": VALID_TRACEPARENT}}
    handler(event, lambda_context)

    assert calls == [event]
    assert exporter.get_finished_spans()[0].parent is None


def test_errors_propagate_unchanged(tracer, exporter, lambda_context):
    error = ValueError("bad input")

    @traced_handler(tracer=tracer, cold_start=ColdStartFlag())
    def handler(event, context):
        raise error

    with pytest.raises(ValueError) as excinfo:
        handler({}, lambda_context)

    assert excinfo.value is error
    span = exporter.get_finished_spans()[0]
    assert span.events[0].attributes["error.kind"] == "ValueError"


def test_end_to_end_with_init(lambda_context):
    provider = lambda_tracing.init(enable_console_exporter=False, service_name="orders")
    memory = InMemorySpanExporter()
    provider.add_span_processor(SimpleSpanProcessor(memory))

    @traced_handler(cold_start=ColdStartFlag())
    def handler(event, context):
        return "done"

    assert handler({}, lambda_context) == "done"

    spans = memory.get_finished_spans()
    assert len(spans) == 1
    assert spans[0].resource.attributes["service.name"] == "orders"

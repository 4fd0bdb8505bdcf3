"""Shared fixtures: an SDK provider that records finished spans in memory."""

from dataclasses import dataclass

import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

import lambda_tracing
from lambda_tracing.tracer import TracerProvider, global_tracer

VALID_TRACEPARENT = "00-0af7651916cd43dd8448eb211c80319c-b7ad6b7169203331-01"
UPSTREAM_TRACE_ID = "0af7651916cd43dd8448eb211c80319c"
UPSTREAM_SPAN_ID = "b7ad6b7169203331"


@dataclass
class MockLambdaContext:
    """Stand-in for the LambdaContext object the runtime passes to handlers."""

    aws_request_id: str = "c6af9ac6-7b61-11e6-9a41-93e812345678"
    invoked_function_arn: str = "arn:aws:lambda:us-west-2:123456789012:function:test-function"
    function_name: str = "test-function"
    function_version: str = "$LATEST"
    memory_limit_in_mb: str = "128"
    log_group_name: str = "/aws/lambda/test-function"
    log_stream_name: str = "2024/01/01/[$LATEST]abcdef"
    remaining_ms: int = 2900

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_ms


@pytest.fixture
def exporter():
    return InMemorySpanExporter()


@pytest.fixture
def provider(exporter):
    provider = TracerProvider(resource={"service.name": "test-function"})
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield provider
    provider.shutdown()


@pytest.fixture
def tracer(provider):
    return provider.get_tracer("test")


@pytest.fixture
def lambda_context():
    return MockLambdaContext()


@pytest.fixture(autouse=True)
def reset_global_state():
    yield
    lambda_tracing.stop_tracing()
    global_tracer.reset()

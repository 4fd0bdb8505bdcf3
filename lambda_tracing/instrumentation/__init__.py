"""Lambda handler instrumentation."""

from lambda_tracing.instrumentation.cold_start import COLD_START, ColdStartFlag
from lambda_tracing.instrumentation.decorator import traced_handler
from lambda_tracing.instrumentation.handler import (
    SPAN_NAME,
    TracingRequestHandler,
    TracingRequestStreamHandler,
)
from lambda_tracing.instrumentation.headers import (
    LambdaInput,
    MappingInput,
    OpaqueInput,
    RequestInput,
    classify_input,
    parse_and_extract,
)
from lambda_tracing.instrumentation.lambda_tags import error_fields, log_error, set_tags

__all__ = [
    "COLD_START",
    "ColdStartFlag",
    "SPAN_NAME",
    "TracingRequestHandler",
    "TracingRequestStreamHandler",
    "traced_handler",
    "LambdaInput",
    "MappingInput",
    "OpaqueInput",
    "RequestInput",
    "classify_input",
    "parse_and_extract",
    "error_fields",
    "log_error",
    "set_tags",
]

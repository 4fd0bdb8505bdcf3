"""Span tags and error log fields for Lambda invocations."""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import Any, Dict

from lambda_tracing.instrumentation.cold_start import ColdStartFlag
from lambda_tracing.tracer.span import Span, SpanStatus
from lambda_tracing.utils.helpers import truncate

COMPONENT_NAME = "python-aws-lambda"

COMPONENT = "component"
SPAN_KIND = "span.kind"
SPAN_KIND_SERVER = "server"
REQUEST_ID = "aws.requestId"
FUNCTION_ARN = "aws.lambda.arn"
FUNCTION_NAME = "aws.lambda.functionName"
FUNCTION_VERSION = "aws.lambda.functionVersion"
MEMORY_LIMIT = "aws.lambda.memoryLimitInMB"
LOG_GROUP = "aws.lambda.logGroupName"
LOG_STREAM = "aws.lambda.logStreamName"
REMAINING_TIME = "aws.lambda.remainingTimeMs"
COLD_START = "aws.lambda.coldStart"
HTTP_METHOD = "http.method"
HTTP_URL = "http.url"
ERROR = "error"

# LambdaContext attribute -> tag
_CONTEXT_TAGS = (
    ("aws_request_id", REQUEST_ID),
    ("invoked_function_arn", FUNCTION_ARN),
    ("function_name", FUNCTION_NAME),
    ("function_version", FUNCTION_VERSION),
    ("log_group_name", LOG_GROUP),
    ("log_stream_name", LOG_STREAM),
)


def context_tags(context: Any) -> Dict[str, Any]:
    """Tags read from a LambdaContext. Missing or None fields are skipped."""
    tags: Dict[str, Any] = {}
    if context is None:
        return tags

    for attr, key in _CONTEXT_TAGS:
        value = getattr(context, attr, None)
        if value is not None:
            tags[key] = str(value)

    memory = getattr(context, "memory_limit_in_mb", None)
    if memory is not None:
        try:
            tags[MEMORY_LIMIT] = int(memory)
        except (TypeError, ValueError):
            tags[MEMORY_LIMIT] = str(memory)

    remaining = getattr(context, "get_remaining_time_in_millis", None)
    if callable(remaining):
        tags[REMAINING_TIME] = int(remaining())
    return tags


def event_tags(event: Any) -> Dict[str, Any]:
    """HTTP tags for API Gateway proxy events (REST and HTTP API payloads)."""
    if not isinstance(event, Mapping):
        return {}

    tags: Dict[str, Any] = {}
    method = event.get("httpMethod")
    path = event.get("path")
    request_context = event.get("requestContext")
    if isinstance(request_context, Mapping) and isinstance(request_context.get("http"), Mapping):
        http = request_context["http"]
        method = method or http.get("method")
        path = path or http.get("path")
    if isinstance(method, str):
        tags[HTTP_METHOD] = method
    if isinstance(path, str):
        tags[HTTP_URL] = path
    return tags


def set_tags(span: Span, context: Any, event: Any, cold_start: ColdStartFlag) -> None:
    """Tag an invocation span. Consumes the cold start flag."""
    span.set_tag(COMPONENT, COMPONENT_NAME)
    span.set_tag(SPAN_KIND, SPAN_KIND_SERVER)
    for key, value in context_tags(context).items():
        span.set_tag(key, value)
    for key, value in event_tags(event).items():
        span.set_tag(key, value)
    span.set_tag(COLD_START, cold_start.consume())


def error_fields(error: BaseException) -> Dict[str, Any]:
    """Structured log entry for an exception raised by a handler."""
    kind = type(error).__name__
    text = str(error)
    stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return {
        "event": ERROR,
        ERROR: True,
        "error.kind": kind,
        "error.object": text,
        "message": text or kind,
        "stack": truncate(stack),
    }


def log_error(span: Span, error: BaseException) -> None:
    """Mark ``span`` as failed and attach the error log entry."""
    fields = error_fields(error)
    span.set_tag(ERROR, True)
    span.log(fields)
    span.set_status(SpanStatus.ERROR, fields["message"])

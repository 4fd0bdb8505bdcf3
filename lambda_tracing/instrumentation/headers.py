"""Best-effort trace context extraction from Lambda inputs.

Inputs arrive in different shapes depending on the trigger: API Gateway and
most event sources deliver a JSON object (a dict), SDK-level integrations can
hand over a botocore request. The input is classified once into one of the
LambdaInput variants and extraction works on that variant.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from botocore.awsrequest import AWSPreparedRequest, AWSRequest

from lambda_tracing.context.propagators import Format, TextMapExtractAdapter
from lambda_tracing.tracer.span_context import SpanContext
from lambda_tracing.tracer.tracer import Tracer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingInput:
    """A dict-like event. ``headers`` is its "headers" entry, if any."""

    headers: Any = None


@dataclass(frozen=True)
class RequestInput:
    """A botocore request."""

    headers: Any = None


@dataclass(frozen=True)
class OpaqueInput:
    """Anything else: streams, bytes, scalars."""


LambdaInput = Union[MappingInput, RequestInput, OpaqueInput]


def classify_input(value: Any) -> LambdaInput:
    # Mappings are checked before requests; keep this order.
    if isinstance(value, Mapping):
        return MappingInput(value.get("headers"))
    if isinstance(value, (AWSRequest, AWSPreparedRequest)):
        return RequestInput(value.headers)
    return OpaqueInput()


def _headers_of(lambda_input: LambdaInput) -> Optional[Mapping]:
    if isinstance(lambda_input, MappingInput):
        if isinstance(lambda_input.headers, Mapping):
            return lambda_input.headers
        return None
    if isinstance(lambda_input, RequestInput) and lambda_input.headers is not None:
        # botocore's HTTPHeaders is an email.message.Message, not a Mapping
        return dict(lambda_input.headers.items())
    return None


def parse_and_extract(tracer: Tracer, value: Any) -> Optional[SpanContext]:
    """
    Extract the upstream SpanContext carried in ``value``'s headers.

    Returns None when there are no headers, no trace context in them, or
    the headers can't be used as a carrier (ValueError from extraction).
    Other exceptions propagate.
    """
    try:
        headers = _headers_of(classify_input(value))
        if headers is None:
            return None
        return tracer.extract(Format.HTTP_HEADERS, TextMapExtractAdapter(headers))
    except ValueError as exc:
        logger.debug("Ignoring unusable trace headers: %s", exc)
        return None

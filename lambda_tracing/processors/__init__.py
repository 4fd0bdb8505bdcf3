"""Span processors and supporting utilities."""

from lambda_tracing.processors.logging_processor import LoggingSpanProcessor
from lambda_tracing.processors.sampler import Sampler, SamplingResult

__all__ = [
    "LoggingSpanProcessor",
    "Sampler",
    "SamplingResult",
]

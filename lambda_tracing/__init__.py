"""Distributed tracing for AWS Lambda handlers, built on OpenTelemetry."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from lambda_tracing.config import LambdaTracingConfig, load_config
from lambda_tracing.errors import (
    ConfigError,
    InitializationError,
    InvalidCarrierError,
    LambdaTracingError,
    UnsupportedFormatError,
)
from lambda_tracing.context import Format, TextMapExtractAdapter
from lambda_tracing.exporter import build_export_processors
from lambda_tracing.instrumentation import (
    ColdStartFlag,
    TracingRequestHandler,
    TracingRequestStreamHandler,
    parse_and_extract,
    traced_handler,
)
from lambda_tracing.processors import LoggingSpanProcessor, Sampler
from lambda_tracing.tracer import Span, SpanContext, Tracer, TracerProvider, global_tracer

__version__ = "0.3.0"

logger = logging.getLogger(__name__)

DEFAULT_TRACER_NAME = "lambda_tracing"

_lock = threading.Lock()
_provider: Optional[TracerProvider] = None
_config: Optional[LambdaTracingConfig] = None


def init(config_file: Optional[str] = None, **overrides: Any) -> TracerProvider:
    """
    Configure tracing for this process and register the global tracer.

    Settings come from ``overrides`` (LambdaTracingConfig field names),
    LAMBDA_TRACING_* environment variables and the config file, in that
    order of priority. Call once at module import time, outside the handler,
    so the work happens during the Lambda init phase.

    Calling init() again while tracing is active returns the existing provider.

    Raises:
        ConfigError: the configuration is invalid.
        InitializationError: the exporters couldn't be set up.
    """
    global _provider, _config
    with _lock:
        if _provider is not None:
            logger.warning("init() called while tracing is already active; returning the existing provider")
            return _provider

        config = load_config(config_file, overrides)
        provider = TracerProvider(
            resource={"service.name": config.service_name, "cloud.provider": "aws"},
            flush_on_end=config.flush_on_end,
        )
        if config.sample_rate < 1.0:
            provider.set_sampler(Sampler(config.sample_rate))
        try:
            for processor in build_export_processors(config):
                provider.add_span_processor(processor)
        except Exception as exc:
            raise InitializationError("failed to set up span exporters", {"error": str(exc)}) from exc
        if config.log_spans:
            provider.add_span_processor(LoggingSpanProcessor())

        global_tracer.register(provider.get_tracer(DEFAULT_TRACER_NAME))
        _provider = provider
        _config = config
        logger.debug("Tracing initialized for service %s", config.service_name)
        return provider


def stop_tracing() -> None:
    """Flush and shut down the provider created by init() and unregister the global tracer."""
    global _provider, _config
    with _lock:
        provider = _provider
        _provider = None
        _config = None
        global_tracer.reset()
    if provider is not None:
        provider.force_flush()
        provider.shutdown()


def get_tracer_provider() -> Optional[TracerProvider]:
    return _provider


def get_config() -> Optional[LambdaTracingConfig]:
    return _config


def get_tracer(name: Optional[str] = None) -> Tracer:
    """
    Get a tracer.

    Without a name, returns the process-wide tracer. Before init(), tracers
    use the OpenTelemetry global provider (a no-op unless configured).
    """
    if name is None:
        return global_tracer.get()
    provider = _provider
    if provider is not None:
        return provider.get_tracer(name)
    return Tracer(None, name)


__all__ = [
    "__version__",
    "init",
    "stop_tracing",
    "get_tracer",
    "get_tracer_provider",
    "get_config",
    "traced_handler",
    "TracingRequestHandler",
    "TracingRequestStreamHandler",
    "ColdStartFlag",
    "parse_and_extract",
    "Format",
    "TextMapExtractAdapter",
    "Span",
    "SpanContext",
    "Tracer",
    "TracerProvider",
    "LambdaTracingConfig",
    "LambdaTracingError",
    "ConfigError",
    "InitializationError",
    "InvalidCarrierError",
    "UnsupportedFormatError",
]

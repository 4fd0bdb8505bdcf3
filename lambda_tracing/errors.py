"""lambda_tracing error hierarchy and exceptions."""

from __future__ import annotations


class LambdaTracingError(Exception):
    """Base exception for all lambda_tracing errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(LambdaTracingError):
    """Raised when configuration is invalid or conflicting."""
    pass


class InitializationError(LambdaTracingError):
    """Raised when tracing initialization fails."""
    pass


class InvalidCarrierError(LambdaTracingError, ValueError):
    """
    Raised when a propagation carrier can't be read.

    Subclasses ValueError so callers treating malformed propagation input as
    an invalid argument can catch it without importing this module.
    """
    pass


class UnsupportedFormatError(InvalidCarrierError):
    """Raised when extract/inject is asked for a format the tracer doesn't know."""
    pass

"""Process-wide tracer registry.

Handlers that aren't given a tracer look one up here at call time. Until a
tracer is registered, get() hands out a tracer over the OpenTelemetry global
provider, which is a no-op unless the application configured one: spans are
created and discarded.
"""

from __future__ import annotations

import threading
from typing import Optional

from lambda_tracing.tracer.tracer import Tracer

DEFAULT_SCOPE = "lambda_tracing"

_lock = threading.Lock()
_tracer: Optional[Tracer] = None


def register(tracer: Tracer) -> None:
    """Install ``tracer`` as the process-wide tracer, replacing any previous one."""
    global _tracer
    if tracer is None:
        raise ValueError("tracer must not be None")
    with _lock:
        _tracer = tracer


def get() -> Tracer:
    with _lock:
        if _tracer is not None:
            return _tracer
    return Tracer(None, DEFAULT_SCOPE)


def is_registered() -> bool:
    with _lock:
        return _tracer is not None


def reset() -> None:
    """Forget the registered tracer."""
    global _tracer
    with _lock:
        _tracer = None

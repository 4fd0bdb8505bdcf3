"""Cold start tracking for a Lambda execution environment."""

from __future__ import annotations

import threading


class ColdStartFlag:
    """
    Process-wide "first invocation" flag.

    consume() returns True at most once over the lifetime of an instance,
    no matter how many threads call it.
    """

    def __init__(self, initial: bool = True) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def consume(self) -> bool:
        """Return the current value and clear it, atomically."""
        with self._lock:
            value = self._value
            self._value = False
            return value

    def peek(self) -> bool:
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"ColdStartFlag({self.peek()})"


COLD_START = ColdStartFlag()

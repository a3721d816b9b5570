"""A thread-safe boolean flag."""

from __future__ import annotations

import threading


class AtomicBool:
    """A boolean whose operations are atomic across threads. Starts False."""

    def __init__(self, value: bool = False) -> None:
        self._value = bool(value)
        self._lock = threading.Lock()

    def load(self) -> bool:
        """Return the current value."""
        with self._lock:
            return self._value

    def store(self, value: bool) -> None:
        """Set the value."""
        with self._lock:
            self._value = bool(value)

    def swap(self, value: bool) -> bool:
        """Set the value and return the previous one."""
        with self._lock:
            old, self._value = self._value, bool(value)
            return old

    def compare_and_swap(self, old: bool, new: bool) -> bool:
        """Set to ``new`` if currently ``old``; return whether it was set."""
        with self._lock:
            if self._value != bool(old):
                return False
            self._value = bool(new)
            return True

    def __bool__(self) -> bool:
        return self.load()

    def __repr__(self) -> str:
        return f"AtomicBool({self.load()})"
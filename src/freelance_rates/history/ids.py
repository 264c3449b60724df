"""
Identifier factories for history entries.

A factory is any zero-argument callable returning a fresh string id.
"""
import itertools
import time
import uuid
from typing import Callable


class TimestampIdFactory:
    """
    Millisecond-timestamp ids that never repeat within one factory.

    Two calls inside the same millisecond (or after the clock steps back)
    get the previous id + 1, so ids stay strictly increasing.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)


class CounterIdFactory:
    """Deterministic ids "1", "2", ... (or from a given start)."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return str(next(self._counter))


def uuid_id_factory() -> str:
    """Random UUID4 id."""
    return uuid.uuid4().hex

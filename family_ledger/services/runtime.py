"""
Platform collaborators: the clock and the identifier generator.

Both are injected into the registry and the ledger so tests can pin
timestamps and ids.
"""

import itertools
import time
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Optional
from uuid import uuid4


class Clock(ABC):
    """Source of timestamps in integer nanoseconds."""

    @abstractmethod
    def now(self) -> int:
        pass


class SystemClock(Clock):
    """
    Wall clock that never goes backwards.

    If the system time steps back, the last reading is repeated instead.
    """

    def __init__(self, source: Callable[[], int] = time.time_ns):
        self._source = source
        self._last = 0

    def now(self) -> int:
        self._last = max(self._last, self._source())
        return self._last


class FixedClock(Clock):
    """Clock that returns a set time, advanced manually. For tests."""

    def __init__(self, start: int = 1_700_000_000_000_000_000):
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, nanoseconds: int = 1) -> int:
        self._now += nanoseconds
        return self._now


class IdGenerator:
    """Generates unique string ids."""

    def __init__(self, factory: Optional[Callable[[], str]] = None):
        self._factory = factory or (lambda: str(uuid4()))

    def new_id(self) -> str:
        return self._factory()

    @classmethod
    def from_sequence(cls, ids: Iterable[str]) -> "IdGenerator":
        """Hand out the given ids in order. For tests."""
        iterator = iter(ids)
        return cls(lambda: next(iterator))

    @classmethod
    def counting(cls, prefix: str = "id") -> "IdGenerator":
        counter = itertools.count(1)
        return cls(lambda: f"{prefix}-{next(counter):04d}")

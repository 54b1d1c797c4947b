"""Clock adapters implementing the Clock port."""

import time

from cadence.domain.ports import Clock


class SystemClock(Clock):
    """Wall-clock time in epoch milliseconds."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


class FixedClock(Clock):
    """
    Manually controlled clock for tests and simulations.

    Time only moves when ``set`` or ``advance`` is called.
    """

    def __init__(self, now: int = 0):
        self._now = now

    def now_ms(self) -> int:
        return self._now

    def set(self, now: int) -> None:
        self._now = now

    def advance(self, ms: int) -> int:
        self._now += ms
        return self._now

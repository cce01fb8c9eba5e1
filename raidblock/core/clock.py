"""Tick clock shared by the zone registry and the scheduler."""

from __future__ import annotations


class TickClock:
    """Monotonic tick counter. Only the TickScheduler advances it."""

    __slots__ = ("_now",)

    def __init__(self, start: int = 0) -> None:
        self._now = start

    @property
    def now(self) -> int:
        return self._now

    def advance(self, ticks: int = 1) -> int:
        if ticks > 0:
            self._now += ticks
        return self._now

    def __repr__(self) -> str:
        return f"TickClock(now={self._now})"

"""Bounded, lock-guarded feed of zone and restriction events for the API."""

from __future__ import annotations

import threading
from collections import Counter, deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Hashable, Iterable

if TYPE_CHECKING:
    from raidblock.engine.scheduler import TickReport


@dataclass(frozen=True, slots=True)
class RaidEvent:
    """One line of the feed. ``zone_id`` is set for zone-scoped events."""

    tick: int
    category: str
    message: str
    entity_ids: tuple[Hashable, ...] = ()
    zone_id: int | None = None

    def involves(self, entity_id: Hashable) -> bool:
        return entity_id in self.entity_ids


class EventLog:
    """Keeps the newest ``limit`` events; the oldest fall off the front.

    The tick thread appends once per tick and API handlers read copies, so a
    single lock around the deque is enough.
    """

    __slots__ = ("_events", "_lock")

    def __init__(self, limit: int = 5000) -> None:
        self._events: deque[RaidEvent] = deque(maxlen=max(1, limit))
        self._lock = threading.Lock()

    def append(self, event: RaidEvent) -> None:
        with self._lock:
            self._events.append(event)

    def append_many(self, events: Iterable[RaidEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def since_tick(self, tick: int, entity_id: Hashable | None = None) -> list[RaidEvent]:
        """Events at or after *tick*, optionally only those involving *entity_id*."""
        with self._lock:
            events = [e for e in self._events if e.tick >= tick]
        if entity_id is not None:
            events = [e for e in events if e.involves(entity_id)]
        return events

    def latest(self, count: int = 50) -> list[RaidEvent]:
        with self._lock:
            if count <= 0:
                return []
            return list(self._events)[-count:]

    def category_counts(self) -> dict[str, int]:
        with self._lock:
            return dict(Counter(e.category for e in self._events))

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


def events_from_report(report: TickReport) -> list[RaidEvent]:
    """Translate a TickReport into feed entries."""
    tick = report.tick
    events: list[RaidEvent] = []
    for zid in report.expired_zones:
        events.append(RaidEvent(tick, "zone", f"Zone {zid} expired", zone_id=zid))
    for eid, zid in report.entered:
        events.append(RaidEvent(tick, "enter", f"Entity {eid} entered zone {zid}", (eid,), zid))
    for eid, zid in report.exited:
        events.append(RaidEvent(tick, "exit", f"Entity {eid} left zone {zid}", (eid,), zid))
    for eid, zid in report.expired_memberships:
        events.append(RaidEvent(tick, "expire", f"Raid block of entity {eid} in zone {zid} ended", (eid,), zid))
    for eid, zid in report.dropped:
        events.append(RaidEvent(tick, "drop", f"Raid block of entity {eid} dropped with zone {zid}", (eid,), zid))
    for eid in report.vanished:
        events.append(RaidEvent(tick, "vanish", f"Entity {eid} vanished; raid blocks released", (eid,)))
    for eid in report.combat_expired:
        events.append(RaidEvent(tick, "combat", f"Combat block of entity {eid} ended", (eid,)))
    return events

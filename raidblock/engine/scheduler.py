"""TickScheduler: the single authority that advances time.

Tick cycle:
  1. Sweep: expire zones; drop their memberships and snapshots
  2. Liveness: release raid memberships and combat blocks of entities that
     are no longer live
  3. Reconcile: add memberships for zones newly in range, remove (saving
     time) those the entity walked out of
  4. Countdown: decrement every membership that existed before step 3
  5. Combat: decrement every combat block
  6. Advance the clock
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from raidblock.core.clock import TickClock
    from raidblock.core.combat import CombatTracker
    from raidblock.core.models import EntityId, ZoneId
    from raidblock.core.tracker import RestrictionTracker
    from raidblock.core.world import World
    from raidblock.core.zones import ZoneRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TickReport:
    """What changed during one tick."""

    tick: int
    expired_zones: list[ZoneId] = field(default_factory=list)
    entered: list[tuple[EntityId, ZoneId]] = field(default_factory=list)
    exited: list[tuple[EntityId, ZoneId]] = field(default_factory=list)
    expired_memberships: list[tuple[EntityId, ZoneId]] = field(default_factory=list)
    dropped: list[tuple[EntityId, ZoneId]] = field(default_factory=list)
    vanished: list[EntityId] = field(default_factory=list)
    combat_expired: list[EntityId] = field(default_factory=list)

    @property
    def quiet(self) -> bool:
        return not (
            self.expired_zones or self.entered or self.exited or self.expired_memberships
            or self.dropped or self.vanished or self.combat_expired
        )


class TickScheduler:
    """Drives zone expiry, membership reconciliation and countdowns."""

    __slots__ = ("_clock", "_zones", "_tracker", "_world", "_default_duration", "_combat")

    def __init__(
        self,
        clock: TickClock,
        zones: ZoneRegistry,
        tracker: RestrictionTracker,
        world: World,
        default_duration: int,
        combat: CombatTracker | None = None,
    ) -> None:
        self._clock = clock
        self._zones = zones
        self._tracker = tracker
        self._world = world
        self._default_duration = default_duration
        self._combat = combat

    @property
    def now(self) -> int:
        return self._clock.now

    def tick(self) -> TickReport:
        """Execute one complete tick cycle."""
        t0 = time.perf_counter()
        report = TickReport(tick=self._clock.now)

        self._phase_sweep(report)
        self._phase_liveness(report)
        # Memberships that exist now get decremented; ones added below wait a tick.
        countdown = [(m.entity_id, m.zone_id) for m in self._tracker.memberships()]
        self._phase_reconcile(report)
        self._phase_countdown(report, countdown)

        if self._combat is not None:
            report.combat_expired = self._combat.tick_all()

        self._clock.advance()

        if not report.quiet:
            logger.debug(
                "Tick %d: zones-=%d enter=%d exit=%d expire=%d total=%.4fs",
                report.tick, len(report.expired_zones), len(report.entered),
                len(report.exited), len(report.expired_memberships),
                time.perf_counter() - t0,
            )
        return report

    def run(self, ticks: int) -> list[TickReport]:
        return [self.tick() for _ in range(ticks)]

    # -- phases --

    def _phase_sweep(self, report: TickReport) -> None:
        for zone in self._zones.sweep(self._clock.now):
            report.expired_zones.append(zone.zone_id)
            for entity_id in self._tracker.drop_zone(zone.zone_id):
                report.dropped.append((entity_id, zone.zone_id))

    def _phase_liveness(self, report: TickReport) -> None:
        for entity_id in self._tracker.entity_ids():
            if not self._world.is_live(entity_id):
                logger.debug("Entity %s is no longer live; releasing its memberships", entity_id)
                self._tracker.remove_all(entity_id)
                report.vanished.append(entity_id)
        if self._combat is None:
            return
        for entity_id in self._combat.entity_ids():
            if not self._world.is_live(entity_id):
                logger.debug("Entity %s is no longer live; dropping its combat block", entity_id)
                self._combat.remove(entity_id)
                if entity_id not in report.vanished:
                    report.vanished.append(entity_id)

    def _phase_reconcile(self, report: TickReport) -> None:
        for entity_id in list(self._world.entity_ids()):
            if not self._world.is_live(entity_id):
                continue
            pos = self._world.position_of(entity_id)
            if pos is None:
                continue

            inside = self._zones.zones_containing(pos)
            held = self._tracker.zones_of(entity_id)

            for zone_id in sorted(inside - held):
                if self._tracker.add(entity_id, zone_id, self._default_duration, use_saved_time=True):
                    report.entered.append((entity_id, zone_id))

            for zone_id in sorted(held - inside):
                if zone_id not in self._zones:
                    self._tracker.remove(entity_id, zone_id, save_time=False)
                    report.dropped.append((entity_id, zone_id))
                else:
                    self._tracker.remove(entity_id, zone_id, save_time=True)
                    report.exited.append((entity_id, zone_id))

    def _phase_countdown(self, report: TickReport, pairs: list[tuple[EntityId, ZoneId]]) -> None:
        for entity_id, zone_id in pairs:
            # Reconciliation may already have removed this membership.
            if not self._tracker.is_restricted(entity_id, zone_id):
                continue
            if not self._tracker.tick(entity_id, zone_id):
                report.expired_memberships.append((entity_id, zone_id))

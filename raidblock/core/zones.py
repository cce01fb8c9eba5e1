"""ZoneRegistry: owns the set of live restriction zones."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from raidblock.core.models import Vector3, Zone, ZoneId

if TYPE_CHECKING:
    from raidblock.core.clock import TickClock

logger = logging.getLogger(__name__)


class ZoneRegistry:
    """Creates, merges and expires zones.

    Two radii are in play:
      - ``merge_radius``: a trigger this close to a live zone's center extends
        that zone instead of creating a new one.
      - ``zone_radius``: a position this close to a live zone's center is
        inside the zone (membership and build checks).
    """

    __slots__ = ("_clock", "_zone_radius", "_merge_radius", "_zones", "_next_zone_id")

    def __init__(self, clock: TickClock, zone_radius: float, merge_radius: float) -> None:
        self._clock = clock
        self._zone_radius = zone_radius
        self._merge_radius = merge_radius
        self._zones: dict[ZoneId, Zone] = {}
        self._next_zone_id: int = 1

    @property
    def zone_radius(self) -> float:
        return self._zone_radius

    @property
    def merge_radius(self) -> float:
        return self._merge_radius

    @property
    def zones(self) -> tuple[Zone, ...]:
        """All registered zones, oldest handle first."""
        return tuple(self._zones[zid] for zid in sorted(self._zones))

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._zones

    def get(self, zone_id: ZoneId) -> Zone | None:
        return self._zones.get(zone_id)

    def allocate_zone_id(self) -> ZoneId:
        zid = self._next_zone_id
        self._next_zone_id += 1
        return zid

    def create_or_extend(self, position: Vector3, duration: int) -> tuple[Zone, bool]:
        """Extend the live zone within merge range of *position*, or create one.

        Returns ``(zone, created)``.
        """
        now = self._clock.now
        expires_at = now + duration

        existing = self._find_mergeable(position, now)
        if existing is not None:
            if existing.extend_to(expires_at):
                logger.debug("Zone %d extended to tick %d", existing.zone_id, existing.expires_at)
            return existing, False

        zone = Zone(
            zone_id=self.allocate_zone_id(),
            center=position,
            created_at=now,
            expires_at=expires_at,
        )
        self._zones[zone.zone_id] = zone
        logger.info("Zone %d created at %s (expires tick %d)", zone.zone_id, position, expires_at)
        return zone, True

    def sweep(self, now: int | None = None) -> list[Zone]:
        """Remove and return every zone whose expiration has passed."""
        if now is None:
            now = self._clock.now
        expired = [z for z in self._zones.values() if z.expired(now)]
        for zone in expired:
            del self._zones[zone.zone_id]
            logger.info("Zone %d expired at tick %d", zone.zone_id, now)
        return expired

    def zones_containing(self, position: Vector3) -> set[ZoneId]:
        """Handles of all live zones whose radius covers *position*."""
        now = self._clock.now
        return {
            z.zone_id
            for z in self._zones.values()
            if not z.expired(now) and z.center.within(position, self._zone_radius)
        }

    def clear(self) -> None:
        self._zones.clear()

    # -- internals --

    def _find_mergeable(self, position: Vector3, now: int) -> Zone | None:
        for zid in sorted(self._zones):
            zone = self._zones[zid]
            if zone.expired(now):
                continue
            if zone.center.within(position, self._merge_radius):
                return zone
        return None

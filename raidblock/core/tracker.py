"""RestrictionTracker: per-entity, per-zone countdowns and saved-time snapshots.

Design:
  - Each (entity, zone) membership carries its own remaining-tick countdown.
  - An entity is restricted while it holds at least one active membership;
    the value shown to the player is the maximum remaining across them.
  - Leaving a zone's radius snapshots the countdown ("saved time") so that
    stepping out and back in resumes the old countdown instead of handing
    out a fresh one.  Natural expiry never leaves a snapshot.
  - The tracker keeps no timers.  The TickScheduler calls ``tick()`` once per
    membership per time unit.
  - Unknown entity/zone ids are no-ops.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from raidblock.core.models import Membership
from raidblock.core.notifier import NullNotifier

if TYPE_CHECKING:
    from raidblock.core.models import EntityId, ZoneId
    from raidblock.core.notifier import UINotifier

logger = logging.getLogger(__name__)


class RestrictionTracker:
    """Owns every Membership and saved-time entry."""

    __slots__ = ("_memberships", "_saved", "_notifier")

    def __init__(self, notifier: UINotifier | None = None) -> None:
        self._memberships: dict[EntityId, dict[ZoneId, Membership]] = {}
        self._saved: dict[EntityId, dict[ZoneId, int]] = {}
        self._notifier: UINotifier = notifier or NullNotifier()

    @property
    def notifier(self) -> UINotifier:
        return self._notifier

    # -- mutations --

    def add(
        self,
        entity_id: EntityId,
        zone_id: ZoneId,
        duration: int,
        use_saved_time: bool = False,
    ) -> int:
        """Create or refresh the (entity, zone) membership.

        Returns the starting remaining value, or 0 if nothing was added.
        """
        start = duration
        # Re-creating the pair always consumes its snapshot.
        saved = self._pop_saved(entity_id, zone_id)
        if use_saved_time and saved is not None:
            start = saved
            logger.debug("Entity %s zone %d: restored saved time %d", entity_id, zone_id, saved)

        if start <= 0:
            logger.debug("Entity %s zone %d: ignoring add with %d ticks", entity_id, zone_id, start)
            return 0

        zones = self._memberships.setdefault(entity_id, {})
        membership = zones.get(zone_id)
        if membership is None:
            zones[zone_id] = Membership(entity_id, zone_id, start)
        else:
            membership.remaining = start

        self._notifier.on_update(entity_id, self.remaining(entity_id))
        return start

    def remove(self, entity_id: EntityId, zone_id: ZoneId, save_time: bool = False) -> bool:
        """Delete the membership, optionally snapshotting its remaining time."""
        zones = self._memberships.get(entity_id)
        membership = zones.get(zone_id) if zones else None
        if membership is None:
            logger.debug("Entity %s has no membership in zone %s", entity_id, zone_id)
            return False

        if save_time and membership.remaining > 0:
            self._saved.setdefault(entity_id, {})[zone_id] = membership.remaining

        del zones[zone_id]
        if not zones:
            del self._memberships[entity_id]
            self._notifier.on_clear(entity_id)
        else:
            self._notifier.on_update(entity_id, self.remaining(entity_id))
        return True

    def tick(self, entity_id: EntityId, zone_id: ZoneId) -> bool:
        """Advance one membership by a single tick. Returns True while still active."""
        zones = self._memberships.get(entity_id)
        membership = zones.get(zone_id) if zones else None
        if membership is None:
            logger.debug("Tick for unknown membership (%s, %s)", entity_id, zone_id)
            return False

        membership.remaining -= 1
        if membership.remaining <= 0:
            self._pop_saved(entity_id, zone_id)
            self.remove(entity_id, zone_id, save_time=False)
            return False

        self._notifier.on_update(entity_id, self.remaining(entity_id))
        return True

    def remove_all(self, entity_id: EntityId) -> int:
        """Drop every membership of *entity_id* without saving time."""
        zones = self._memberships.pop(entity_id, None)
        if not zones:
            logger.debug("remove_all: entity %s has no memberships", entity_id)
            return 0
        self._notifier.on_clear(entity_id)
        return len(zones)

    def forget(self, entity_id: EntityId) -> int:
        """remove_all plus discard any saved-time snapshots (entity left the world)."""
        self._saved.pop(entity_id, None)
        return self.remove_all(entity_id)

    def drop_zone(self, zone_id: ZoneId) -> list[EntityId]:
        """Remove a vanished zone's memberships and snapshots. Returns affected entities."""
        affected: list[EntityId] = []
        for entity_id in list(self._memberships):
            if zone_id in self._memberships[entity_id]:
                self.remove(entity_id, zone_id, save_time=False)
                affected.append(entity_id)
        for entity_id in list(self._saved):
            self._pop_saved(entity_id, zone_id)
        return affected

    def clear(self) -> None:
        for entity_id in list(self._memberships):
            self.remove_all(entity_id)
        self._saved.clear()

    # -- queries --

    def is_restricted(self, entity_id: EntityId, zone_id: ZoneId | None = None) -> bool:
        zones = self._memberships.get(entity_id)
        if not zones:
            return False
        if zone_id is None:
            return any(m.active for m in zones.values())
        membership = zones.get(zone_id)
        return membership is not None and membership.active

    def remaining(self, entity_id: EntityId) -> int:
        """Maximum remaining ticks across the entity's memberships (0 if none)."""
        zones = self._memberships.get(entity_id)
        if not zones:
            return 0
        return max(m.remaining for m in zones.values())

    def remaining_in(self, entity_id: EntityId, zone_id: ZoneId) -> int:
        zones = self._memberships.get(entity_id)
        membership = zones.get(zone_id) if zones else None
        return membership.remaining if membership else 0

    def zones_of(self, entity_id: EntityId) -> set[ZoneId]:
        return set(self._memberships.get(entity_id, ()))

    def saved_time(self, entity_id: EntityId, zone_id: ZoneId) -> int | None:
        return self._saved.get(entity_id, {}).get(zone_id)

    def entity_ids(self) -> list[EntityId]:
        return list(self._memberships)

    def memberships(self) -> list[Membership]:
        """Copies of every membership (safe to iterate while mutating)."""
        return [m.copy() for zones in self._memberships.values() for m in zones.values()]

    def __len__(self) -> int:
        return sum(len(zones) for zones in self._memberships.values())

    # -- internals --

    def _pop_saved(self, entity_id: EntityId, zone_id: ZoneId) -> int | None:
        saved = self._saved.get(entity_id)
        if not saved or zone_id not in saved:
            return None
        value = saved.pop(zone_id)
        if not saved:
            del self._saved[entity_id]
        return value

"""CombatTracker: the simpler, non-spatial combat restriction.

One countdown per entity.  A new qualifying hit refreshes it rather than
stacking a second timer.  Like raid memberships, countdowns only move when
the TickScheduler calls ``tick_all()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from raidblock.core.notifier import NullNotifier

if TYPE_CHECKING:
    from raidblock.core.models import EntityId
    from raidblock.core.notifier import UINotifier

logger = logging.getLogger(__name__)


class CombatTracker:
    """Owns every combat block countdown."""

    __slots__ = ("_blocks", "_notifier")

    def __init__(self, notifier: UINotifier | None = None) -> None:
        self._blocks: dict[EntityId, int] = {}
        self._notifier: UINotifier = notifier or NullNotifier()

    @property
    def notifier(self) -> UINotifier:
        return self._notifier

    def add(self, entity_id: EntityId, duration: int) -> bool:
        if duration <= 0:
            return False
        refreshed = entity_id in self._blocks
        self._blocks[entity_id] = duration
        logger.debug("Combat block %s for entity %s (%d ticks)",
                     "refreshed" if refreshed else "started", entity_id, duration)
        self._notifier.on_update(entity_id, duration)
        return True

    def remove(self, entity_id: EntityId) -> bool:
        if self._blocks.pop(entity_id, None) is None:
            logger.debug("Entity %s has no combat block", entity_id)
            return False
        self._notifier.on_clear(entity_id)
        return True

    def tick_all(self) -> list[EntityId]:
        """Decrement every block once. Returns the entities whose block expired."""
        expired: list[EntityId] = []
        for entity_id in list(self._blocks):
            remaining = self._blocks[entity_id] - 1
            if remaining <= 0:
                self.remove(entity_id)
                expired.append(entity_id)
            else:
                self._blocks[entity_id] = remaining
                self._notifier.on_update(entity_id, remaining)
        return expired

    def is_restricted(self, entity_id: EntityId) -> bool:
        return self._blocks.get(entity_id, 0) > 0

    def remaining(self, entity_id: EntityId) -> int:
        return self._blocks.get(entity_id, 0)

    def entity_ids(self) -> list[EntityId]:
        return list(self._blocks)

    def clear(self) -> None:
        for entity_id in list(self._blocks):
            self.remove(entity_id)

    def __len__(self) -> int:
        return len(self._blocks)

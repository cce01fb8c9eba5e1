"""UI notification interface.

The trackers report the value to display; drawing it is someone else's job.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from raidblock.core.models import EntityId

logger = logging.getLogger(__name__)


class UINotifier(ABC):
    """Receives remaining-time updates for a single restriction subsystem."""

    @abstractmethod
    def on_update(self, entity_id: EntityId, remaining: int) -> None:
        """Show or refresh the entity's panel with *remaining* ticks."""

    @abstractmethod
    def on_clear(self, entity_id: EntityId) -> None:
        """Tear down the entity's panel."""


class NullNotifier(UINotifier):
    """Discards every notification."""

    def on_update(self, entity_id: EntityId, remaining: int) -> None:
        pass

    def on_clear(self, entity_id: EntityId) -> None:
        pass


class LoggingNotifier(UINotifier):
    """Writes notifications to the debug log (headless runs)."""

    __slots__ = ("_label",)

    def __init__(self, label: str = "raid") -> None:
        self._label = label

    def on_update(self, entity_id: EntityId, remaining: int) -> None:
        logger.debug("[%s] entity %s: %d remaining", self._label, entity_id, remaining)

    def on_clear(self, entity_id: EntityId) -> None:
        logger.debug("[%s] entity %s: cleared", self._label, entity_id)

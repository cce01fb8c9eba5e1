"""HudBoard: shared panel state for the raid and combat restriction indicators.

Each subsystem reports through its own ``PanelNotifier``; the board keeps the
value currently displayed per (entity, subsystem) and decides placement so the
two panels never overlap: the combat panel moves up while a raid panel is on
screen for the same entity.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from raidblock.core.enums import PanelSlot, Subsystem
from raidblock.core.notifier import UINotifier

if TYPE_CHECKING:
    from raidblock.core.models import EntityId

# Screen anchors (min, max) per slot.
SLOT_ANCHORS: dict[PanelSlot, tuple[str, str]] = {
    PanelSlot.PRIMARY: ("0.3447913 0.1135", "0.640625 0.1435"),
    PanelSlot.RAISED: ("0.3447913 0.1535", "0.640625 0.1835"),
}


@dataclass(frozen=True, slots=True)
class PanelView:
    """One visible panel as a renderer would draw it."""

    entity_id: EntityId
    subsystem: Subsystem
    remaining: int
    progress: float          # 0.0 to 1.0 of the subsystem's full duration
    slot: PanelSlot
    anchor_min: str
    anchor_max: str


class HudBoard:
    """Thread-safe store of visible panels, keyed by entity then subsystem."""

    __slots__ = ("_panels", "_max_durations", "_lock")

    def __init__(self, max_durations: dict[Subsystem, int] | None = None) -> None:
        self._panels: dict[EntityId, dict[Subsystem, int]] = {}
        self._max_durations = dict(max_durations or {})
        self._lock = threading.Lock()

    def notifier(self, subsystem: Subsystem) -> PanelNotifier:
        return PanelNotifier(self, subsystem)

    def show(self, entity_id: EntityId, subsystem: Subsystem, remaining: int) -> None:
        with self._lock:
            if remaining <= 0:
                self._hide_locked(entity_id, subsystem)
                return
            self._panels.setdefault(entity_id, {})[subsystem] = remaining

    def hide(self, entity_id: EntityId, subsystem: Subsystem) -> None:
        with self._lock:
            self._hide_locked(entity_id, subsystem)

    def displayed(self, entity_id: EntityId, subsystem: Subsystem) -> int:
        """Remaining value on the panel, or 0 if it is not shown."""
        with self._lock:
            return self._panels.get(entity_id, {}).get(subsystem, 0)

    def has_panel(self, entity_id: EntityId, subsystem: Subsystem) -> bool:
        return self.displayed(entity_id, subsystem) > 0

    def slot_for(self, entity_id: EntityId, subsystem: Subsystem) -> PanelSlot:
        if subsystem is Subsystem.COMBAT and self.has_panel(entity_id, Subsystem.RAID):
            return PanelSlot.RAISED
        return PanelSlot.PRIMARY

    def views(self, entity_id: EntityId) -> list[PanelView]:
        with self._lock:
            shown = dict(self._panels.get(entity_id, {}))
        result: list[PanelView] = []
        for subsystem in sorted(shown):
            remaining = shown[subsystem]
            slot = PanelSlot.RAISED if (
                subsystem is Subsystem.COMBAT and Subsystem.RAID in shown
            ) else PanelSlot.PRIMARY
            anchor_min, anchor_max = SLOT_ANCHORS[slot]
            result.append(PanelView(
                entity_id=entity_id,
                subsystem=subsystem,
                remaining=remaining,
                progress=self._progress(subsystem, remaining),
                slot=slot,
                anchor_min=anchor_min,
                anchor_max=anchor_max,
            ))
        return result

    def entity_ids(self) -> list[EntityId]:
        with self._lock:
            return list(self._panels)

    def clear(self) -> None:
        with self._lock:
            self._panels.clear()

    # -- internals --

    def _hide_locked(self, entity_id: EntityId, subsystem: Subsystem) -> None:
        panels = self._panels.get(entity_id)
        if panels is None:
            return
        panels.pop(subsystem, None)
        if not panels:
            del self._panels[entity_id]

    def _progress(self, subsystem: Subsystem, remaining: int) -> float:
        full = self._max_durations.get(subsystem, 0)
        if full <= 0:
            return 1.0
        return max(0.0, min(1.0, remaining / full))


class PanelNotifier(UINotifier):
    """UINotifier writing one subsystem's values onto a HudBoard."""

    __slots__ = ("_board", "_subsystem")

    def __init__(self, board: HudBoard, subsystem: Subsystem) -> None:
        self._board = board
        self._subsystem = subsystem

    @property
    def subsystem(self) -> Subsystem:
        return self._subsystem

    def on_update(self, entity_id: EntityId, remaining: int) -> None:
        self._board.show(entity_id, self._subsystem, remaining)

    def on_clear(self, entity_id: EntityId) -> None:
        self._board.hide(entity_id, self._subsystem)

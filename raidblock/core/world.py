"""World capability consumed by the scheduler, plus an in-memory implementation.

The core never holds game objects.  It asks a ``World`` for the roster of
entity ids, their positions, and whether they are still live.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from raidblock.core.models import EntityId, Vector3


class World(ABC):
    """Position and liveness queries keyed by opaque entity id."""

    @abstractmethod
    def entity_ids(self) -> Iterable[EntityId]:
        """Ids of every entity that should be checked against zones."""

    @abstractmethod
    def position_of(self, entity_id: EntityId) -> Vector3 | None:
        """Current position, or None if the entity is unknown."""

    @abstractmethod
    def is_live(self, entity_id: EntityId) -> bool:
        """True while the entity is connected and alive."""


@dataclass(slots=True)
class EntityRecord:
    """What the in-memory world knows about one entity."""

    entity_id: EntityId
    pos: Vector3
    name: str = ""
    alive: bool = True
    connected: bool = True

    @property
    def live(self) -> bool:
        return self.alive and self.connected


class WorldState(World):
    """Mutable roster of entities.  Mutated only through the service or tests."""

    __slots__ = ("entities",)

    def __init__(self) -> None:
        self.entities: dict[EntityId, EntityRecord] = {}

    def entity_ids(self) -> list[EntityId]:
        return [eid for eid, rec in self.entities.items() if rec.live]

    def position_of(self, entity_id: EntityId) -> Vector3 | None:
        rec = self.entities.get(entity_id)
        return rec.pos if rec is not None else None

    def is_live(self, entity_id: EntityId) -> bool:
        rec = self.entities.get(entity_id)
        return rec is not None and rec.live

    def add_entity(self, entity_id: EntityId, pos: Vector3, name: str = "") -> EntityRecord:
        rec = EntityRecord(entity_id=entity_id, pos=pos, name=name)
        self.entities[entity_id] = rec
        return rec

    def upsert_entity(self, entity_id: EntityId, pos: Vector3, name: str | None = None) -> EntityRecord:
        """Move a known entity or register a new one; reconnects and revives it."""
        rec = self.entities.get(entity_id)
        if rec is None:
            return self.add_entity(entity_id, pos, name or "")
        rec.pos = pos
        rec.alive = True
        rec.connected = True
        if name is not None:
            rec.name = name
        return rec

    def remove_entity(self, entity_id: EntityId) -> EntityRecord | None:
        return self.entities.pop(entity_id, None)

    def move_entity(self, entity_id: EntityId, new_pos: Vector3) -> None:
        rec = self.entities.get(entity_id)
        if rec is None:
            return
        rec.pos = new_pos

    def set_alive(self, entity_id: EntityId, alive: bool) -> None:
        rec = self.entities.get(entity_id)
        if rec is not None:
            rec.alive = alive

    def set_connected(self, entity_id: EntityId, connected: bool) -> None:
        rec = self.entities.get(entity_id)
        if rec is not None:
            rec.connected = connected

"""Read-only restriction queries for command and build filters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from raidblock.core.combat import CombatTracker
    from raidblock.core.models import EntityId, Vector3, ZoneId
    from raidblock.core.tracker import RestrictionTracker
    from raidblock.core.zones import ZoneRegistry


def normalize_command(command: str) -> str:
    """Lower-case, trimmed, always starting with ``/``."""
    cmd = command.strip().lower()
    if cmd and not cmd.startswith("/"):
        cmd = "/" + cmd
    return cmd


def matches_blocklist(command: str, blocked: Iterable[str]) -> bool:
    """True if the normalized command starts with any normalized blocklist entry."""
    cmd = normalize_command(command)
    if not cmd:
        return False
    for entry in blocked:
        prefix = normalize_command(entry) if entry else ""
        if prefix and cmd.startswith(prefix):
            return True
    return False


class RestrictionGate:
    """Answers "is X restricted" and "may X build here" for the raid subsystem."""

    __slots__ = ("_tracker", "_zones", "_blocked_commands")

    def __init__(
        self,
        tracker: RestrictionTracker,
        zones: ZoneRegistry,
        blocked_commands: Iterable[str] = (),
    ) -> None:
        self._tracker = tracker
        self._zones = zones
        self._blocked_commands = tuple(blocked_commands)

    def is_restricted(self, entity_id: EntityId, zone_id: ZoneId | None = None) -> bool:
        return self._tracker.is_restricted(entity_id, zone_id)

    def remaining(self, entity_id: EntityId) -> int:
        return self._tracker.remaining(entity_id)

    def zones_containing(self, position: Vector3) -> set[ZoneId]:
        return self._zones.zones_containing(position)

    def is_command_blocked(self, entity_id: EntityId, command: str) -> bool:
        if not self._tracker.is_restricted(entity_id):
            return False
        return matches_blocklist(command, self._blocked_commands)

    def is_build_blocked(self, position: Vector3) -> bool:
        return bool(self._zones.zones_containing(position))


class CombatGate:
    """Command filter over the combat subsystem."""

    __slots__ = ("_tracker", "_blocked_commands")

    def __init__(self, tracker: CombatTracker, blocked_commands: Iterable[str] = ()) -> None:
        self._tracker = tracker
        self._blocked_commands = tuple(blocked_commands)

    def is_restricted(self, entity_id: EntityId) -> bool:
        return self._tracker.is_restricted(entity_id)

    def remaining(self, entity_id: EntityId) -> int:
        return self._tracker.remaining(entity_id)

    def is_command_blocked(self, entity_id: EntityId, command: str) -> bool:
        if not self._tracker.is_restricted(entity_id):
            return False
        return matches_blocklist(command, self._blocked_commands)

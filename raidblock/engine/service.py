"""RaidBlockService: event entry points wiring the raid and combat subsystems.

Host callbacks (damage, disconnect, death, chat/command, build) arrive here
serially; the service translates each into registry/tracker operations.
Nothing here raises for unknown entities.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from raidblock.core.clock import TickClock
from raidblock.core.combat import CombatTracker
from raidblock.core.enums import RemovalCause, Subsystem
from raidblock.core.gate import CombatGate, RestrictionGate
from raidblock.core.tracker import RestrictionTracker
from raidblock.core.world import WorldState
from raidblock.core.zones import ZoneRegistry
from raidblock.engine.scheduler import TickReport, TickScheduler

if TYPE_CHECKING:
    from raidblock.config import RaidBlockConfig
    from raidblock.core.models import EntityId, Vector3, Zone, ZoneId
    from raidblock.core.notifier import UINotifier
    from raidblock.core.world import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandDecision:
    """Outcome of a command attempt. ``denied_by`` is None when allowed."""

    allowed: bool
    denied_by: Subsystem | None = None


@dataclass(frozen=True, slots=True)
class BuildDecision:
    allowed: bool
    zone_ids: frozenset[ZoneId] = frozenset()


class RaidBlockService:
    """Owns one instance of every component and exposes the host-facing API."""

    def __init__(
        self,
        config: RaidBlockConfig,
        world: World | None = None,
        raid_notifier: UINotifier | None = None,
        combat_notifier: UINotifier | None = None,
        clock: TickClock | None = None,
    ) -> None:
        self._config = config
        self.world: World = world if world is not None else WorldState()
        self.clock = clock or TickClock()
        self.zones = ZoneRegistry(self.clock, config.zone_radius, config.merge_radius)
        self.tracker = RestrictionTracker(raid_notifier)
        self.combat = CombatTracker(combat_notifier)
        self.raid_gate = RestrictionGate(self.tracker, self.zones, config.blocked_commands)
        self.combat_gate = CombatGate(self.combat, config.combat_blocked_commands)
        self.scheduler = TickScheduler(
            clock=self.clock,
            zones=self.zones,
            tracker=self.tracker,
            world=self.world,
            default_duration=config.block_duration,
            combat=self.combat,
        )

    @property
    def config(self) -> RaidBlockConfig:
        return self._config

    @property
    def now(self) -> int:
        return self.clock.now

    def tick(self) -> TickReport:
        return self.scheduler.tick()

    # -- event inputs --

    def on_qualifying_damage(
        self,
        initiator_id: EntityId,
        victim_id: EntityId | None,
        position: Vector3,
    ) -> Zone:
        """A hit that destroys an owned structure: open or extend the zone, block participants."""
        cfg = self._config
        zone, created = self.zones.create_or_extend(position, cfg.block_duration)

        if not created:
            # Re-triggering refreshes everyone already blocked by this zone.
            for membership in self.tracker.memberships():
                if membership.zone_id == zone.zone_id:
                    self.tracker.add(membership.entity_id, zone.zone_id, cfg.block_duration)

        self._seed(initiator_id, zone.zone_id)
        if victim_id is not None and victim_id != initiator_id and cfg.block_on_receive_raid_damage:
            self._seed(victim_id, zone.zone_id)
        return zone

    def on_player_damage(self, attacker_id: EntityId, victim_id: EntityId) -> list[EntityId]:
        """A player-vs-player hit: start or refresh combat blocks. Returns blocked ids."""
        if attacker_id == victim_id:
            return []
        cfg = self._config
        blocked: list[EntityId] = []
        if cfg.combat_block_on_receive_damage and self._is_live(victim_id):
            if self.combat.add(victim_id, cfg.combat_block_duration):
                blocked.append(victim_id)
        if cfg.combat_block_on_player_hit and self._is_live(attacker_id):
            if self.combat.add(attacker_id, cfg.combat_block_duration):
                blocked.append(attacker_id)
        return blocked

    def on_entity_removed(self, entity_id: EntityId, cause: RemovalCause | str) -> None:
        cause = RemovalCause(cause)
        if cause is RemovalCause.DISCONNECT:
            self.tracker.forget(entity_id)
            self.combat.remove(entity_id)
            if isinstance(self.world, WorldState):
                self.world.remove_entity(entity_id)
            logger.info("Entity %s disconnected; restrictions released", entity_id)
            return

        if self._config.remove_block_on_death:
            self.tracker.remove_all(entity_id)
        if self._config.combat_remove_block_on_death:
            self.combat.remove(entity_id)
        logger.debug("Entity %s died", entity_id)

    def on_command_attempt(self, entity_id: EntityId, command: str) -> CommandDecision:
        if not command:
            return CommandDecision(allowed=True)
        if self.raid_gate.is_command_blocked(entity_id, command):
            logger.debug("Command %r denied for %s (raid block)", command, entity_id)
            return CommandDecision(allowed=False, denied_by=Subsystem.RAID)
        if self.combat_gate.is_command_blocked(entity_id, command):
            logger.debug("Command %r denied for %s (combat block)", command, entity_id)
            return CommandDecision(allowed=False, denied_by=Subsystem.COMBAT)
        return CommandDecision(allowed=True)

    def on_build_attempt(self, entity_id: EntityId, position: Vector3) -> BuildDecision:
        zone_ids = self.zones.zones_containing(position)
        if zone_ids:
            logger.debug("Build by %s at %s denied (zones %s)", entity_id, position, sorted(zone_ids))
            return BuildDecision(allowed=False, zone_ids=frozenset(zone_ids))
        return BuildDecision(allowed=True)

    def on_upgrade_attempt(self, entity_id: EntityId, position: Vector3) -> BuildDecision:
        return self.on_build_attempt(entity_id, position)

    # -- queries --

    def is_restricted(self, entity_id: EntityId, zone_id: ZoneId | None = None) -> bool:
        return self.raid_gate.is_restricted(entity_id, zone_id)

    def zones_containing(self, position: Vector3) -> set[ZoneId]:
        return self.raid_gate.zones_containing(position)

    def remaining(self, entity_id: EntityId) -> int:
        return self.tracker.remaining(entity_id)

    def combat_remaining(self, entity_id: EntityId) -> int:
        return self.combat.remaining(entity_id)

    def reset(self) -> None:
        """Drop all zones, memberships, snapshots and combat blocks."""
        self.tracker.clear()
        self.combat.clear()
        self.zones.clear()

    # -- internals --

    def _is_live(self, entity_id: EntityId) -> bool:
        if self.world.is_live(entity_id):
            return True
        logger.debug("Entity %s is not live; skipped", entity_id)
        return False

    def _seed(self, entity_id: EntityId, zone_id: ZoneId) -> None:
        if self._is_live(entity_id):
            self.tracker.add(entity_id, zone_id, self._config.block_duration, use_saved_time=False)

"""EngineManager: singleton wrapper that runs the TickScheduler on a background thread.

The host invokes raid-block callbacks serially.  In server mode the tick
thread and API requests arrive concurrently, so every mutation and every
read goes through one lock, restoring the serial model the core assumes.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from raidblock.core.enums import Subsystem
from raidblock.core.world import WorldState
from raidblock.engine.service import BuildDecision, CommandDecision, RaidBlockService
from raidblock.hud import HudBoard
from raidblock.utils.event_log import EventLog, RaidEvent, events_from_report

if TYPE_CHECKING:
    from raidblock.config import RaidBlockConfig
    from raidblock.core.enums import RemovalCause
    from raidblock.core.models import EntityId, Vector3, Zone
    from raidblock.engine.scheduler import TickReport

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the raid-block lifecycle on a background thread.

    Provides thread-safe access to:
      - the service (through ``locked()``)
      - event log (lock-guarded ring buffer)
      - HUD board (per-entity panel state)
      - control commands (start / pause / resume / step / reset)
    """

    def __init__(self, config: RaidBlockConfig) -> None:
        self.config = config
        self._tick_rate: float = config.tick_rate

        self._lock = threading.Lock()
        self._event_log = EventLog(config.event_log_limit)
        self._hud: HudBoard | None = None
        self._service: RaidBlockService | None = None
        self._world: WorldState | None = None

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 5.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def hud(self) -> HudBoard:
        assert self._hud is not None
        return self._hud

    @property
    def tick(self) -> int:
        with self._lock:
            return self._service.now if self._service else 0

    @contextmanager
    def locked(self) -> Iterator[RaidBlockService]:
        """Hold the engine lock while reading or mutating the service."""
        with self._lock:
            assert self._service is not None
            yield self._service

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="raidblock-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self.tick)

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self.tick)

    def step(self) -> TickReport:
        """Execute exactly one tick on the caller's thread (pauses the loop first)."""
        if self._running.is_set() and not self._paused.is_set():
            self.pause()
        return self._do_tick()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        self._thread = None
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop and rebuild with empty state."""
        self.stop()
        self._event_log.clear()
        self._build()
        logger.info("EngineManager reset.")

    # -- host events --

    def upsert_entity(self, entity_id: EntityId, pos: Vector3, name: str | None = None) -> None:
        with self._lock:
            assert self._world is not None
            self._world.upsert_entity(entity_id, pos, name)

    def qualifying_damage(
        self,
        initiator_id: EntityId,
        victim_id: EntityId | None,
        position: Vector3,
    ) -> tuple[Zone, bool]:
        with self._lock:
            svc = self._require_service()
            known = {z.zone_id for z in svc.zones.zones}
            zone = svc.on_qualifying_damage(initiator_id, victim_id, position)
            created = zone.zone_id not in known
            tick = svc.now
            zone_copy = zone.copy()
        participants = (initiator_id,) if victim_id is None else (initiator_id, victim_id)
        verb = "opened" if created else "extended"
        self._event_log.append(RaidEvent(
            tick, "raid", f"Zone {zone_copy.zone_id} {verb} at {position}",
            participants, zone_copy.zone_id,
        ))
        return zone_copy, created

    def player_damage(self, attacker_id: EntityId, victim_id: EntityId) -> list[EntityId]:
        with self._lock:
            svc = self._require_service()
            blocked = svc.on_player_damage(attacker_id, victim_id)
            tick = svc.now
        if blocked:
            self._event_log.append(RaidEvent(
                tick, "combat", f"Combat block for {', '.join(str(b) for b in blocked)}",
                tuple(blocked),
            ))
        return blocked

    def entity_removed(self, entity_id: EntityId, cause: RemovalCause) -> None:
        with self._lock:
            svc = self._require_service()
            svc.on_entity_removed(entity_id, cause)
            tick = svc.now
        self._event_log.append(RaidEvent(tick, cause.value, f"Entity {entity_id}: {cause.value}", (entity_id,)))

    def command_attempt(self, entity_id: EntityId, command: str) -> CommandDecision:
        with self._lock:
            return self._require_service().on_command_attempt(entity_id, command)

    def build_attempt(self, entity_id: EntityId, position: Vector3, upgrade: bool = False) -> BuildDecision:
        with self._lock:
            svc = self._require_service()
            if upgrade:
                return svc.on_upgrade_attempt(entity_id, position)
            return svc.on_build_attempt(entity_id, position)

    # -- internals --

    def _require_service(self) -> RaidBlockService:
        assert self._service is not None
        return self._service

    def _build(self) -> None:
        """Construct all components from config."""
        cfg = self.config
        self._hud = HudBoard({
            Subsystem.RAID: cfg.block_duration,
            Subsystem.COMBAT: cfg.combat_block_duration,
        })
        self._world = WorldState()
        self._service = RaidBlockService(
            cfg,
            world=self._world,
            raid_notifier=self._hud.notifier(Subsystem.RAID),
            combat_notifier=self._hud.notifier(Subsystem.COMBAT),
        )

    def _do_tick(self) -> TickReport:
        with self._lock:
            report = self._require_service().tick()
        events = events_from_report(report)
        if events:
            self._event_log.append_many(events)
        return report

    def _run_loop(self) -> None:
        logger.info("Raid-block loop thread started.")
        try:
            while not self._stop_requested.is_set():
                if self._paused.is_set():
                    self._stop_requested.wait(0.05)
                    continue
                self._do_tick()
                self._stop_requested.wait(self._tick_rate)
        except Exception:
            logger.exception("Raid-block loop crashed")
        finally:
            self._running.clear()
            logger.info("Raid-block loop thread exiting.")

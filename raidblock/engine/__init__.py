"""Engine layer: tick scheduler and host-facing service."""

from raidblock.engine.scheduler import TickReport, TickScheduler
from raidblock.engine.service import BuildDecision, CommandDecision, RaidBlockService

__all__ = ["BuildDecision", "CommandDecision", "RaidBlockService", "TickReport", "TickScheduler"]

"""Core zone/timer bookkeeping: models, registry, trackers, gates."""

from raidblock.core.clock import TickClock
from raidblock.core.combat import CombatTracker
from raidblock.core.enums import PanelSlot, RemovalCause, Subsystem
from raidblock.core.gate import CombatGate, RestrictionGate
from raidblock.core.models import Membership, Vector3, Zone
from raidblock.core.notifier import LoggingNotifier, NullNotifier, UINotifier
from raidblock.core.tracker import RestrictionTracker
from raidblock.core.world import World, WorldState
from raidblock.core.zones import ZoneRegistry

__all__ = [
    "CombatGate",
    "CombatTracker",
    "LoggingNotifier",
    "Membership",
    "NullNotifier",
    "PanelSlot",
    "RemovalCause",
    "RestrictionGate",
    "RestrictionTracker",
    "Subsystem",
    "TickClock",
    "UINotifier",
    "Vector3",
    "World",
    "WorldState",
    "Zone",
    "ZoneRegistry",
]

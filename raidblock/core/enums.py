"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import Enum, IntEnum, unique


@unique
class Subsystem(IntEnum):
    """Restriction subsystems sharing the on-screen panel area."""

    RAID = 0
    COMBAT = 1


@unique
class RemovalCause(str, Enum):
    """Why an entity left the world."""

    DISCONNECT = "disconnect"
    DEATH = "death"


@unique
class PanelSlot(str, Enum):
    """Vertical placement of a restriction panel."""

    PRIMARY = "primary"
    RAISED = "raised"

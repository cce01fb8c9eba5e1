"""Core data models: Vector3, Zone, Membership."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Hashable

# Opaque caller-supplied identity (player ids are ints in the API).
EntityId = Hashable
ZoneId = int


@dataclass(frozen=True, slots=True)
class Vector3:
    """Immutable 3D world coordinate."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def distance(self, other: Vector3) -> float:
        return math.sqrt(
            (self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2
        )

    def within(self, other: Vector3, radius: float) -> bool:
        """True when *other* lies inside (or on) the sphere of *radius* around self."""
        return self.distance(other) <= radius

    def __repr__(self) -> str:
        return f"({self.x:g}, {self.y:g}, {self.z:g})"


@dataclass(slots=True)
class Zone:
    """A spatial, time-bounded restriction zone.

    ``expires_at`` is a tick number; the zone is live while ``now < expires_at``.
    It only ever moves forward.
    """

    zone_id: ZoneId
    center: Vector3
    created_at: int
    expires_at: int

    def expired(self, now: int) -> bool:
        return now >= self.expires_at

    def remaining(self, now: int) -> int:
        return max(0, self.expires_at - now)

    def extend_to(self, expires_at: int) -> bool:
        """Move expiration forward. Returns False if *expires_at* would shorten it."""
        if expires_at <= self.expires_at:
            return False
        self.expires_at = expires_at
        return True

    def copy(self) -> Zone:
        return Zone(
            zone_id=self.zone_id,
            center=self.center,
            created_at=self.created_at,
            expires_at=self.expires_at,
        )


@dataclass(slots=True)
class Membership:
    """An (entity, zone) pairing with its own countdown in ticks."""

    entity_id: EntityId
    zone_id: ZoneId
    remaining: int

    @property
    def active(self) -> bool:
        return self.remaining > 0

    def copy(self) -> Membership:
        return Membership(self.entity_id, self.zone_id, self.remaining)

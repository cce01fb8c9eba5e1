"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from raidblock.core.enums import RemovalCause


# --- Geometry ---

class PositionSchema(BaseModel):
    x: float
    y: float = 0.0
    z: float = 0.0


# --- Zones ---

class ZoneSchema(BaseModel):
    zone_id: int
    x: float
    y: float
    z: float
    created_at: int
    expires_at: int
    remaining: int = Field(description="Ticks until the zone expires")


class ZonesResponse(BaseModel):
    tick: int
    zone_radius: float
    merge_radius: float
    zones: list[ZoneSchema] = Field(default_factory=list)


class ZonesContainingResponse(BaseModel):
    tick: int
    zone_ids: list[int] = Field(default_factory=list)


# --- Entities ---

class MembershipSchema(BaseModel):
    zone_id: int
    remaining: int


class SavedTimeSchema(BaseModel):
    zone_id: int
    remaining: int


class PanelSchema(BaseModel):
    subsystem: str
    remaining: int
    progress: float
    slot: str
    anchor_min: str
    anchor_max: str


class EntityRestrictionSchema(BaseModel):
    entity_id: int
    name: str = ""
    x: float | None = None
    y: float | None = None
    z: float | None = None
    live: bool = False
    raid_restricted: bool = False
    raid_remaining: int = 0
    memberships: list[MembershipSchema] = Field(default_factory=list)
    saved_times: list[SavedTimeSchema] = Field(default_factory=list)
    combat_restricted: bool = False
    combat_remaining: int = 0
    panels: list[PanelSchema] = Field(default_factory=list)


class EntityUpsertRequest(PositionSchema):
    name: str | None = None


# --- Events ---

class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    entity_ids: list[int] = Field(default_factory=list)
    zone_id: int | None = None


class DamageEventRequest(PositionSchema):
    initiator_id: int
    victim_id: int | None = None


class DamageEventResponse(BaseModel):
    created: bool
    zone: ZoneSchema


class CombatEventRequest(BaseModel):
    attacker_id: int
    victim_id: int


class CombatEventResponse(BaseModel):
    blocked: list[int] = Field(default_factory=list)


class RemovalEventRequest(BaseModel):
    entity_id: int
    cause: RemovalCause


class CommandRequest(BaseModel):
    entity_id: int
    command: str


class CommandResponse(BaseModel):
    allowed: bool
    denied_by: str | None = None


class BuildRequest(PositionSchema):
    entity_id: int
    upgrade: bool = False


class BuildResponse(BaseModel):
    allowed: bool
    zone_ids: list[int] = Field(default_factory=list)


# --- World State ---

class StateResponse(BaseModel):
    tick: int
    running: bool
    paused: bool
    zones: list[ZoneSchema] = Field(default_factory=list)
    entities: list[EntityRestrictionSchema] = Field(default_factory=list)
    events: list[EventSchema] = Field(default_factory=list)
    event_counts: dict[str, int] = Field(default_factory=dict)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int


# --- Config ---

class ConfigResponse(BaseModel):
    block_duration: int
    zone_radius: float
    merge_radius: float
    block_on_receive_raid_damage: bool
    remove_block_on_death: bool
    blocked_commands: list[str]
    combat_block_duration: int
    combat_block_on_player_hit: bool
    combat_block_on_receive_damage: bool
    combat_remove_block_on_death: bool
    combat_blocked_commands: list[str]
    tick_rate: float

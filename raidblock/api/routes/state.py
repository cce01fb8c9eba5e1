"""GET /api/v1/state, zones and entity restriction reads (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from raidblock.api.dependencies import get_engine_manager
from raidblock.api.engine_manager import EngineManager
from raidblock.api.schemas import (
    EntityRestrictionSchema,
    EntityUpsertRequest,
    EventSchema,
    MembershipSchema,
    PanelSchema,
    SavedTimeSchema,
    StateResponse,
    ZonesContainingResponse,
    ZoneSchema,
    ZonesResponse,
)
from raidblock.core.models import Vector3
from raidblock.core.world import WorldState

router = APIRouter()


def _serialize_zone(zone, now: int) -> ZoneSchema:
    return ZoneSchema(
        zone_id=zone.zone_id,
        x=zone.center.x, y=zone.center.y, z=zone.center.z,
        created_at=zone.created_at,
        expires_at=zone.expires_at,
        remaining=zone.remaining(now),
    )


def _serialize_entity(manager: EngineManager, svc, entity_id: int) -> EntityRestrictionSchema:
    rec = svc.world.entities.get(entity_id) if isinstance(svc.world, WorldState) else None
    tracker = svc.tracker
    memberships = [
        MembershipSchema(zone_id=zid, remaining=tracker.remaining_in(entity_id, zid))
        for zid in sorted(tracker.zones_of(entity_id))
    ]
    saved = []
    for zone in svc.zones.zones:
        value = tracker.saved_time(entity_id, zone.zone_id)
        if value is not None:
            saved.append(SavedTimeSchema(zone_id=zone.zone_id, remaining=value))
    panels = [
        PanelSchema(
            subsystem=v.subsystem.name.lower(),
            remaining=v.remaining,
            progress=v.progress,
            slot=v.slot.value,
            anchor_min=v.anchor_min,
            anchor_max=v.anchor_max,
        )
        for v in manager.hud.views(entity_id)
    ]
    return EntityRestrictionSchema(
        entity_id=entity_id,
        name=rec.name if rec else "",
        x=rec.pos.x if rec else None,
        y=rec.pos.y if rec else None,
        z=rec.pos.z if rec else None,
        live=svc.world.is_live(entity_id),
        raid_restricted=svc.is_restricted(entity_id),
        raid_remaining=svc.remaining(entity_id),
        memberships=memberships,
        saved_times=saved,
        combat_restricted=svc.combat.is_restricted(entity_id),
        combat_remaining=svc.combat_remaining(entity_id),
        panels=panels,
    )


@router.get("/state", response_model=StateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    entity_id: int | None = Query(None, description="Only return events involving this entity"),
    manager: EngineManager = Depends(get_engine_manager),
) -> StateResponse:
    with manager.locked() as svc:
        now = svc.now
        zones = [_serialize_zone(z, now) for z in svc.zones.zones]
        ids: set = set(svc.tracker.entity_ids()) | set(svc.combat.entity_ids())
        if isinstance(svc.world, WorldState):
            ids |= set(svc.world.entities)
        entities = [_serialize_entity(manager, svc, eid) for eid in sorted(ids)]

    events = [
        EventSchema(
            tick=e.tick, category=e.category, message=e.message,
            entity_ids=list(e.entity_ids), zone_id=e.zone_id,
        )
        for e in manager.event_log.since_tick(since_tick, entity_id)
    ]
    return StateResponse(
        tick=now,
        running=manager.running,
        paused=manager.paused,
        zones=zones,
        entities=entities,
        events=events,
        event_counts=manager.event_log.category_counts(),
    )


@router.get("/zones", response_model=ZonesResponse)
def get_zones(manager: EngineManager = Depends(get_engine_manager)) -> ZonesResponse:
    with manager.locked() as svc:
        now = svc.now
        return ZonesResponse(
            tick=now,
            zone_radius=svc.zones.zone_radius,
            merge_radius=svc.zones.merge_radius,
            zones=[_serialize_zone(z, now) for z in svc.zones.zones],
        )


@router.get("/zones/containing", response_model=ZonesContainingResponse)
def get_zones_containing(
    x: float = Query(...),
    y: float = Query(0.0),
    z: float = Query(0.0),
    manager: EngineManager = Depends(get_engine_manager),
) -> ZonesContainingResponse:
    with manager.locked() as svc:
        zone_ids = sorted(svc.zones_containing(Vector3(x, y, z)))
        return ZonesContainingResponse(tick=svc.now, zone_ids=zone_ids)


@router.get("/entities/{entity_id}/restriction", response_model=EntityRestrictionSchema)
def get_entity_restriction(
    entity_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> EntityRestrictionSchema:
    with manager.locked() as svc:
        known = (
            entity_id in svc.tracker.entity_ids()
            or svc.combat.is_restricted(entity_id)
            or svc.world.position_of(entity_id) is not None
        )
        if not known:
            raise HTTPException(status_code=404, detail=f"Entity {entity_id} is not tracked.")
        return _serialize_entity(manager, svc, entity_id)


@router.put("/entities/{entity_id}", response_model=EntityRestrictionSchema)
def put_entity(
    entity_id: int,
    body: EntityUpsertRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> EntityRestrictionSchema:
    manager.upsert_entity(entity_id, Vector3(body.x, body.y, body.z), body.name)
    with manager.locked() as svc:
        return _serialize_entity(manager, svc, entity_id)

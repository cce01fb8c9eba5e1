"""POST /api/v1/events/*, /commands, /build: host callbacks pushed over HTTP."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from raidblock.api.dependencies import get_engine_manager
from raidblock.api.engine_manager import EngineManager
from raidblock.api.routes.state import _serialize_zone
from raidblock.api.schemas import (
    BuildRequest,
    BuildResponse,
    CombatEventRequest,
    CombatEventResponse,
    CommandRequest,
    CommandResponse,
    ControlResponse,
    DamageEventRequest,
    DamageEventResponse,
    RemovalEventRequest,
)
from raidblock.core.models import Vector3

router = APIRouter()


@router.post("/events/damage", response_model=DamageEventResponse)
def post_damage(
    body: DamageEventRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> DamageEventResponse:
    zone, created = manager.qualifying_damage(
        body.initiator_id, body.victim_id, Vector3(body.x, body.y, body.z),
    )
    return DamageEventResponse(created=created, zone=_serialize_zone(zone, manager.tick))


@router.post("/events/combat", response_model=CombatEventResponse)
def post_combat(
    body: CombatEventRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CombatEventResponse:
    blocked = manager.player_damage(body.attacker_id, body.victim_id)
    return CombatEventResponse(blocked=blocked)


@router.post("/events/removed", response_model=ControlResponse)
def post_removed(
    body: RemovalEventRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.entity_removed(body.entity_id, body.cause)
    return ControlResponse(
        status="ok",
        message=f"Entity {body.entity_id} removed ({body.cause.value}).",
        tick=manager.tick,
    )


@router.post("/commands", response_model=CommandResponse)
def post_command(
    body: CommandRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> CommandResponse:
    decision = manager.command_attempt(body.entity_id, body.command)
    return CommandResponse(
        allowed=decision.allowed,
        denied_by=decision.denied_by.name.lower() if decision.denied_by is not None else None,
    )


@router.post("/build", response_model=BuildResponse)
def post_build(
    body: BuildRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> BuildResponse:
    decision = manager.build_attempt(
        body.entity_id, Vector3(body.x, body.y, body.z), upgrade=body.upgrade,
    )
    return BuildResponse(allowed=decision.allowed, zone_ids=sorted(decision.zone_ids))

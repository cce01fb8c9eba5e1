"""GET /api/v1/config: expose restriction configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from raidblock.api.dependencies import get_engine_manager
from raidblock.api.engine_manager import EngineManager
from raidblock.api.schemas import ConfigResponse

router = APIRouter()


@router.get("/config", response_model=ConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> ConfigResponse:
    cfg = manager.config
    return ConfigResponse(
        block_duration=cfg.block_duration,
        zone_radius=cfg.zone_radius,
        merge_radius=cfg.merge_radius,
        block_on_receive_raid_damage=cfg.block_on_receive_raid_damage,
        remove_block_on_death=cfg.remove_block_on_death,
        blocked_commands=list(cfg.blocked_commands),
        combat_block_duration=cfg.combat_block_duration,
        combat_block_on_player_hit=cfg.combat_block_on_player_hit,
        combat_block_on_receive_damage=cfg.combat_block_on_receive_damage,
        combat_remove_block_on_death=cfg.combat_remove_block_on_death,
        combat_blocked_commands=list(cfg.combat_blocked_commands),
        tick_rate=manager.tick_rate,
    )

"""POST /api/v1/control/{action} and /speed: tick loop controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from raidblock.api.dependencies import get_engine_manager
from raidblock.api.engine_manager import EngineManager
from raidblock.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _reply(manager: EngineManager, message: str, status: str = "ok") -> ControlResponse:
    return ControlResponse(status=status, message=message, tick=manager.tick)


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.start:
            if manager.running:
                return _reply(manager, "Tick loop already running.", status="noop")
            manager.start()
            return _reply(manager, f"Tick loop started ({manager.tick_rate:.3f}s per tick).")

        case ControlAction.pause | ControlAction.resume if not manager.running:
            return _reply(manager, "Tick loop is not running.", status="error")

        case ControlAction.pause:
            manager.pause()
            return _reply(manager, "Tick loop paused; countdowns frozen.")

        case ControlAction.resume:
            manager.resume()
            return _reply(manager, "Tick loop resumed.")

        case ControlAction.step:
            report = manager.step()
            summary = "quiet" if report.quiet else (
                f"{len(report.entered)} entered, {len(report.exited)} exited, "
                f"{len(report.expired_memberships)} expired"
            )
            return _reply(manager, f"Tick {report.tick} executed ({summary}).")

        case ControlAction.reset:
            manager.reset()
            return _reply(manager, "Zones, restrictions and roster cleared.")


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    tps: float = Query(1.0, gt=0.1, le=100.0, description="Ticks per second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / tps
    return _reply(manager, f"Tick rate set to {tps:.1f} tps.")

"""FastAPI dependency injection: the process-wide EngineManager."""

from __future__ import annotations

from fastapi import HTTPException

from raidblock.api.engine_manager import EngineManager

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager | None) -> None:
    """Install (or, with None, uninstall) the manager served to routes."""
    global _engine_manager
    _engine_manager = manager


def get_engine_manager() -> EngineManager:
    manager = _engine_manager
    if manager is None:
        raise HTTPException(status_code=503, detail="Raid-block engine is not running.")
    return manager

"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from raidblock.api.dependencies import set_engine_manager
from raidblock.api.engine_manager import EngineManager
from raidblock.api.routes import api_router
from raidblock.config import RaidBlockConfig
from raidblock.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: RaidBlockConfig | None = None, autostart: bool = True) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    With ``autostart=False`` the tick loop stays idle until ``/control/start``
    or ``/control/step`` is called.
    """
    if config is None:
        config = RaidBlockConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started: raid-block loop %s.", "running" if autostart else "idle")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Raid Block Engine",
        description=(
            "Raid-zone and combat restriction tracking: inspection and host callback API.\n\n"
            "## API Groups\n\n"
            "- **State**: Live zones, per-entity restrictions, panels and the event feed\n"
            "- **Events**: Host callbacks: qualifying damage, PvP hits, removals, commands, builds\n"
            "- **Control**: Tick loop lifecycle: start, pause, resume, step, reset\n"
            "- **Config**: Read-only restriction configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Zones, memberships, saved times, combat blocks and HUD panels."},
            {"name": "Events", "description": "Entry points the game host calls when something happens in the world."},
            {"name": "Control", "description": "Tick loop controls: start, pause, resume, single-step, and reset."},
            {"name": "Config", "description": "Read-only restriction parameters (durations, radii, blocklists)."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app

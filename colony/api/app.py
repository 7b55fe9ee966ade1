"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from colony.api.dependencies import set_engine_manager
from colony.api.engine_manager import EngineManager
from colony.api.routes import api_router
from colony.config import SimulationConfig
from colony.utils.logging import setup_logging

logger = logging.getLogger(__name__)

_DESCRIPTION = """\
Watch and steer a single room of autonomous workers.

Harvesters gather energy and deliver it to the spawn and extensions,
falling back to upgrading the controller. Builders turn spare energy
into construction.
"""

_TAGS = [
    {"name": "State", "description": "Workers with their persisted state, room targets, events and stats."},
    {"name": "Map", "description": "Run-length encoded room tiles."},
    {"name": "Control", "description": "Start, pause, resume, single-tick, regenerate and speed."},
    {"name": "Config", "description": "The configuration the room was generated from."},
]


def _engine_lifespan(config: SimulationConfig) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(config.log_level)
        manager = EngineManager(config)
        set_engine_manager(manager)
        manager.start()
        logger.info("Serving room seed=%d (%dx%d)", config.world_seed, config.grid_width, config.grid_height)
        try:
            yield
        finally:
            manager.stop()
            set_engine_manager(None)

    return lifespan


def create_app(config: SimulationConfig | None = None) -> FastAPI:
    config = config or SimulationConfig()
    app = FastAPI(
        title="Colony Simulation",
        description=_DESCRIPTION,
        version="0.1.0",
        lifespan=_engine_lifespan(config),
        openapi_tags=_TAGS,
    )
    # Local dashboards are served from other ports.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app

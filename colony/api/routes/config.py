"""GET /api/v1/config: the settings the room was built from."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from colony.api.dependencies import get_engine_manager
from colony.api.engine_manager import EngineManager
from colony.api.schemas import SimulationConfigResponse

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        world_seed=cfg.world_seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        max_ticks=cfg.max_ticks,
        harvester_quota=cfg.harvester_quota,
        builder_quota=cfg.builder_quota,
        worker_body_cost=cfg.worker_body_cost,
        num_sources=cfg.num_sources,
        source_capacity=cfg.source_capacity,
        source_regen_ticks=cfg.source_regen_ticks,
        initial_construction_sites=cfg.initial_construction_sites,
        annotate_routes=cfg.annotate_routes,
        tick_rate=manager.tick_rate,
    )

"""Pydantic payloads returned by the /api/v1 routes."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Workers ---

class WorkerSchema(BaseModel):
    id: int
    name: str
    role: str
    state: str
    x: int
    y: int
    energy: int
    energy_capacity: int
    ticks_to_live: int
    work_parts: int = 1
    carry_parts: int = 1
    move_parts: int = 2


# --- Targets ---

class ResourceNodeSchema(BaseModel):
    id: int
    x: int
    y: int
    energy: int
    energy_capacity: int
    ticks_to_regeneration: int = 0


class FacilitySchema(BaseModel):
    id: int
    name: str
    kind: str
    x: int
    y: int
    energy: int
    energy_capacity: int


class ConstructionSiteSchema(BaseModel):
    id: int
    structure: str
    x: int
    y: int
    progress: int
    progress_total: int


class ControllerSchema(BaseModel):
    id: int
    x: int
    y: int
    level: int
    progress: int
    progress_total: int


# --- Map ---

class MapResponse(BaseModel):
    width: int
    height: int
    grid: list[int] = Field(description="Run-length encoded Material values: [value, count, value, count, ...]")


# --- World State ---

class EventSchema(BaseModel):
    tick: int
    category: str
    message: str


class WorldStateResponse(BaseModel):
    tick: int
    alive_count: int
    workers: list[WorkerSchema]
    events: list[EventSchema] = Field(default_factory=list)
    resource_nodes: list[ResourceNodeSchema] = Field(default_factory=list)
    facilities: list[FacilitySchema] = Field(default_factory=list)
    construction_sites: list[ConstructionSiteSchema] = Field(default_factory=list)
    controller: ControllerSchema | None = None


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Config ---

class SimulationConfigResponse(BaseModel):
    world_seed: int
    grid_width: int
    grid_height: int
    max_ticks: int
    harvester_quota: int
    builder_quota: int
    worker_body_cost: int
    num_sources: int
    source_capacity: int
    source_regen_ticks: int
    initial_construction_sites: int
    annotate_routes: bool
    tick_rate: float


# --- Stats ---

class SimulationStats(BaseModel):
    tick: int
    alive_count: int
    total_spawned: int
    total_deaths: int
    running: bool
    paused: bool
    memory_records: int = 0
    workers_by_role: dict[str, int] = Field(default_factory=dict)
    workers_by_state: dict[str, int] = Field(default_factory=dict)
    energy_harvested_per_tick: int = 0
    energy_recovered_per_tick: float = 0.0
    stored_energy: int = 0
    controller_level: int = 0
    controller_progress: int = 0
    controller_progress_total: int = 0

"""GET /api/v1/state — dynamic worker, target & event data (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from colony.ai.states import state_name
from colony.api.dependencies import get_engine_manager
from colony.api.engine_manager import EngineManager
from colony.api.schemas import (
    ConstructionSiteSchema,
    ControllerSchema,
    EventSchema,
    FacilitySchema,
    ResourceNodeSchema,
    SimulationStats,
    WorkerSchema,
    WorldStateResponse,
)

router = APIRouter()


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")

    workers = [
        WorkerSchema(
            id=w.id,
            name=w.name,
            role=w.role.name,
            state=state_name(w),
            x=w.pos.x,
            y=w.pos.y,
            energy=w.store.used,
            energy_capacity=w.store.capacity,
            ticks_to_live=w.ticks_to_live,
            work_parts=w.body.work,
            carry_parts=w.body.carry,
            move_parts=w.body.move,
        )
        for w in snapshot.workers.values()
        if w.alive
    ]

    events = [
        EventSchema(tick=ev.tick, category=ev.category, message=ev.message)
        for ev in manager.event_log.since_tick(since_tick)
    ]

    resource_nodes = [
        ResourceNodeSchema(
            id=n.id, x=n.pos.x, y=n.pos.y, energy=n.energy,
            energy_capacity=n.energy_capacity,
            ticks_to_regeneration=n.ticks_to_regeneration,
        )
        for n in snapshot.resource_nodes
    ]

    facilities = [
        FacilitySchema(
            id=f.id, name=f.name, kind=f.kind.name, x=f.pos.x, y=f.pos.y,
            energy=f.store.used, energy_capacity=f.store.capacity,
        )
        for f in snapshot.facilities
    ]

    sites = [
        ConstructionSiteSchema(
            id=s.id, structure=s.structure.name, x=s.pos.x, y=s.pos.y,
            progress=s.progress, progress_total=s.progress_total,
        )
        for s in snapshot.construction_sites
    ]

    controller = None
    if snapshot.controller is not None:
        c = snapshot.controller
        controller = ControllerSchema(
            id=c.id, x=c.pos.x, y=c.pos.y, level=c.level,
            progress=c.progress, progress_total=c.progress_total,
        )

    return WorldStateResponse(
        tick=snapshot.tick,
        alive_count=len(workers),
        workers=workers,
        events=events,
        resource_nodes=resource_nodes,
        facilities=facilities,
        construction_sites=sites,
        controller=controller,
    )


@router.get("/stats", response_model=SimulationStats)
def get_stats(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationStats:
    snapshot = manager.get_snapshot()
    tick = snapshot.tick if snapshot else 0
    alive = sum(1 for w in snapshot.workers.values() if w.alive) if snapshot else 0
    room = manager.get_stats()

    return SimulationStats(
        tick=tick,
        alive_count=alive,
        total_spawned=manager.total_spawned,
        total_deaths=manager.total_deaths,
        running=manager.running,
        paused=manager.paused,
        memory_records=snapshot.memory_records if snapshot else 0,
        workers_by_role=dict(room.workers_by_role),
        workers_by_state=dict(room.workers_by_state),
        energy_harvested_per_tick=room.energy_harvested_per_tick,
        energy_recovered_per_tick=room.energy_recovered_per_tick,
        stored_energy=room.stored_energy,
        controller_level=room.controller_level,
        controller_progress=room.controller_progress,
        controller_progress_total=room.controller_progress_total,
    )

"""Aggregate room statistics, recomputed once per tick."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from colony.ai.states import state_name
from colony.core.enums import WorkerRole, WorkerState

if TYPE_CHECKING:
    from colony.config import SimulationConfig
    from colony.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class RoomStats:
    tick: int = 0
    workers_by_role: dict[str, int] = field(default_factory=dict)
    workers_by_state: dict[str, int] = field(default_factory=dict)
    energy_harvested_per_tick: int = 0
    energy_recovered_per_tick: float = 0.0
    stored_energy: int = 0
    controller_level: int = 0
    controller_progress: int = 0
    controller_progress_total: int = 0
    construction_sites: int = 0

    def to_dict(self) -> dict:
        return {
            "tick": self.tick,
            "workers_by_role": dict(self.workers_by_role),
            "workers_by_state": dict(self.workers_by_state),
            "energy_harvested_per_tick": self.energy_harvested_per_tick,
            "energy_recovered_per_tick": round(self.energy_recovered_per_tick, 3),
            "stored_energy": self.stored_energy,
            "controller_level": self.controller_level,
            "controller_progress": self.controller_progress,
            "controller_progress_total": self.controller_progress_total,
            "construction_sites": self.construction_sites,
        }


def compute_stats(world: WorldState, config: SimulationConfig) -> RoomStats:
    """Collect the per-tick numbers the status line and the API report."""
    by_role = {role.name: 0 for role in WorkerRole}
    by_state = {state.name: 0 for state in WorkerState}
    harvest_rate = 0
    for worker in world.workers.values():
        if not worker.alive:
            continue
        by_role[worker.role.name] += 1
        by_state[state_name(worker)] += 1
        if worker.role == WorkerRole.HARVESTER:
            harvest_rate += worker.body.work * config.harvest_power

    recovered = sum(node.energy_recovered_per_tick() for node in world.resource_nodes.values())
    controller = world.controller
    return RoomStats(
        tick=world.tick,
        workers_by_role=by_role,
        workers_by_state=by_state,
        energy_harvested_per_tick=harvest_rate,
        energy_recovered_per_tick=recovered,
        stored_energy=world.stored_energy(),
        controller_level=controller.level if controller else 0,
        controller_progress=controller.progress if controller else 0,
        controller_progress_total=controller.progress_total if controller else 0,
        construction_sites=len(world.construction_sites),
    )

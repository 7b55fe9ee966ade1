"""Immutable snapshot of the world state for API readers."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from colony.core.grid import Grid
from colony.core.models import Worker
from colony.core.resource_nodes import ResourceNode
from colony.core.structures import ConstructionSite, Controller, Facility
from colony.core.world_state import WorldState


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the world, safe to share across threads.

    Uses deep-copied workers and targets and a MappingProxyType for the
    worker dict to enforce immutability at runtime.
    """

    tick: int
    seed: int
    workers: Mapping[int, Worker]
    grid: Grid
    resource_nodes: tuple[ResourceNode, ...]
    facilities: tuple[Facility, ...]
    construction_sites: tuple[ConstructionSite, ...]
    controller: Controller | None
    memory_records: int

    @classmethod
    def from_world(cls, world: WorldState) -> Snapshot:
        return cls(
            tick=world.tick,
            seed=world.seed,
            workers=MappingProxyType({wid: w.copy() for wid, w in world.workers.items()}),
            grid=world.grid.copy(),
            resource_nodes=tuple(n.copy() for n in world.resource_nodes.values()),
            facilities=tuple(f.copy() for f in world.facilities.values()),
            construction_sites=tuple(s.copy() for s in world.construction_sites.values()),
            controller=world.controller.copy() if world.controller else None,
            memory_records=len(world.memory),
        )

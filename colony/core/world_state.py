"""Mutable authoritative world state — only mutated by the WorldLoop."""

from __future__ import annotations

from colony.core.grid import Grid
from colony.core.models import Vector2, Worker, WorkerMemory
from colony.core.resource_nodes import ResourceNode
from colony.core.structures import ConstructionSite, Controller, Facility


class WorldState:
    """The single source of truth for one room (the workers' environment)."""

    __slots__ = (
        "tick", "seed", "grid", "workers", "memory", "resource_nodes",
        "facilities", "construction_sites", "controller", "_next_id",
    )

    def __init__(self, seed: int, grid: Grid) -> None:
        self.tick: int = 0
        self.seed: int = seed
        self.grid: Grid = grid
        self.workers: dict[int, Worker] = {}
        # Persisted worker records keyed by worker name; outlive the worker
        # until the WorldLoop reclaims them.
        self.memory: dict[str, WorkerMemory] = {}
        self.resource_nodes: dict[int, ResourceNode] = {}
        self.facilities: dict[int, Facility] = {}
        self.construction_sites: dict[int, ConstructionSite] = {}
        self.controller: Controller | None = None
        self._next_id: int = 1

    def allocate_id(self) -> int:
        oid = self._next_id
        self._next_id += 1
        return oid

    # -- workers --

    def add_worker(self, worker: Worker) -> None:
        self.workers[worker.id] = worker
        self.memory[worker.name] = worker.memory

    def remove_worker(self, worker_id: int) -> Worker | None:
        """Remove a worker from the room.  Its memory record is left behind."""
        return self.workers.pop(worker_id, None)

    def move_worker(self, worker_id: int, new_pos: Vector2) -> None:
        worker = self.workers.get(worker_id)
        if worker is not None:
            worker.pos = new_pos

    def worker_names(self) -> set[str]:
        return {w.name for w in self.workers.values()}

    def occupied_positions(self) -> set[tuple[int, int]]:
        return {(w.pos.x, w.pos.y) for w in self.workers.values() if w.alive}

    # -- targets --

    def add_resource_node(self, node: ResourceNode) -> None:
        self.resource_nodes[node.id] = node

    def add_facility(self, facility: Facility) -> None:
        self.facilities[facility.id] = facility

    def add_construction_site(self, site: ConstructionSite) -> None:
        self.construction_sites[site.id] = site

    def remove_construction_site(self, site_id: int) -> ConstructionSite | None:
        return self.construction_sites.pop(site_id, None)

    def blocked_by_structure(self, pos: Vector2) -> bool:
        """Nodes, facilities and the controller occupy their tile."""
        for node in self.resource_nodes.values():
            if node.pos == pos:
                return True
        for facility in self.facilities.values():
            if facility.pos == pos:
                return True
        return self.controller is not None and self.controller.pos == pos

    def is_standable(self, pos: Vector2) -> bool:
        """Walkable terrain not taken up by a structure."""
        return self.grid.is_walkable(pos) and not self.blocked_by_structure(pos)

    def stored_energy(self) -> int:
        return sum(f.store.used for f in self.facilities.values())

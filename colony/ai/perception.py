"""Perception — the world queries a worker makes before deciding.

Every query reads the room it was given explicitly; nothing is cached
between calls, so a target that vanished since the last tick is simply
not returned any more.

Ordering contract shared by every query: nearest first by Manhattan
distance from the worker, ties kept in the room's enumeration order
(``min`` and ``sorted`` are both stable).  A resource node whose every
access tile is taken by another worker does not count as available: no
path could reach it this tick.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol, Sequence, TypeVar

from colony.ai.pathfinding import has_free_tile_within
from colony.core.enums import FacilityKind

if TYPE_CHECKING:
    from colony.actions.base import Target
    from colony.core.models import Vector2, Worker
    from colony.core.resource_nodes import ResourceNode
    from colony.core.structures import ConstructionSite, Controller, Facility
    from colony.core.world_state import WorldState

T = TypeVar("T")

# Facilities that consume delivered energy
DELIVERY_KINDS = frozenset({FacilityKind.SPAWN, FacilityKind.EXTENSION})


def nearest(origin: Vector2, candidates: Iterable[T]) -> T | None:
    """Closest candidate to *origin*; the first one enumerated wins ties."""
    best = None
    best_dist = -1
    for candidate in candidates:
        dist = origin.manhattan(candidate.pos)
        if best is None or dist < best_dist:
            best = candidate
            best_dist = dist
    return best


def by_distance(origin: Vector2, candidates: Iterable[T]) -> list[T]:
    """Candidates sorted nearest first, enumeration order kept for ties."""
    return sorted(candidates, key=lambda c: origin.manhattan(c.pos))


class WorldQuery(Protocol):
    """What a state machine may ask about the world around a worker."""

    def nearest_resource_node(self, worker: Worker) -> Target | None: ...

    def delivery_targets(self, worker: Worker) -> Sequence[Target]: ...

    def construction_tasks(self, worker: Worker) -> Sequence[Target]: ...

    def improvement_objective(self, worker: Worker) -> Target | None: ...


class Perception:
    """WorldQuery over a single room."""

    __slots__ = ("_world", "_gather_range")

    def __init__(self, world: WorldState, gather_range: int = 1) -> None:
        self._world = world
        self._gather_range = gather_range

    @property
    def tick(self) -> int:
        return self._world.tick

    def nearest_resource_node(self, worker: Worker) -> ResourceNode | None:
        """Closest node that still has energy and can be reached."""
        return nearest(worker.pos, (
            n for n in self._world.resource_nodes.values()
            if n.is_available and self._reachable(worker, n.pos)
        ))

    def _reachable(self, worker: Worker, pos: Vector2) -> bool:
        if worker.pos.manhattan(pos) <= self._gather_range:
            return True
        occupied = self._world.occupied_positions()
        occupied.discard((worker.pos.x, worker.pos.y))
        return has_free_tile_within(self._world, pos, self._gather_range, occupied)

    def delivery_targets(self, worker: Worker) -> list[Facility]:
        """Spawns and extensions with free capacity, nearest first.

        A worker carrying nothing has nothing to hand over, so no facility
        can accept a delivery from it.
        """
        if not worker.store.has_resources:
            return []
        return by_distance(worker.pos, (
            f for f in self._world.facilities.values()
            if f.kind in DELIVERY_KINDS and f.accepts_delivery
        ))

    def construction_tasks(self, worker: Worker) -> list[ConstructionSite]:
        """Unfinished construction sites, nearest first."""
        return by_distance(worker.pos, (
            s for s in self._world.construction_sites.values() if not s.is_complete
        ))

    def improvement_objective(self, worker: Worker) -> Controller | None:
        return self._world.controller

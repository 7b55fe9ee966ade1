"""A* pathfinding over a room.

Targets (sources, facilities, the controller, construction sites) are
acted on from a distance, so a search does not end *on* the goal tile but
on the first standable tile within the interaction range of it.

Usage:
    pf = Pathfinder(world)
    path = pf.find_path(start, goal, within=1, occupied=occ)   # list[Vector2] or None
    step = pf.next_step(start, goal, within=3)                 # Vector2 or None
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING, AbstractSet

from colony.core.enums import Material
from colony.core.models import DIRECTION_OFFSETS, Vector2

if TYPE_CHECKING:
    from colony.core.world_state import WorldState

# Cost of stepping onto a tile. Walls never get this far.
TERRAIN_MOVE_COST: dict[Material, float] = {
    Material.FLOOR: 1.0,
    Material.ROAD:  0.5,
    Material.SWAMP: 5.0,
}

DEFAULT_MAX_NODES = 2500


def tile_cost(world: WorldState, pos: Vector2) -> float:
    return TERRAIN_MOVE_COST.get(world.grid.get(pos), 1.0)


def has_free_tile_within(
    world: WorldState,
    goal: Vector2,
    within: int,
    occupied: AbstractSet[tuple[int, int]],
) -> bool:
    """True if some standable, unoccupied tile lies within *within* steps of *goal*."""
    for dy in range(-within, within + 1):
        span = within - abs(dy)
        for dx in range(-span, span + 1):
            if dx == 0 and dy == 0:
                continue
            pos = Vector2(goal.x + dx, goal.y + dy)
            if (pos.x, pos.y) not in occupied and world.is_standable(pos):
                return True
    return False


class Pathfinder:
    """A* pathfinder bound to one room.

    Explores at most ``max_nodes`` tiles per search before giving up.
    Tiles in *occupied* (other workers) are treated as blocked.
    """

    __slots__ = ("_world", "_max_nodes")

    def __init__(self, world: WorldState, max_nodes: int = DEFAULT_MAX_NODES) -> None:
        self._world = world
        self._max_nodes = max_nodes

    def find_path(
        self,
        start: Vector2,
        goal: Vector2,
        within: int = 1,
        occupied: AbstractSet[tuple[int, int]] = frozenset(),
    ) -> list[Vector2] | None:
        """Cheapest path from *start* to a tile within *within* steps of *goal*.

        Returns the tiles to walk (excluding *start*), an empty list when
        *start* is already in range, or None when no such tile is reachable
        within the node budget.
        """
        if start.manhattan(goal) <= within:
            return []

        world = self._world
        gx, gy = goal.x, goal.y

        counter = 0
        open_heap: list[tuple[float, int, int, int]] = [(0.0, counter, start.x, start.y)]
        g_score: dict[tuple[int, int], float] = {(start.x, start.y): 0.0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}
        closed: set[tuple[int, int]] = set()

        while open_heap and len(closed) < self._max_nodes:
            _, _, cx, cy = heapq.heappop(open_heap)
            ckey = (cx, cy)
            if ckey in closed:
                continue
            if abs(cx - gx) + abs(cy - gy) <= within:
                return self._reconstruct(came_from, ckey)
            closed.add(ckey)

            current_g = g_score[ckey]
            for d in DIRECTION_OFFSETS:
                nkey = (cx + d.x, cy + d.y)
                if nkey in closed or nkey in occupied:
                    continue
                npos = Vector2(*nkey)
                if not world.is_standable(npos):
                    continue
                tentative_g = current_g + tile_cost(world, npos)
                if tentative_g < g_score.get(nkey, float("inf")):
                    g_score[nkey] = tentative_g
                    came_from[nkey] = ckey
                    h = max(0, abs(nkey[0] - gx) + abs(nkey[1] - gy) - within)
                    counter += 1
                    heapq.heappush(open_heap, (tentative_g + h, counter, nkey[0], nkey[1]))

        return None

    def next_step(
        self,
        start: Vector2,
        goal: Vector2,
        within: int = 1,
        occupied: AbstractSet[tuple[int, int]] = frozenset(),
    ) -> Vector2 | None:
        """First tile of the path, or None when already in range or unreachable."""
        path = self.find_path(start, goal, within, occupied)
        return path[0] if path else None

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
    ) -> list[Vector2]:
        path: list[Vector2] = []
        while current in came_from:
            path.append(Vector2(*current))
            current = came_from[current]
        path.reverse()
        return path

"""Room and worker generation.

RoomGenerator lays out a deterministic room from the world seed:
walled border, a spawn in the centre, the controller, energy sources and
a ring of extension construction sites around the spawn.

WorkerGenerator builds new worker records for the population manager.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colony.core.enums import Domain, FacilityKind, StructureType, WorkerRole
from colony.core.grid import Grid
from colony.core.models import DIRECTION_OFFSETS, Body, ResourceStore, Vector2, Worker, WorkerMemory
from colony.core.resource_nodes import ResourceNode
from colony.core.structures import ConstructionSite, Controller, Facility
from colony.core.world_state import WorldState

if TYPE_CHECKING:
    from colony.config import SimulationConfig
    from colony.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)

# Extension sites go on these offsets from the spawn, in order
_EXTENSION_OFFSETS: tuple[Vector2, ...] = (
    Vector2(-2, -2), Vector2(2, -2), Vector2(-2, 2), Vector2(2, 2),
    Vector2(0, -3), Vector2(3, 0), Vector2(0, 3), Vector2(-3, 0),
    Vector2(-3, -3), Vector2(3, -3), Vector2(-3, 3), Vector2(3, 3),
)

_MIN_SOURCE_DISTANCE = 6       # From the spawn and between sources
_PLACEMENT_ATTEMPTS = 100


class RoomGenerator:
    """Builds a fresh WorldState from configuration and seed."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng

    def build(self) -> WorldState:
        cfg = self._config
        grid = Grid(cfg.grid_width, cfg.grid_height)
        grid.wall_border()
        world = WorldState(seed=cfg.world_seed, grid=grid)

        center = Vector2(cfg.grid_width // 2, cfg.grid_height // 2)
        spawn = Facility(
            id=world.allocate_id(), kind=FacilityKind.SPAWN, pos=center,
            store=ResourceStore(capacity=cfg.spawn_capacity, used=cfg.spawn_initial_energy),
            name="Spawn1",
        )
        world.add_facility(spawn)

        taken: list[Vector2] = [center]
        controller_pos = self._place(world, taken, key=0, min_distance=_MIN_SOURCE_DISTANCE)
        world.controller = Controller(
            id=world.allocate_id(), pos=controller_pos,
            progress_table=tuple(cfg.controller_progress_table),
        )
        taken.append(controller_pos)

        for idx in range(cfg.num_sources):
            pos = self._place(world, taken, key=idx + 1, min_distance=_MIN_SOURCE_DISTANCE)
            world.add_resource_node(ResourceNode(
                id=world.allocate_id(), pos=pos,
                energy=cfg.source_capacity, energy_capacity=cfg.source_capacity,
                regen_ticks=cfg.source_regen_ticks,
            ))
            taken.append(pos)
            logger.info("Placed energy source at %s", pos)

        placed = 0
        for offset in _EXTENSION_OFFSETS:
            if placed >= cfg.initial_construction_sites:
                break
            pos = center + offset
            if not grid.is_walkable(pos) or pos in taken:
                continue
            world.add_construction_site(ConstructionSite(
                id=world.allocate_id(), structure=StructureType.EXTENSION, pos=pos,
                progress_total=cfg.extension_build_cost,
            ))
            taken.append(pos)
            placed += 1

        logger.info("Room built: %dx%d, %d sources, %d construction sites, controller at %s",
                    cfg.grid_width, cfg.grid_height, len(world.resource_nodes),
                    len(world.construction_sites), controller_pos)
        return world

    def _place(self, world: WorldState, taken: list[Vector2], key: int, min_distance: int) -> Vector2:
        """Pick a free interior tile away from everything already placed."""
        cfg = self._config
        candidate = None
        for attempt in range(_PLACEMENT_ATTEMPTS):
            candidate = self._rng.next_position(
                Domain.MAP_GEN, key, attempt, cfg.grid_width, cfg.grid_height, margin=2)
            if all(candidate.manhattan(p) >= min_distance for p in taken):
                return candidate
        # Small rooms: settle for any tile not already taken
        for attempt in range(_PLACEMENT_ATTEMPTS):
            candidate = self._rng.next_position(
                Domain.MAP_GEN, key, _PLACEMENT_ATTEMPTS + attempt,
                cfg.grid_width, cfg.grid_height, margin=1)
            if candidate not in taken and world.grid.is_walkable(candidate):
                return candidate
        raise ValueError(f"room {cfg.grid_width}x{cfg.grid_height} too small to place object {key}")


class WorkerGenerator:
    """Creates worker records next to a spawn."""

    __slots__ = ("_config", "_rng")

    def __init__(self, config: SimulationConfig, rng: DeterministicRNG) -> None:
        self._config = config
        self._rng = rng

    @property
    def body(self) -> Body:
        cfg = self._config
        return Body(work=cfg.worker_work_parts, carry=cfg.worker_carry_parts, move=cfg.worker_move_parts)

    def body_cost(self) -> int:
        return self._config.worker_body_cost

    def spawn_position(self, world: WorldState, spawn: Facility, key: int) -> Vector2 | None:
        """A free walkable tile next to *spawn*, starting from a seeded direction."""
        occupied = world.occupied_positions()
        start = self._rng.next_int(Domain.SPAWN, key, world.tick, 0, len(DIRECTION_OFFSETS) - 1)
        for i in range(len(DIRECTION_OFFSETS)):
            pos = spawn.pos + DIRECTION_OFFSETS[(start + i) % len(DIRECTION_OFFSETS)]
            if (world.grid.is_walkable(pos) and not world.blocked_by_structure(pos)
                    and (pos.x, pos.y) not in occupied):
                return pos
        return None

    def create(self, world: WorldState, role: WorkerRole, pos: Vector2) -> Worker:
        """Build a worker with an uninitialised persisted state."""
        cfg = self._config
        name = f"{role.name.capitalize()}_{world.tick}"
        suffix = 1
        while name in world.memory:
            name = f"{role.name.capitalize()}_{world.tick}_{suffix}"
            suffix += 1
        body = self.body
        return Worker(
            id=world.allocate_id(),
            name=name,
            pos=pos,
            store=ResourceStore(capacity=body.carry * cfg.carry_part_capacity),
            memory=WorkerMemory(role=role),
            body=body,
            ticks_to_live=cfg.worker_lifetime,
        )

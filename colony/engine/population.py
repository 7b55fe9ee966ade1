"""Population manager — keeps each worker role at its fixed quota."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colony.core.enums import FacilityKind, WorkerRole
from colony.utils.event_log import SimEvent

if TYPE_CHECKING:
    from colony.config import SimulationConfig
    from colony.core.models import Worker
    from colony.core.world_state import WorldState
    from colony.systems.generator import WorkerGenerator

logger = logging.getLogger(__name__)


class PopulationManager:
    """Spawns missing workers from spawns that can pay the body cost.

    Roles are filled in quota order (harvesters before builders), and
    each spawn produces at most one worker per tick.
    """

    __slots__ = ("_config", "_generator")

    def __init__(self, config: SimulationConfig, generator: WorkerGenerator) -> None:
        self._config = config
        self._generator = generator

    def quotas(self) -> list[tuple[WorkerRole, int]]:
        return [
            (WorkerRole.HARVESTER, self._config.harvester_quota),
            (WorkerRole.BUILDER, self._config.builder_quota),
        ]

    @staticmethod
    def count_by_role(world: WorldState) -> dict[WorkerRole, int]:
        counts = {role: 0 for role in WorkerRole}
        for worker in world.workers.values():
            if worker.alive:
                counts[worker.role] += 1
        return counts

    def missing(self, world: WorldState) -> list[WorkerRole]:
        """Roles still below quota, one entry per missing worker, in fill order."""
        counts = self.count_by_role(world)
        result: list[WorkerRole] = []
        for role, quota in self.quotas():
            result.extend([role] * max(quota - counts[role], 0))
        return result

    def spawn_missing(self, world: WorldState) -> list[SimEvent]:
        """Spawn what the spawns can afford this tick.  Returns spawn events."""
        wanted = self.missing(world)
        if not wanted:
            return []

        cost = self._generator.body_cost()
        events: list[SimEvent] = []
        spawns = [f for f in world.facilities.values() if f.kind == FacilityKind.SPAWN]
        for spawn in spawns:
            if not wanted:
                break
            if spawn.store.used < cost:
                continue
            role = wanted[0]
            pos = self._generator.spawn_position(world, spawn, key=spawn.id)
            if pos is None:
                logger.debug("Tick %d: %s is surrounded, cannot spawn", world.tick, spawn.name)
                continue
            worker = self._spawn(world, role, pos)
            spawn.store.remove(cost)
            wanted.pop(0)
            logger.info("Tick %d: Spawned %s at %s", world.tick, worker.name, worker.pos)
            events.append(SimEvent(
                tick=world.tick, category="spawn",
                message=f"Spawned new {role.name.lower()}: {worker.name}",
                entity_ids=(worker.id,),
            ))
        return events

    def _spawn(self, world: WorldState, role: WorkerRole, pos) -> Worker:
        worker = self._generator.create(world, role, pos)
        world.add_worker(worker)
        return worker

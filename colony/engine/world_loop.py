"""WorldLoop: advances one room tick by tick in four phases.

Phase cycle:
  1. Population — spawn workers missing from the role quotas
  2. Decision — run every live worker's state machine, one at a time
  3. Resolution — drain the action queue and apply intents in order
  4. Cleanup & Advancement — age and remove workers, reclaim memory,
     regenerate sources, compute stats, advance tick
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from colony.actions.worker_actions import WorkerActions
from colony.ai.perception import Perception
from colony.core.snapshot import Snapshot
from colony.engine.action_queue import ActionQueue
from colony.engine.stats import RoomStats, compute_stats
from colony.utils.event_log import SimEvent

if TYPE_CHECKING:
    from colony.actions.base import ActionProposal, RouteHook
    from colony.ai.brain import WorkerBrain
    from colony.config import SimulationConfig
    from colony.core.world_state import WorldState
    from colony.engine.population import PopulationManager
    from colony.engine.resolver import IntentResolver
    from colony.utils.event_log import EventLog
    from colony.utils.replay import ReplayRecorder

logger = logging.getLogger(__name__)


class WorldLoop:
    """Owns the room and is its only writer.

    Single-threaded mutation of WorldState.  Workers decide in the room's
    enumeration order and only queue intents; the world changes only in
    the resolution and cleanup phases.
    """

    __slots__ = (
        "_config",
        "_world",
        "_brain",
        "_action_queue",
        "_actions",
        "_perception",
        "_resolver",
        "_population",
        "_recorder",
        "_event_log",
        "_last_applied",
        "_tick_events",
        "_stats",
    )

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldState,
        brain: WorkerBrain,
        resolver: IntentResolver,
        population: PopulationManager | None = None,
        recorder: ReplayRecorder | None = None,
        event_log: EventLog | None = None,
        route_hook: RouteHook | None = None,
    ) -> None:
        self._config = config
        self._world = world
        self._brain = brain
        self._action_queue = ActionQueue()
        self._actions = WorkerActions(config, world, self._action_queue, route_hook=route_hook)
        self._perception = Perception(world, config.gather_range)
        self._resolver = resolver
        self._population = population
        self._recorder = recorder
        self._event_log = event_log
        self._last_applied: list[ActionProposal] = []
        self._tick_events: list[SimEvent] = []
        self._stats = compute_stats(world, config)

    @property
    def world(self) -> WorldState:
        return self._world

    @property
    def last_applied(self) -> list[ActionProposal]:
        """Intents the resolver accepted last tick, in queue order."""
        return self._last_applied

    @property
    def tick_events(self) -> list[SimEvent]:
        """Events the last tick produced."""
        return self._tick_events

    @property
    def stats(self) -> RoomStats:
        return self._stats

    def _emit(self, category: str, message: str, entity_ids: tuple[int, ...] = ()) -> None:
        self._tick_events.append(SimEvent(
            tick=self._world.tick, category=category, message=message, entity_ids=entity_ids,
        ))

    def tick_once(self) -> bool:
        """Advance one tick.  False once the room has reached max_ticks."""
        if self._world.tick >= self._config.max_ticks:
            logger.info("Tick %d: Max ticks reached.", self._world.tick)
            return False

        self._step()
        self._world.tick += 1
        return True

    def create_snapshot(self) -> Snapshot:
        """Immutable copy of the room for readers on other threads."""
        return Snapshot.from_world(self._world)

    def run(self) -> None:
        """Tick until max_ticks, logging a status line every status_interval ticks."""
        logger.info("Room seed=%d starting at tick %d", self._world.seed, self._world.tick)

        while self._world.tick < self._config.max_ticks:
            if not self.tick_once():
                break

            if self._world.tick % self._config.status_interval == 0:
                s = self._stats
                logger.info(
                    "Tick %d: %d harvesters, %d builders | harvest %d/t, regen %.2f/t | "
                    "stored %d | controller L%d %d/%d",
                    self._world.tick,
                    s.workers_by_role.get("HARVESTER", 0),
                    s.workers_by_role.get("BUILDER", 0),
                    s.energy_harvested_per_tick,
                    s.energy_recovered_per_tick,
                    s.stored_energy,
                    s.controller_level,
                    s.controller_progress,
                    s.controller_progress_total,
                )

        logger.info("Room stopped at tick %d", self._world.tick)
        if self._recorder:
            self._recorder.flush()

    def _step(self) -> None:
        """Population, decision, resolution, cleanup."""
        self._tick_events = []
        tick = self._world.tick
        t0 = time.perf_counter()

        # --- Phase 1: Population ---
        if self._population is not None:
            self._tick_events.extend(self._population.spawn_missing(self._world))

        # --- Phase 2: Decision ---
        decided = self._phase_decide(tick)
        t1 = time.perf_counter()

        # --- Phase 3: Resolution ---
        proposals = self._action_queue.drain()
        applied = self._resolver.resolve(proposals, self._world)
        self._last_applied = applied
        self._tick_events.extend(self._resolver.events)
        t2 = time.perf_counter()

        # --- Phase 4: Cleanup ---
        self._phase_cleanup()
        self._tick_resource_nodes()
        self._stats = compute_stats(self._world, self._config)

        t3 = time.perf_counter()
        logger.debug(
            "Tick %d: decide=%.4fs resolve=%.4fs cleanup=%.4fs total=%.4fs workers=%d applied=%d",
            tick, t1 - t0, t2 - t1, t3 - t2, t3 - t0, decided, len(applied),
        )

        if self._event_log is not None and self._tick_events:
            self._event_log.append_many(self._tick_events)
        if self._recorder:
            self._recorder.record_tick(tick, applied, self._world)

    def _phase_decide(self, tick: int) -> int:
        """Run each live worker's machine.  Returns how many workers decided."""
        decided = 0
        for worker in list(self._world.workers.values()):
            if not worker.alive:
                continue
            try:
                events = self._brain.decide(worker, self._perception, self._actions, tick)
            except Exception:
                logger.exception("Tick %d: decision failed for worker %s", tick, worker.name)
                continue
            self._tick_events.extend(events)
            decided += 1
        return decided

    def _phase_cleanup(self) -> None:
        """Age workers, remove expired ones, reclaim memory of missing workers."""
        for worker in self._world.workers.values():
            worker.ticks_to_live -= 1

        dead_ids = [wid for wid, w in self._world.workers.items() if not w.alive]
        for wid in dead_ids:
            removed = self._world.remove_worker(wid)
            if removed:
                logger.info("Tick %d: %s expired.", self._world.tick, removed.name)
                self._emit("death", f"{removed.name} expired", entity_ids=(wid,))

        live_names = self._world.worker_names()
        for name in [n for n in self._world.memory if n not in live_names]:
            del self._world.memory[name]
            logger.debug("Clearing non-existing worker memory: %s", name)

    def _tick_resource_nodes(self) -> None:
        for node in self._world.resource_nodes.values():
            node.tick_regeneration()

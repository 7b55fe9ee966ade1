"""WorkerActions — the concrete action interface bound to one room."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colony.actions.base import ActionProposal, RouteHook, RouteStyle, Target
from colony.actions.work import BuildAction, GatherAction, ImproveAction, TransferAction, WorkAction
from colony.ai.pathfinding import Pathfinder, has_free_tile_within
from colony.core.enums import ActionResult, ActionType

if TYPE_CHECKING:
    from colony.config import SimulationConfig
    from colony.core.models import Worker
    from colony.core.world_state import WorldState
    from colony.engine.action_queue import ActionQueue

logger = logging.getLogger(__name__)


class WorkerActions:
    """Checks action calls against the world and queues the accepted ones.

    A worker gets at most one queued intent per tick; any further call in
    the same tick returns ``BUSY``.
    """

    __slots__ = ("_world", "_queue", "_route_hook", "_work", "_pathfinder")

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldState,
        queue: ActionQueue,
        route_hook: RouteHook | None = None,
    ) -> None:
        self._world = world
        self._queue = queue
        self._route_hook = route_hook
        self._work: dict[ActionType, WorkAction] = {
            action.verb: action
            for action in (GatherAction(config), TransferAction(config),
                           ImproveAction(config), BuildAction(config))
        }
        self._pathfinder = Pathfinder(world, config.path_max_nodes)

    def _perform(self, verb: ActionType, worker: Worker, target: Target) -> ActionResult:
        if self._queue.has_intent(worker.id):
            return ActionResult.BUSY
        result = self._work[verb].check(worker, target, self._world)
        if result == ActionResult.OK:
            self._queue.push(ActionProposal(
                actor_id=worker.id, verb=verb, target_id=target.id,
                target_pos=target.pos, reason=verb.name.lower()))
        return result

    def gather(self, worker: Worker, target: Target) -> ActionResult:
        return self._perform(ActionType.GATHER, worker, target)

    def transfer(self, worker: Worker, target: Target) -> ActionResult:
        return self._perform(ActionType.TRANSFER, worker, target)

    def improve(self, worker: Worker, target: Target) -> ActionResult:
        return self._perform(ActionType.IMPROVE, worker, target)

    def build(self, worker: Worker, target: Target) -> ActionResult:
        return self._perform(ActionType.BUILD, worker, target)

    def move_toward(
        self,
        worker: Worker,
        target: Target,
        annotation: RouteStyle | None = None,
    ) -> ActionResult:
        if self._queue.has_intent(worker.id):
            return ActionResult.BUSY
        within = self._approach_range(target)
        occupied = self._world.occupied_positions()
        occupied.discard((worker.pos.x, worker.pos.y))
        dest = None
        if has_free_tile_within(self._world, target.pos, within, occupied):
            dest = self._pathfinder.next_step(worker.pos, target.pos, within, occupied)
        if dest is None:
            logger.debug("Worker %s has no step toward %s", worker.name, target.pos)
            return ActionResult.NO_PATH
        if annotation is not None and self._route_hook is not None:
            self._route_hook(worker, target, annotation)
        self._queue.push(ActionProposal(
            actor_id=worker.id, verb=ActionType.MOVE, target_id=target.id,
            target_pos=dest, reason=annotation.text if annotation else "move"))
        return ActionResult.OK

    def _approach_range(self, target: Target) -> int:
        """Interaction range of whichever action *target* belongs to."""
        for action in self._work.values():
            if action.lookup(target.id, self._world) is target:
                return action.interaction_range
        return 1

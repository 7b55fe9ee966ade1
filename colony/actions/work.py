"""Work actions — gather, transfer, improve, build.

Each action is checked twice:
  1. ``check`` at call time, from inside a state machine, returning an
     ActionResult (the machine reacts to NOT_IN_RANGE by moving).
  2. ``apply`` at resolution time, against the then-current world.  A
     target drained or removed by an earlier intent in the same tick
     makes ``apply`` return 0 and the intent is dropped.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from colony.core.enums import ActionResult, ActionType

if TYPE_CHECKING:
    from colony.actions.base import ActionProposal, Target
    from colony.config import SimulationConfig
    from colony.core.models import Worker
    from colony.core.world_state import WorldState

logger = logging.getLogger(__name__)


class WorkAction(ABC):
    """Shared checks for actions that consume or produce energy on a target."""

    verb: ActionType
    range_attr: str

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config

    @property
    def interaction_range(self) -> int:
        return getattr(self._config, self.range_attr)

    @abstractmethod
    def lookup(self, target_id: int | None, world: WorldState):
        """The live target with this id, or None."""

    def _precheck(self, worker: Worker, target: Target, world: WorldState) -> ActionResult | None:
        """Checks specific to the action, run before the range check."""
        return None

    def check(self, worker: Worker, target: Target, world: WorldState) -> ActionResult:
        if target is None or self.lookup(getattr(target, "id", None), world) is not target:
            return ActionResult.INVALID_TARGET
        failure = self._precheck(worker, target, world)
        if failure is not None:
            return failure
        if worker.pos.manhattan(target.pos) > self.interaction_range:
            return ActionResult.NOT_IN_RANGE
        return ActionResult.OK

    @abstractmethod
    def apply(self, proposal: ActionProposal, world: WorldState) -> int:
        """Perform the intent; returns the amount moved, 0 if nothing happened."""


class GatherAction(WorkAction):
    """Harvest energy from a resource node into the worker's store."""

    verb = ActionType.GATHER
    range_attr = "gather_range"

    def lookup(self, target_id, world):
        return world.resource_nodes.get(target_id)

    def _precheck(self, worker, target, world):
        if not target.is_available:
            return ActionResult.NOT_ENOUGH_RESOURCES
        if not worker.store.has_free_capacity:
            return ActionResult.FULL
        return None

    def apply(self, proposal, world):
        worker = world.workers.get(proposal.actor_id)
        node = self.lookup(proposal.target_id, world)
        if worker is None or node is None:
            return 0
        if worker.pos.manhattan(node.pos) > self.interaction_range:
            return 0
        amount = min(worker.body.work * self._config.harvest_power, worker.store.free_capacity)
        taken = node.harvest(amount)
        worker.store.add(taken)
        return taken


class TransferAction(WorkAction):
    """Deliver carried energy into a facility."""

    verb = ActionType.TRANSFER
    range_attr = "transfer_range"

    def lookup(self, target_id, world):
        return world.facilities.get(target_id)

    def _precheck(self, worker, target, world):
        if not worker.store.has_resources:
            return ActionResult.NOT_ENOUGH_RESOURCES
        if not target.accepts_delivery:
            return ActionResult.FULL
        return None

    def apply(self, proposal, world):
        worker = world.workers.get(proposal.actor_id)
        facility = self.lookup(proposal.target_id, world)
        if worker is None or facility is None:
            return 0
        if worker.pos.manhattan(facility.pos) > self.interaction_range:
            return 0
        moved = facility.store.add(worker.store.used)
        worker.store.remove(moved)
        return moved


class ImproveAction(WorkAction):
    """Spend carried energy upgrading the room controller."""

    verb = ActionType.IMPROVE
    range_attr = "improve_range"

    def lookup(self, target_id, world):
        controller = world.controller
        if controller is None or controller.id != target_id:
            return None
        return controller

    def _precheck(self, worker, target, world):
        if not worker.store.has_resources:
            return ActionResult.NOT_ENOUGH_RESOURCES
        return None

    def apply(self, proposal, world):
        worker = world.workers.get(proposal.actor_id)
        controller = self.lookup(proposal.target_id, world)
        if worker is None or controller is None:
            return 0
        if worker.pos.manhattan(controller.pos) > self.interaction_range:
            return 0
        spent = worker.store.remove(worker.body.work * self._config.upgrade_power)
        if spent:
            gained = controller.upgrade(spent)
            if gained:
                logger.info("Controller reached level %d", controller.level)
        return spent


class BuildAction(WorkAction):
    """Spend carried energy on a construction site."""

    verb = ActionType.BUILD
    range_attr = "build_range"

    def lookup(self, target_id, world):
        return world.construction_sites.get(target_id)

    def _precheck(self, worker, target, world):
        if not worker.store.has_resources:
            return ActionResult.NOT_ENOUGH_RESOURCES
        return None

    def apply(self, proposal, world):
        worker = world.workers.get(proposal.actor_id)
        site = self.lookup(proposal.target_id, world)
        if worker is None or site is None:
            return 0
        if worker.pos.manhattan(site.pos) > self.interaction_range:
            return 0
        budget = min(worker.body.work * self._config.build_power, worker.store.used)
        used = site.add_progress(budget)
        worker.store.remove(used)
        return used

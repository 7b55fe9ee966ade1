"""MoveAction — resolve-time checks for one-tile MOVE intents.

The step itself is chosen by the Pathfinder when the intent is queued;
collisions between workers are settled here, in queue order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colony.core.enums import ActionType

if TYPE_CHECKING:
    from colony.actions.base import ActionProposal
    from colony.core.world_state import WorldState

logger = logging.getLogger(__name__)


class MoveAction:
    """Stateless handler for MOVE intents."""

    @staticmethod
    def validate(proposal: ActionProposal, world: WorldState, occupied: set[tuple[int, int]]) -> bool:
        if proposal.verb != ActionType.MOVE or proposal.target_pos is None:
            return False

        worker = world.workers.get(proposal.actor_id)
        if worker is None or not worker.alive:
            return False

        dest = proposal.target_pos
        if dest.manhattan(worker.pos) != 1:
            return False

        if not world.is_standable(dest):
            logger.debug("Worker %d blocked by terrain at %s", proposal.actor_id, dest)
            return False

        if (dest.x, dest.y) in occupied:
            logger.debug("Worker %d blocked by occupant at %s", proposal.actor_id, dest)
            return False

        return True

    @staticmethod
    def apply(proposal: ActionProposal, world: WorldState) -> None:
        world.move_worker(proposal.actor_id, proposal.target_pos)

"""WorkerBrain — dispatches each worker to the state machine for its role.

Stateless apart from the machine registry: every call builds a fresh
WorkerContext from the room queries, action interface and tick it is
given, so the same brain can drive any number of rooms or synthetic
test worlds.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

from colony.ai.states import MACHINES, WorkerContext, WorkerMachine
from colony.core.enums import WorkerRole

if TYPE_CHECKING:
    from colony.actions.base import ActionInterface
    from colony.ai.perception import WorldQuery
    from colony.core.models import Worker
    from colony.utils.event_log import SimEvent

logger = logging.getLogger(__name__)


class WorkerBrain:
    """Runs the machine registered for a worker's persisted role."""

    __slots__ = ("_machines",)

    def __init__(self, machines: Mapping[WorkerRole, WorkerMachine] | None = None) -> None:
        self._machines = dict(machines) if machines is not None else dict(MACHINES)

    def machine_for(self, role: WorkerRole) -> WorkerMachine | None:
        return self._machines.get(role)

    def decide(
        self,
        worker: Worker,
        query: WorldQuery,
        actions: ActionInterface,
        tick: int,
    ) -> list[SimEvent]:
        """Run one decision for *worker*.  Returns the announcements it made."""
        machine = self.machine_for(worker.memory.role)
        if machine is None:
            logger.warning("Worker %s has unknown role %r — skipping", worker.name, worker.memory.role)
            return []
        ctx = WorkerContext(worker=worker, query=query, actions=actions, tick=tick)
        machine.run(ctx)
        return ctx.events

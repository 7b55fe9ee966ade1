"""Stand-ins for the world query and action interfaces.

The state machines only talk to a WorldQuery and an ActionInterface, so
most behaviour can be checked against these without building a room.
"""

from __future__ import annotations

import sys
import os
from dataclasses import dataclass, field

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from colony.ai.states import WorkerContext
from colony.core.enums import ActionResult
from colony.core.models import Vector2


@dataclass(frozen=True)
class Spot:
    """Minimal target: an id and a position."""

    id: int
    pos: Vector2

    @classmethod
    def at(cls, tid: int, x: int, y: int) -> Spot:
        return cls(tid, Vector2(x, y))


@dataclass
class FakeQuery:
    """WorldQuery returning fixed answers, in the order given."""

    nodes: list = field(default_factory=list)
    deliveries: list = field(default_factory=list)
    tasks: list = field(default_factory=list)
    objective: object | None = None

    def nearest_resource_node(self, worker):
        best = None
        for node in self.nodes:
            if best is None or worker.pos.manhattan(node.pos) < worker.pos.manhattan(best.pos):
                best = node
        return best

    def delivery_targets(self, worker):
        return list(self.deliveries)

    def construction_tasks(self, worker):
        return list(self.tasks)

    def improvement_objective(self, worker):
        return self.objective


class RecordingActions:
    """ActionInterface that records every call and answers from a table."""

    def __init__(self, **results: ActionResult) -> None:
        self.results = results
        self.calls: list[tuple[str, object]] = []
        self.moves: list[tuple[object, object]] = []

    def _record(self, verb: str, target) -> ActionResult:
        self.calls.append((verb, target))
        return self.results.get(verb, ActionResult.OK)

    def gather(self, worker, target):
        return self._record("gather", target)

    def transfer(self, worker, target):
        return self._record("transfer", target)

    def improve(self, worker, target):
        return self._record("improve", target)

    def build(self, worker, target):
        return self._record("build", target)

    def move_toward(self, worker, target, annotation=None):
        self.moves.append((target, annotation))
        return ActionResult.OK

    @property
    def verbs(self) -> list[str]:
        return [verb for verb, _ in self.calls]


def context(worker, query: FakeQuery | None = None, actions: RecordingActions | None = None,
            tick: int = 0) -> WorkerContext:
    return WorkerContext(
        worker=worker,
        query=query if query is not None else FakeQuery(),
        actions=actions if actions is not None else RecordingActions(),
        tick=tick,
    )

"""Action proposals and the action interface the state machines call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol

from colony.core.enums import ActionResult, ActionType

if TYPE_CHECKING:
    from colony.core.models import Vector2, Worker


@dataclass(frozen=True, slots=True)
class ActionProposal:
    """An intent queued by a worker during the decision phase.

    The resolver re-validates and applies (or rejects) each proposal
    once every worker has decided.
    """

    actor_id: int
    verb: ActionType
    target_id: int | None = None
    target_pos: Vector2 | None = None
    reason: str = ""

    def __repr__(self) -> str:
        return (f"Proposal(worker={self.actor_id}, {self.verb.name}, "
                f"target={self.target_id}@{self.target_pos}, reason={self.reason!r})")


@dataclass(frozen=True, slots=True)
class RouteStyle:
    """Debug annotation attached to a move: announcement text and path colour."""

    text: str
    colour: str


class Target(Protocol):
    """Anything a worker can move to and act on."""

    id: int
    pos: Vector2


RouteHook = Callable[["Worker", Target, RouteStyle], None]


class ActionInterface(Protocol):
    """World-affecting calls available to a state machine.

    Every call is checked immediately and returns an ActionResult; only
    an ``OK`` result queues an intent.
    """

    def gather(self, worker: Worker, target: Target) -> ActionResult: ...

    def transfer(self, worker: Worker, target: Target) -> ActionResult: ...

    def improve(self, worker: Worker, target: Target) -> ActionResult: ...

    def build(self, worker: Worker, target: Target) -> ActionResult: ...

    def move_toward(self, worker: Worker, target: Target,
                    annotation: RouteStyle | None = None) -> ActionResult: ...

"""Intent buffer connecting the state machines to the resolver."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from colony.actions.base import ActionProposal


class ActionQueue:
    """Ordered, one-intent-per-worker buffer for ActionProposals.

    Workers push intents during the decision phase; the WorldLoop drains
    them once per tick in push order.
    """

    __slots__ = ("_pending", "_actors")

    def __init__(self) -> None:
        self._pending: list[ActionProposal] = []
        self._actors: set[int] = set()

    def has_intent(self, actor_id: int) -> bool:
        return actor_id in self._actors

    def push(self, proposal: ActionProposal) -> bool:
        """Enqueue *proposal*; refuse a second intent from the same worker."""
        if proposal.actor_id in self._actors:
            return False
        self._actors.add(proposal.actor_id)
        self._pending.append(proposal)
        return True

    def drain(self) -> list[ActionProposal]:
        """Return all pending intents and reset for the next tick."""
        proposals = self._pending
        self._pending = []
        self._actors = set()
        return proposals

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def empty(self) -> bool:
        return not self._pending

"""Worker state machines — generic harvester and specialised builder.

Architecture:
  - WorkerContext bundles everything a machine needs for one decision:
    the worker, the world queries, the action interface and the tick.
    The room is reached only through those, never through globals.
  - Each machine is a class implementing ``run(ctx)``.  One call makes
    at most one world-affecting action and may rewrite the persisted
    state; a transition never acts in the same call.
  - Machines are registered in MACHINES by WorkerRole.
  - BuilderMachine composes with HarvesterMachine by reference: its
    ``pre_step`` handles the builder's own states and reports whether it
    intercepted the tick; otherwise the harvester machine runs as well.

Harvester:
  SPAWNING   → GATHERING
  GATHERING  → (gather) | DELIVERING (full, delivery target) | IMPROVING (full)
  DELIVERING → (deliver) | GATHERING (no target, free capacity) | IMPROVING
  IMPROVING  → DELIVERING (delivery target) | GATHERING (free capacity) | (improve)

Builder (pre-step, then harvester unless intercepted):
  SPAWNING     → GATHERING, harvester gathers in the same call
  CONSTRUCTING → (build, intercept) | GATHERING (no energy or no task)
  other        → CONSTRUCTING once full; the harvester has no CONSTRUCTING
                 branch so building starts on the next tick
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from colony.actions.base import RouteStyle
from colony.core.enums import ROLE_STATES, ActionResult, WorkerRole, WorkerState
from colony.utils.event_log import SimEvent

if TYPE_CHECKING:
    from colony.actions.base import ActionInterface, Target
    from colony.ai.perception import WorldQuery
    from colony.core.models import Worker

logger = logging.getLogger(__name__)


# =====================================================================
# Context passed to every machine
# =====================================================================

@dataclass(slots=True)
class WorkerContext:
    """All data a state machine might need for one worker on one tick."""

    worker: Worker
    query: WorldQuery
    actions: ActionInterface
    tick: int
    events: list[SimEvent] = field(default_factory=list)

    def say(self, text: str) -> None:
        """Announce a decision (shown in the event feed, no world effect)."""
        self.events.append(SimEvent(
            tick=self.tick,
            category="transition",
            message=f"{self.worker.name}: {text}",
            entity_ids=(self.worker.id,),
        ))


# =====================================================================
# Shared helpers
# =====================================================================

def persisted_state(worker: Worker) -> WorkerState | None:
    """The worker's stored state if it belongs to its role's state set, else None."""
    raw = worker.memory.state
    if raw is None:
        return None
    try:
        state = WorkerState(raw)
    except (ValueError, TypeError):
        return None
    allowed = ROLE_STATES.get(worker.memory.role, ROLE_STATES[WorkerRole.HARVESTER])
    return state if state in allowed else None


def state_name(worker: Worker) -> str:
    """Display name of the worker's state; anything not yet valid reads as SPAWNING."""
    state = persisted_state(worker)
    return (state if state is not None else WorkerState.SPAWNING).name


def load_state(worker: Worker) -> WorkerState:
    """Validated persisted state for *worker*.

    Absent or unrecognised values (including states outside the worker's
    role) become SPAWNING, and the normalised value is written back.
    """
    state = persisted_state(worker)
    if state is None:
        if worker.memory.state is not None:
            logger.warning("Worker %s has unrecognised state %r → SPAWNING", worker.name, worker.memory.state)
        state = WorkerState.SPAWNING
    if worker.memory.state != state:
        worker.memory.state = int(state)
    return state


def set_state(ctx: WorkerContext, state: WorkerState, style: RouteStyle) -> None:
    """Record a transition; it takes effect from the next evaluation."""
    worker = ctx.worker
    previous = worker.memory.state
    worker.memory.state = int(state)
    ctx.say(style.text)
    logger.debug("Worker %s: %s → %s", worker.name,
                 WorkerState(previous).name if previous is not None else "NONE", state.name)


def act_or_approach(
    ctx: WorkerContext,
    action: Callable[[Worker, Target], ActionResult],
    target: Target,
    style: RouteStyle,
) -> ActionResult:
    """Try *action* on *target*; walk toward it when out of range.

    Any other failure is a no-op for this tick.
    """
    result = action(ctx.worker, target)
    if result == ActionResult.NOT_IN_RANGE:
        ctx.actions.move_toward(ctx.worker, target, style)
    elif result != ActionResult.OK:
        logger.debug("Worker %s: %s on %s rejected (%s)", ctx.worker.name,
                     getattr(action, "__name__", "action"), target.pos, result.name)
    return result


def has_free_capacity(worker: Worker) -> bool:
    return worker.store.has_free_capacity


def has_no_capacity(worker: Worker) -> bool:
    return not worker.store.has_free_capacity


def has_resources(worker: Worker) -> bool:
    return worker.store.has_resources


# =====================================================================
# Base machine
# =====================================================================

class WorkerMachine(ABC):
    """Abstract base for worker state machines."""

    role: WorkerRole

    @abstractmethod
    def run(self, ctx: WorkerContext) -> None:
        ...


# =====================================================================
# Generic resource worker
# =====================================================================

class HarvesterMachine(WorkerMachine):
    """Gather > deliver > improve."""

    role = WorkerRole.HARVESTER

    HARVEST = RouteStyle("🔄 harvest", "#aaff00")
    DEPOSIT = RouteStyle("🔄 deposit", "#ffffff")
    UPGRADE = RouteStyle("🚧 upgrade", "#ffaa00")

    def run(self, ctx: WorkerContext) -> None:
        match load_state(ctx.worker):
            case WorkerState.SPAWNING:
                # Spawned workers start out harvesting
                self.to_gathering(ctx)

            case WorkerState.GATHERING:
                if self.should_gather(ctx):
                    self.gather(ctx)
                elif self.should_deliver(ctx):
                    self.to_delivering(ctx)
                else:
                    self.to_improving(ctx)

            case WorkerState.DELIVERING:
                # Targets are re-checked by existence only, not capacity
                if self.should_deliver(ctx):
                    self.deliver(ctx)
                elif self.should_gather(ctx):
                    self.to_gathering(ctx)
                else:
                    self.to_improving(ctx)

            case WorkerState.IMPROVING:
                # Upgrade only when nothing can be delivered or gathered
                if self.should_deliver(ctx):
                    self.to_delivering(ctx)
                elif self.should_gather(ctx):
                    self.to_gathering(ctx)
                else:
                    self.improve(ctx)

            case _:
                # Builder-only states have no harvester branch
                pass

    # -- transitions --

    def to_gathering(self, ctx: WorkerContext) -> None:
        set_state(ctx, WorkerState.GATHERING, self.HARVEST)

    def to_delivering(self, ctx: WorkerContext) -> None:
        set_state(ctx, WorkerState.DELIVERING, self.DEPOSIT)

    def to_improving(self, ctx: WorkerContext) -> None:
        set_state(ctx, WorkerState.IMPROVING, self.UPGRADE)

    # -- checks --

    def should_gather(self, ctx: WorkerContext) -> bool:
        return has_free_capacity(ctx.worker)

    def should_deliver(self, ctx: WorkerContext) -> bool:
        return len(ctx.query.delivery_targets(ctx.worker)) > 0

    # -- actions --

    def gather(self, ctx: WorkerContext) -> None:
        node = ctx.query.nearest_resource_node(ctx.worker)
        if node is not None:
            act_or_approach(ctx, ctx.actions.gather, node, self.HARVEST)

    def deliver(self, ctx: WorkerContext) -> None:
        targets = ctx.query.delivery_targets(ctx.worker)
        if targets:
            act_or_approach(ctx, ctx.actions.transfer, targets[0], self.DEPOSIT)

    def improve(self, ctx: WorkerContext) -> None:
        objective = ctx.query.improvement_objective(ctx.worker)
        if objective is not None:
            act_or_approach(ctx, ctx.actions.improve, objective, self.UPGRADE)


# =====================================================================
# Builder
# =====================================================================

class BuilderMachine(WorkerMachine):
    """Construct (once full) > gather > deliver > improve."""

    role = WorkerRole.BUILDER

    BUILD = RouteStyle("🔨 build", "#aa9900")

    def __init__(self, generic: HarvesterMachine | None = None) -> None:
        self._generic = generic or HarvesterMachine()

    @property
    def generic(self) -> HarvesterMachine:
        return self._generic

    def run(self, ctx: WorkerContext) -> None:
        if self.pre_step(ctx):
            return
        self._generic.run(ctx)

    def pre_step(self, ctx: WorkerContext) -> bool:
        """Handle builder states.  Returns True when the tick was intercepted."""
        match load_state(ctx.worker):
            case WorkerState.SPAWNING:
                # Builders need energy before anything else
                self._generic.to_gathering(ctx)
                return False

            case WorkerState.CONSTRUCTING:
                if self.should_construct(ctx):
                    self.construct(ctx)
                    return True
                self._generic.to_gathering(ctx)
                return False

            case _:
                if self.should_start_constructing(ctx):
                    self.to_constructing(ctx)
                return False

    # -- transitions --

    def to_constructing(self, ctx: WorkerContext) -> None:
        set_state(ctx, WorkerState.CONSTRUCTING, self.BUILD)

    # -- checks --

    def should_construct(self, ctx: WorkerContext) -> bool:
        """Keep building while there is energy and something to build."""
        return has_resources(ctx.worker) and len(ctx.query.construction_tasks(ctx.worker)) > 0

    def should_start_constructing(self, ctx: WorkerContext) -> bool:
        """Only start building with a full store."""
        return has_no_capacity(ctx.worker)

    # -- actions --

    def construct(self, ctx: WorkerContext) -> None:
        tasks = ctx.query.construction_tasks(ctx.worker)
        if tasks:
            act_or_approach(ctx, ctx.actions.build, tasks[0], self.BUILD)


# =====================================================================
# Machine registry
# =====================================================================

_HARVESTER = HarvesterMachine()

MACHINES: dict[WorkerRole, WorkerMachine] = {
    WorkerRole.HARVESTER: _HARVESTER,
    WorkerRole.BUILDER: BuilderMachine(_HARVESTER),
}

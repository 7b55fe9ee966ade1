"""Tests for the builder state machine layered on the harvester machine.

Covers:
- SPAWNING transitions and gathers in the same call
- CONSTRUCTING entered only when full, with a one-tick delay
- CONSTRUCTING intercepts the generic machine while it can build
- Leaving CONSTRUCTING when out of energy or out of tasks
- pre_step return value (intercept flag)
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from colony.ai.states import MACHINES, BuilderMachine, HarvesterMachine
from colony.core.enums import ActionResult, WorkerRole, WorkerState
from tests.helpers.colony_room import make_worker
from tests.helpers.fakes import FakeQuery, RecordingActions, Spot, context


def _builder(state=None, energy=0, capacity=50, pos=(5, 5)):
    return make_worker(7, "Builder_0", pos=pos, role=WorkerRole.BUILDER,
                       state=None if state is None else int(state),
                       energy=energy, capacity=capacity)


def _run(worker, query=None, actions=None):
    ctx = context(worker, query, actions)
    BuilderMachine().run(ctx)
    return ctx


class TestRegistry:

    def test_builder_wraps_shared_harvester(self):
        builder = MACHINES[WorkerRole.BUILDER]
        assert isinstance(builder, BuilderMachine)
        assert builder.generic is MACHINES[WorkerRole.HARVESTER]

    def test_default_generic_machine(self):
        assert isinstance(BuilderMachine().generic, HarvesterMachine)


class TestSpawning:

    def test_spawning_gathers_in_the_same_call(self):
        w = _builder(state=None)
        node = Spot.at(10, 6, 5)
        actions = RecordingActions()
        ctx = _run(w, FakeQuery(nodes=[node]), actions)

        assert w.memory.state == WorkerState.GATHERING
        assert actions.calls == [("gather", node)]
        assert [e.message for e in ctx.events] == ["Builder_0: 🔄 harvest"]

    def test_pre_step_does_not_intercept_spawning(self):
        w = _builder(state=None)
        assert BuilderMachine().pre_step(context(w)) is False


class TestEnteringConstruction:

    def test_full_builder_enters_constructing_without_acting(self):
        """Full, no deliveries, a task: CONSTRUCTING now, build on the next tick."""
        w = _builder(state=WorkerState.GATHERING, energy=50)
        site = Spot.at(40, 8, 5)
        actions = RecordingActions()
        ctx = _run(w, FakeQuery(tasks=[site]), actions)

        assert w.memory.state == WorkerState.CONSTRUCTING
        assert actions.calls == []
        assert [e.message for e in ctx.events] == ["Builder_0: 🔨 build"]

    def test_builds_on_first_task_next_tick(self):
        w = _builder(state=WorkerState.GATHERING, energy=50)
        far, near = Spot.at(40, 15, 5), Spot.at(41, 7, 5)
        query = FakeQuery(tasks=[far, near])

        _run(w, query, RecordingActions())
        assert w.memory.state == WorkerState.CONSTRUCTING

        actions = RecordingActions()
        _run(w, query, actions)
        assert actions.calls == [("build", far)]
        assert w.memory.state == WorkerState.CONSTRUCTING

    def test_full_builder_prefers_constructing_over_delivering(self):
        w = _builder(state=WorkerState.GATHERING, energy=50)
        actions = RecordingActions()
        _run(w, FakeQuery(deliveries=[Spot.at(20, 6, 5)], tasks=[Spot.at(40, 8, 5)]), actions)

        assert w.memory.state == WorkerState.CONSTRUCTING
        assert actions.calls == []

    def test_partially_filled_builder_keeps_gathering(self):
        w = _builder(state=WorkerState.GATHERING, energy=20)
        node = Spot.at(10, 6, 5)
        actions = RecordingActions()
        _run(w, FakeQuery(nodes=[node], tasks=[Spot.at(40, 8, 5)]), actions)

        assert w.memory.state == WorkerState.GATHERING
        assert actions.calls == [("gather", node)]

    def test_not_full_never_enters_constructing(self):
        for state in (WorkerState.GATHERING, WorkerState.DELIVERING, WorkerState.IMPROVING):
            w = _builder(state=state, energy=49)
            _run(w, FakeQuery(tasks=[Spot.at(40, 8, 5)], objective=Spot.at(30, 1, 1)))
            assert w.memory.state != WorkerState.CONSTRUCTING

    def test_full_builder_in_delivering_also_switches(self):
        w = _builder(state=WorkerState.DELIVERING, energy=50)
        actions = RecordingActions()
        _run(w, FakeQuery(deliveries=[Spot.at(20, 6, 5)]), actions)

        assert w.memory.state == WorkerState.CONSTRUCTING
        assert actions.calls == []

    def test_pre_step_never_intercepts_the_switch(self):
        w = _builder(state=WorkerState.IMPROVING, energy=50)
        assert BuilderMachine().pre_step(context(w)) is False
        assert w.memory.state == WorkerState.CONSTRUCTING


class TestConstructing:

    def test_builds_and_intercepts_generic_machine(self):
        w = _builder(state=WorkerState.CONSTRUCTING, energy=30)
        site = Spot.at(40, 8, 5)
        actions = RecordingActions()
        _run(w, FakeQuery(nodes=[Spot.at(10, 6, 5)], deliveries=[Spot.at(20, 4, 5)], tasks=[site]), actions)

        assert actions.calls == [("build", site)]
        assert w.memory.state == WorkerState.CONSTRUCTING

    def test_pre_step_reports_intercept(self):
        w = _builder(state=WorkerState.CONSTRUCTING, energy=30)
        ctx = context(w, FakeQuery(tasks=[Spot.at(40, 8, 5)]))
        assert BuilderMachine().pre_step(ctx) is True

    def test_out_of_range_moves_with_build_annotation(self):
        w = _builder(state=WorkerState.CONSTRUCTING, energy=30, pos=(1, 1))
        site = Spot.at(40, 15, 9)
        actions = RecordingActions(build=ActionResult.NOT_IN_RANGE)
        _run(w, FakeQuery(tasks=[site]), actions)

        assert actions.verbs == ["build"]
        assert actions.moves == [(site, BuilderMachine.BUILD)]

    def test_out_of_energy_returns_to_gathering_and_gathers(self):
        w = _builder(state=WorkerState.CONSTRUCTING, energy=0)
        node = Spot.at(10, 6, 5)
        actions = RecordingActions()
        ctx = _run(w, FakeQuery(nodes=[node], tasks=[Spot.at(40, 8, 5)]), actions)

        assert w.memory.state == WorkerState.GATHERING
        assert actions.calls == [("gather", node)]
        assert [e.message for e in ctx.events] == ["Builder_0: 🔄 harvest"]

    def test_no_tasks_returns_to_gathering_then_generic_rules(self):
        """Full with nothing to build: back to GATHERING, which hands off to delivery."""
        w = _builder(state=WorkerState.CONSTRUCTING, energy=50)
        actions = RecordingActions()
        _run(w, FakeQuery(deliveries=[Spot.at(20, 6, 5)], tasks=[]), actions)

        assert w.memory.state == WorkerState.DELIVERING
        assert actions.calls == []

    def test_no_tasks_partial_energy_gathers(self):
        w = _builder(state=WorkerState.CONSTRUCTING, energy=10)
        node = Spot.at(10, 6, 5)
        actions = RecordingActions()
        _run(w, FakeQuery(nodes=[node], tasks=[]), actions)

        assert w.memory.state == WorkerState.GATHERING
        assert actions.calls == [("gather", node)]

    def test_build_failure_is_silent(self):
        w = _builder(state=WorkerState.CONSTRUCTING, energy=30)
        actions = RecordingActions(build=ActionResult.INVALID_TARGET)
        _run(w, FakeQuery(tasks=[Spot.at(40, 8, 5)]), actions)

        assert actions.verbs == ["build"]
        assert actions.moves == []
        assert w.memory.state == WorkerState.CONSTRUCTING

"""E2E tests for the WorldLoop — decisions, resolution and cleanup together.

Covers:
- A harvester's full gather → deliver → gather cycle
- The builder's one-tick delay entering CONSTRUCTING
- Worker expiry and memory reclamation
- One failing worker does not stop the others
- Population quotas and spawn naming
- Stats, event log and replay recording
"""

import json
import logging
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from colony.ai.brain import WorkerBrain
from colony.ai.states import BuilderMachine, WorkerMachine
from colony.core.enums import ActionType, WorkerRole, WorkerState
from colony.core.models import Vector2, WorkerMemory
from colony.engine.resolver import IntentResolver
from colony.engine.world_loop import WorldLoop
from colony.utils.event_log import EventLog
from colony.utils.replay import ReplayRecorder
from tests.helpers.colony_room import ColonyRoom


class TestHarvesterCycle:
    """Source at (3,5), spawn at (8,5), harvester starting next to the source."""

    def _room(self):
        room = ColonyRoom()
        room.add_source(1, (3, 5))
        room.add_spawn(10, (8, 5), energy=0)
        room.add_worker(100, "Harvester_0", pos=(4, 5))
        return room

    def test_first_tick_only_initialises(self):
        room = self._room()
        room.run_ticks(1)
        assert room.state_of(100) == WorkerState.GATHERING
        assert room.worker(100).store.used == 0
        assert room.loop.last_applied == []

    def test_gathers_until_full(self):
        room = self._room()
        room.run_ticks(26)
        assert room.worker(100).store.is_full
        assert room.state_of(100) == WorkerState.GATHERING

    def test_full_worker_switches_without_acting(self):
        room = self._room()
        room.run_ticks(26)
        room.run_ticks(1)
        assert room.state_of(100) == WorkerState.DELIVERING
        assert room.loop.last_applied == []
        assert room.worker(100).pos == Vector2(4, 5)

    def test_walks_to_spawn_and_delivers(self):
        room = self._room()
        room.run_ticks(31)
        assert room.facility(10).store.used == 50
        assert room.worker(100).store.used == 0
        assert room.worker(100).pos == Vector2(7, 5)

    def test_empty_worker_returns_to_gathering(self):
        room = self._room()
        room.run_ticks(32)
        assert room.state_of(100) == WorkerState.GATHERING

    def test_second_load_arrives(self):
        room = self._room()
        room.run_ticks(80)
        assert room.facility(10).store.used == 100

    def test_transition_announcements_are_emitted(self):
        room = self._room()
        events = room.run_ticks(32)
        messages = [e.message for e in events if e.category == "transition"]
        assert messages == [
            "Harvester_0: 🔄 harvest",
            "Harvester_0: 🔄 deposit",
            "Harvester_0: 🔄 harvest",
        ]

    def test_route_hook_sees_annotated_moves(self):
        room = self._room()
        room.run_ticks(31)
        assert room.route_calls == [("Harvester_0", (8, 5), "🔄 deposit")] * 3


class TestImprovingFallback:

    def test_full_harvester_with_no_delivery_upgrades_controller(self):
        room = ColonyRoom()
        room.add_spawn(10, (8, 5), energy=300, capacity=300)
        controller = room.set_controller(30, (5, 8))
        room.add_worker(100, "Harvester_0", pos=(5, 5), energy=50, state=int(WorkerState.GATHERING))

        room.run_ticks(1)
        assert room.state_of(100) == WorkerState.IMPROVING
        room.run_ticks(1)
        assert controller.progress == 1
        assert room.worker(100).store.used == 49

    def test_free_capacity_after_upgrading_returns_to_gathering(self):
        room = ColonyRoom()
        room.add_spawn(10, (8, 5), energy=300, capacity=300)
        room.set_controller(30, (5, 8))
        room.add_worker(100, "Harvester_0", pos=(5, 5), energy=50, state=int(WorkerState.IMPROVING))

        room.run_ticks(2)
        assert room.state_of(100) == WorkerState.GATHERING


class TestBuilderDelay:

    def test_constructing_starts_one_tick_after_switch(self):
        room = ColonyRoom()
        site = room.add_site(20, (5, 7))
        room.add_worker(100, "Builder_0", pos=(5, 5), role=WorkerRole.BUILDER,
                        state=int(WorkerState.GATHERING), energy=50)

        room.run_ticks(1)
        assert room.state_of(100) == WorkerState.CONSTRUCTING
        assert site.progress == 0

        room.run_ticks(1)
        assert site.progress == 5
        assert room.worker(100).store.used == 45

    def test_builder_builds_until_empty_then_gathers(self):
        room = ColonyRoom()
        room.add_source(1, (2, 5))
        site = room.add_site(20, (5, 7))
        room.add_worker(100, "Builder_0", pos=(5, 5), role=WorkerRole.BUILDER,
                        state=int(WorkerState.CONSTRUCTING), energy=50)

        room.run_ticks(10)
        assert site.progress == 50
        assert room.worker(100).store.used == 0

        room.run_ticks(1)
        assert room.state_of(100) == WorkerState.GATHERING

    def test_finished_site_becomes_extension(self):
        room = ColonyRoom()
        room.add_site(20, (5, 7), total=10)
        room.add_worker(100, "Builder_0", pos=(5, 5), role=WorkerRole.BUILDER,
                        state=int(WorkerState.CONSTRUCTING), energy=50)

        events = room.run_ticks(2)
        assert room.world.construction_sites == {}
        assert any(e.category == "construction" for e in events)
        assert len(room.world.facilities) == 1


class TestCleanup:

    def test_expired_worker_is_removed_with_its_memory(self):
        room = ColonyRoom()
        room.add_worker(100, "Harvester_0", pos=(5, 5), ticks_to_live=1)
        events = room.run_ticks(1)

        assert room.worker(100) is None
        assert "Harvester_0" not in room.world.memory
        assert [e.category for e in events if e.category == "death"] == ["death"]

    def test_orphan_memory_is_reclaimed(self):
        room = ColonyRoom()
        room.add_worker(100, "Harvester_0", pos=(5, 5))
        room.world.memory["Ghost_3"] = WorkerMemory(role=WorkerRole.BUILDER, state=4)

        room.run_ticks(1)
        assert set(room.world.memory) == {"Harvester_0"}

    def test_memory_is_shared_with_worker(self):
        room = ColonyRoom()
        w = room.add_worker(100, "Harvester_0", pos=(5, 5))
        room.run_ticks(1)
        assert room.world.memory["Harvester_0"] is w.memory
        assert room.world.memory["Harvester_0"].state == WorkerState.GATHERING

    def test_source_regenerates(self):
        room = ColonyRoom(source_regen_ticks=5)
        node = room.add_source(1, (3, 5), energy=3000)
        room.add_worker(100, "Harvester_0", pos=(4, 5), state=int(WorkerState.GATHERING))

        room.run_ticks(3)
        assert node.energy < 3000
        assert node.regenerating
        room.run_ticks(2)
        assert node.energy == 3000


class _Exploding(WorkerMachine):
    role = WorkerRole.HARVESTER

    def run(self, ctx):
        raise RuntimeError("boom")


class TestFaultIsolation:

    def test_failing_worker_does_not_stop_others(self, caplog):
        room = ColonyRoom()
        site = room.add_site(20, (5, 7))
        room.add_worker(100, "Harvester_0", pos=(2, 2))
        room.add_worker(101, "Builder_0", pos=(5, 5), role=WorkerRole.BUILDER,
                        state=int(WorkerState.CONSTRUCTING), energy=50)
        brain = WorkerBrain({WorkerRole.HARVESTER: _Exploding(), WorkerRole.BUILDER: BuilderMachine()})
        loop = WorldLoop(room.config, room.world, brain, IntentResolver(room.config))

        with caplog.at_level(logging.ERROR, logger="colony.engine.world_loop"):
            loop.tick_once()

        assert site.progress == 5
        assert room.world.tick == 1
        assert any("Harvester_0" in r.getMessage() for r in caplog.records)

    def test_unknown_role_is_skipped(self):
        room = ColonyRoom()
        room.add_worker(100, "Builder_0", pos=(5, 5), role=WorkerRole.BUILDER)
        brain = WorkerBrain({})
        loop = WorldLoop(room.config, room.world, brain, IntentResolver(room.config))
        assert loop.tick_once()
        assert room.worker(100).memory.state is None


class TestPopulation:

    def test_harvesters_fill_before_builders(self):
        room = ColonyRoom(with_population=True, harvester_quota=2, builder_quota=1)
        room.add_spawn(10, (10, 6), energy=1000, capacity=1000)

        room.run_ticks(3)
        names = sorted(w.name for w in room.world.workers.values())
        assert names == ["Builder_2", "Harvester_0", "Harvester_1"]
        roles = {w.name: w.role for w in room.world.workers.values()}
        assert roles["Builder_2"] == WorkerRole.BUILDER

    def test_spawn_pays_body_cost(self):
        room = ColonyRoom(with_population=True, harvester_quota=1)
        spawn = room.add_spawn(10, (10, 6), energy=300)
        events = room.run_ticks(1)

        assert spawn.store.used == 300 - room.config.worker_body_cost
        assert [e.category for e in events if e.category == "spawn"] == ["spawn"]
        (worker,) = room.world.workers.values()
        assert worker.pos.manhattan(spawn.pos) == 1
        assert room.world.memory[worker.name].role == WorkerRole.HARVESTER

    def test_no_spawn_without_energy(self):
        room = ColonyRoom(with_population=True, harvester_quota=1)
        room.add_spawn(10, (10, 6), energy=room.config.worker_body_cost - 1)
        room.run_ticks(3)
        assert room.world.workers == {}

    def test_quota_is_kept(self):
        room = ColonyRoom(with_population=True, harvester_quota=1)
        room.add_spawn(10, (10, 6), energy=1000, capacity=1000)
        room.run_ticks(5)
        assert len(room.world.workers) == 1


class TestStatsAndRecording:

    def test_stats_count_roles_and_harvest_rate(self):
        room = ColonyRoom()
        room.add_worker(100, "Harvester_0", pos=(2, 2))
        room.add_worker(101, "Harvester_1", pos=(4, 2), work=2)
        room.add_worker(102, "Builder_0", pos=(6, 2), role=WorkerRole.BUILDER)
        room.run_ticks(1)

        stats = room.loop.stats
        assert stats.workers_by_role == {"HARVESTER": 2, "BUILDER": 1}
        assert stats.energy_harvested_per_tick == 6
        assert stats.workers_by_state["GATHERING"] == 3

    def test_stats_report_regeneration_rate(self):
        room = ColonyRoom(source_regen_ticks=10)
        room.add_source(1, (3, 5), energy=3000)
        room.add_worker(100, "Harvester_0", pos=(4, 5), state=int(WorkerState.GATHERING))
        room.run_ticks(1)
        # 2 missing, 9 ticks left after this tick's countdown
        assert abs(room.loop.stats.energy_recovered_per_tick - 2 / 9) < 1e-9

    def test_event_log_receives_tick_events(self):
        room = ColonyRoom()
        room.add_worker(100, "Harvester_0", pos=(2, 2))
        log = EventLog()
        loop = WorldLoop(room.config, room.world, WorkerBrain(), IntentResolver(room.config), event_log=log)
        loop.tick_once()
        assert [e.message for e in log.latest()] == ["Harvester_0: 🔄 harvest"]

    def test_replay_records_each_tick(self, tmp_path):
        room = ColonyRoom(max_ticks=4)
        room.add_source(1, (3, 5))
        room.add_worker(100, "Harvester_0", pos=(4, 5))
        recorder = ReplayRecorder(tmp_path / "replay.json", seed=42)
        loop = WorldLoop(room.config, room.world, WorkerBrain(), IntentResolver(room.config), recorder=recorder)
        loop.run()

        data = json.loads((tmp_path / "replay.json").read_text(encoding="utf-8"))
        assert data["total_ticks"] == 4
        assert data["ticks"][0]["workers"][0]["state"] == "GATHERING"
        assert data["ticks"][1]["actions"][0]["verb"] == ActionType.GATHER.name

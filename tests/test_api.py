"""Tests for the API layer — EngineManager lifecycle and route payloads."""

import sys
import os
import time
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fastapi import FastAPI, HTTPException

from colony.api.app import create_app
from colony.api.dependencies import get_engine_manager, set_engine_manager
from colony.api.engine_manager import EngineManager
from colony.api.routes.config import get_config
from colony.api.routes.control import ControlAction, control
from colony.api.routes.map import get_map, run_length_encode
from colony.api.routes.state import get_state, get_stats
from colony.api.schemas import MapResponse, WorldStateResponse
from colony.config import SimulationConfig
from colony.core.enums import Material


def _build_manager(**overrides):
    cfg = SimulationConfig(**overrides)
    return EngineManager(cfg)


class TestRunLengthEncoding(unittest.TestCase):

    def test_encodes_runs(self):
        self.assertEqual(run_length_encode([1, 1, 0, 0, 0, 1]), [1, 2, 0, 3, 1, 1])

    def test_empty(self):
        self.assertEqual(run_length_encode([]), [])

    def test_map_decodes_to_grid(self):
        mgr = _build_manager()
        resp = get_map(manager=mgr)
        self.assertIsInstance(resp, MapResponse)
        decoded: list[int] = []
        for i in range(0, len(resp.grid), 2):
            decoded.extend([resp.grid[i]] * resp.grid[i + 1])
        self.assertEqual(len(decoded), resp.width * resp.height)
        self.assertEqual(decoded[0], int(Material.WALL))
        self.assertEqual(decoded, [int(t) for t in mgr.get_grid().tiles])


class TestStatePayload(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.mgr = _build_manager(world_seed=3)
        cls.mgr.advance(30)

    def test_state_lists_workers_and_targets(self):
        resp = get_state(since_tick=0, manager=self.mgr)
        self.assertIsInstance(resp, WorldStateResponse)
        self.assertEqual(resp.tick, 30)
        self.assertGreaterEqual(resp.alive_count, 1)
        self.assertEqual(len(resp.resource_nodes), self.mgr.config.num_sources)
        self.assertIsNotNone(resp.controller)
        kinds = {f.kind for f in resp.facilities}
        self.assertIn("SPAWN", kinds)
        for w in resp.workers:
            self.assertIn(w.role, ("HARVESTER", "BUILDER"))
            self.assertIn(w.state, ("SPAWNING", "GATHERING", "DELIVERING", "IMPROVING", "CONSTRUCTING"))

    def test_events_filtered_by_tick(self):
        all_events = get_state(since_tick=0, manager=self.mgr).events
        later = get_state(since_tick=29, manager=self.mgr).events
        self.assertTrue(any(e.category == "spawn" for e in all_events))
        self.assertTrue(all(e.tick >= 29 for e in later))
        self.assertLessEqual(len(later), len(all_events))

    def test_stats_include_room_numbers(self):
        stats = get_stats(manager=self.mgr)
        self.assertEqual(stats.tick, 30)
        self.assertEqual(stats.total_spawned, stats.alive_count + stats.total_deaths)
        self.assertEqual(sum(stats.workers_by_role.values()), stats.alive_count)
        self.assertEqual(stats.memory_records, stats.alive_count)
        self.assertFalse(stats.running)

    def test_config_payload(self):
        cfg = get_config(manager=self.mgr)
        self.assertEqual(cfg.world_seed, 3)
        self.assertEqual(cfg.worker_body_cost, 250)
        self.assertEqual(cfg.harvester_quota, 10)


class TestNoSnapshot(unittest.TestCase):

    def test_state_without_snapshot_is_503(self):
        mgr = _build_manager()
        mgr._published = mgr._published._replace(snapshot=None)
        with self.assertRaises(HTTPException) as ctx:
            get_state(since_tick=0, manager=mgr)
        self.assertEqual(ctx.exception.status_code, 503)

    def test_dependency_requires_manager(self):
        set_engine_manager(None)
        with self.assertRaises(RuntimeError):
            get_engine_manager()


class TestEngineLifecycle(unittest.TestCase):

    def test_reset_rebuilds_at_tick_zero(self):
        mgr = _build_manager()
        mgr.advance(5)
        self.assertEqual(mgr.get_snapshot().tick, 5)
        resp = control(ControlAction.reset, manager=mgr)
        self.assertEqual(resp.status, "ok")
        self.assertEqual(resp.tick, 0)
        self.assertEqual(len(mgr.event_log), 0)

    def test_advance_stops_at_max_ticks(self):
        mgr = _build_manager(max_ticks=3)
        self.assertEqual(mgr.advance(10), 3)
        self.assertEqual(mgr.get_snapshot().tick, 3)

    def test_background_thread_runs_and_stops(self):
        mgr = _build_manager()
        mgr.tick_rate = 0.01
        mgr.start()
        try:
            deadline = time.monotonic() + 5.0
            while mgr.get_snapshot().tick < 3 and time.monotonic() < deadline:
                time.sleep(0.01)
            self.assertGreaterEqual(mgr.get_snapshot().tick, 3)
            with self.assertRaises(RuntimeError):
                mgr.advance(1)
        finally:
            mgr.stop()
        self.assertFalse(mgr.running)

    def test_pause_control_requires_running(self):
        mgr = _build_manager()
        resp = control(ControlAction.pause, manager=mgr)
        self.assertEqual(resp.status, "error")

    def test_step_on_stopped_engine_advances_one_tick(self):
        mgr = _build_manager()
        resp = control(ControlAction.step, manager=mgr)
        self.assertEqual(resp.status, "ok")
        self.assertEqual(resp.tick, 1)
        self.assertFalse(mgr.running)

    def test_step_past_max_ticks_is_error(self):
        mgr = _build_manager(max_ticks=1)
        mgr.advance(1)
        resp = control(ControlAction.step, manager=mgr)
        self.assertEqual(resp.status, "error")
        self.assertEqual(resp.tick, 1)

    def test_tick_rate_is_clamped(self):
        mgr = _build_manager()
        mgr.tick_rate = 10.0
        self.assertEqual(mgr.tick_rate, 2.0)
        mgr.tick_rate = 0.0
        self.assertEqual(mgr.tick_rate, 0.01)


class TestAppFactory(unittest.TestCase):

    def test_routes_are_mounted(self):
        app = create_app(SimulationConfig())
        self.assertIsInstance(app, FastAPI)
        paths = set(app.openapi()["paths"])
        for path in ("/api/v1/state", "/api/v1/stats", "/api/v1/map",
                     "/api/v1/config", "/api/v1/control/{action}", "/api/v1/speed"):
            self.assertIn(path, paths)


if __name__ == "__main__":
    unittest.main()

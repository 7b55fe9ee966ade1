"""Room engine host for the HTTP API.

One background thread owns the WorldLoop and is the only writer of the
room. After every tick it publishes an immutable (snapshot, stats) pair;
route handlers only ever read the published pair.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from typing import TYPE_CHECKING, NamedTuple

from colony.engine.stats import RoomStats
from colony.systems.simulation import build_simulation
from colony.utils.event_log import EventLog

if TYPE_CHECKING:
    from colony.config import SimulationConfig
    from colony.core.grid import Grid
    from colony.core.snapshot import Snapshot
    from colony.engine.world_loop import WorldLoop

logger = logging.getLogger(__name__)

MIN_TICK_RATE = 0.01
MAX_TICK_RATE = 2.0
_PAUSE_POLL = 0.01


class _Published(NamedTuple):
    snapshot: Snapshot | None
    stats: RoomStats


class EngineManager:
    """Hosts one room and exposes run control to the API.

    ``advance`` drives the room synchronously and is meant for tests and
    scripted use; ``start`` hands the room to the engine thread.
    """

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config
        self._tick_rate = 0.05

        self._loop: WorldLoop | None = None
        self._publish_lock = threading.Lock()
        self._published = _Published(None, RoomStats())
        self._event_log = EventLog()
        self._lifecycle: Counter[str] = Counter()

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._single_step = threading.Event()
        self._halt = threading.Event()

        self._build()

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        """Seconds slept between ticks on the engine thread."""
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = min(MAX_TICK_RATE, max(MIN_TICK_RATE, value))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def total_spawned(self) -> int:
        return self._lifecycle["spawn"]

    @property
    def total_deaths(self) -> int:
        return self._lifecycle["death"]

    def get_snapshot(self) -> Snapshot | None:
        with self._publish_lock:
            return self._published.snapshot

    def get_stats(self) -> RoomStats:
        with self._publish_lock:
            return self._published.stats

    def get_grid(self) -> Grid | None:
        snap = self.get_snapshot()
        return None if snap is None else snap.grid

    # -- run control --

    def start(self) -> None:
        if self.running:
            return
        self._halt.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._engine_thread, name="colony-engine", daemon=True)
        self._thread.start()
        logger.info("Engine started at tick %d (%.3fs per tick)", self._room_tick(), self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("Engine paused at tick %d", self._room_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("Engine resumed at tick %d", self._room_tick())

    def step(self) -> None:
        """Ask the engine thread for one tick; pauses it first if needed."""
        if not self.paused:
            self.pause()
        self._single_step.set()

    def advance(self, ticks: int = 1) -> int:
        """Run up to *ticks* ticks on the calling thread and return how many ran.

        Stops early once the room reaches ``max_ticks``.
        """
        if self.running:
            raise RuntimeError("cannot advance while the engine thread is running")
        for done in range(ticks):
            if not self._advance_one():
                return done
        return ticks

    def stop(self) -> None:
        self._halt.set()
        self._paused.clear()
        self._running.clear()
        thread, self._thread = self._thread, None
        if thread is not None and thread.is_alive():
            thread.join(timeout=5.0)
        logger.info("Engine stopped at tick %d", self._room_tick())

    def reset(self) -> None:
        """Stop the engine and regenerate the room from the configured seed."""
        self.stop()
        self._event_log.clear()
        self._lifecycle.clear()
        self._build()
        logger.info("Room rebuilt from seed %d", self.config.world_seed)

    # -- internals --

    def _build(self) -> None:
        self._loop = build_simulation(self.config)
        self._publish()

    def _advance_one(self) -> bool:
        if self._loop is None:
            raise RuntimeError("engine has no room loaded")
        ticked = self._loop.tick_once()
        if ticked:
            events = self._loop.tick_events
            self._lifecycle.update(e.category for e in events if e.category in ("spawn", "death"))
            self._event_log.append_many(events)
        self._publish()
        return ticked

    def _publish(self) -> None:
        published = _Published(self._loop.create_snapshot(), self._loop.stats)
        with self._publish_lock:
            self._published = published

    def _engine_thread(self) -> None:
        while not self._halt.is_set():
            stepping = self._single_step.is_set()
            if self.paused and not stepping:
                time.sleep(_PAUSE_POLL)
                continue
            self._single_step.clear()

            if not self._advance_one():
                logger.info("Room reached max_ticks at tick %d", self._room_tick())
                break
            if not stepping:
                time.sleep(self._tick_rate)
        self._running.clear()

    def _room_tick(self) -> int:
        return self._loop.world.tick if self._loop is not None else 0

"""Room event feed shared between the engine thread and API readers."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from itertools import takewhile
from typing import Iterable

DEFAULT_CAPACITY = 5000


@dataclass(frozen=True, slots=True)
class SimEvent:
    """Something worth showing in the feed: a transition announcement, a
    spawn, a death, a finished structure or a controller level-up."""

    tick: int
    category: str
    message: str
    entity_ids: tuple[int, ...] = ()


class EventLog:
    """Bounded, tick-ordered event buffer.

    The engine appends whole ticks at a time, so the buffer is always
    sorted by tick and tick queries can stop at the first older event.
    """

    __slots__ = ("_events", "_lock")

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._events: deque[SimEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append_many(self, events: Iterable[SimEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def since_tick(self, tick: int) -> list[SimEvent]:
        """Events from *tick* onwards, oldest first."""
        with self._lock:
            recent = list(takewhile(lambda e: e.tick >= tick, reversed(self._events)))
        recent.reverse()
        return recent

    def latest(self, count: int = 50) -> list[SimEvent]:
        with self._lock:
            start = max(0, len(self._events) - count)
            return [self._events[i] for i in range(start, len(self._events))]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

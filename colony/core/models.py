"""Core data models: Vector2, ResourceStore, Body, WorkerMemory, Worker."""

from __future__ import annotations

from dataclasses import dataclass, field

from colony.core.enums import WorkerRole


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def manhattan(self, other: Vector2) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# Cardinal step offsets: NORTH, EAST, SOUTH, WEST
DIRECTION_OFFSETS: tuple[Vector2, ...] = (
    Vector2(0, -1),
    Vector2(1, 0),
    Vector2(0, 1),
    Vector2(-1, 0),
)


@dataclass(slots=True)
class ResourceStore:
    """Energy held by a worker or facility.  ``0 <= used <= capacity``."""

    capacity: int
    used: int = 0

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {self.capacity}")
        self.used = max(0, min(self.used, self.capacity))

    @property
    def free_capacity(self) -> int:
        return self.capacity - self.used

    @property
    def has_free_capacity(self) -> bool:
        return self.used < self.capacity

    @property
    def is_full(self) -> bool:
        return self.used == self.capacity

    @property
    def has_resources(self) -> bool:
        return self.used > 0

    def add(self, amount: int) -> int:
        """Store up to *amount*; return how much was accepted."""
        accepted = max(0, min(amount, self.free_capacity))
        self.used += accepted
        return accepted

    def remove(self, amount: int) -> int:
        """Withdraw up to *amount*; return how much was removed."""
        removed = max(0, min(amount, self.used))
        self.used -= removed
        return removed

    def copy(self) -> ResourceStore:
        return ResourceStore(capacity=self.capacity, used=self.used)


@dataclass(frozen=True, slots=True)
class Body:
    """Part counts of a worker body."""

    work: int = 1
    carry: int = 1
    move: int = 2

    def cost(self, work_cost: int, carry_cost: int, move_cost: int) -> int:
        return self.work * work_cost + self.carry * carry_cost + self.move * move_cost


@dataclass(slots=True)
class WorkerMemory:
    """Persisted per-worker record, keyed by worker name in the world.

    ``state`` is a raw persisted value: ``None`` (never initialised) or
    whatever integer was last written.  The state machines validate it
    against the role's state set on load.
    """

    role: WorkerRole
    state: int | None = None

    def copy(self) -> WorkerMemory:
        return WorkerMemory(role=self.role, state=self.state)


@dataclass(slots=True)
class Worker:
    """An autonomous unit that runs one state machine per tick."""

    id: int
    name: str
    pos: Vector2
    store: ResourceStore
    memory: WorkerMemory
    body: Body = field(default_factory=Body)
    ticks_to_live: int = 1500

    @property
    def role(self) -> WorkerRole:
        return self.memory.role

    @property
    def alive(self) -> bool:
        return self.ticks_to_live > 0

    def copy(self) -> Worker:
        """Deep copy for snapshot generation."""
        return Worker(
            id=self.id,
            name=self.name,
            pos=self.pos,
            store=self.store.copy(),
            memory=self.memory.copy(),
            body=self.body,
            ticks_to_live=self.ticks_to_live,
        )

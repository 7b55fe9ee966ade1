"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class WorkerRole(IntEnum):
    """Which state machine governs a worker."""

    HARVESTER = 0   # Generic resource worker
    BUILDER = 1     # Harvester that also constructs


@unique
class WorkerState(IntEnum):
    """Persisted finite-state-machine states for worker AI."""

    SPAWNING = 0
    GATHERING = 1
    DELIVERING = 2
    IMPROVING = 3
    CONSTRUCTING = 4    # Builder only


# Closed state set per role. Persisted values outside the set reset to SPAWNING.
ROLE_STATES: dict[WorkerRole, frozenset[WorkerState]] = {
    WorkerRole.HARVESTER: frozenset({
        WorkerState.SPAWNING, WorkerState.GATHERING,
        WorkerState.DELIVERING, WorkerState.IMPROVING,
    }),
    WorkerRole.BUILDER: frozenset({
        WorkerState.SPAWNING, WorkerState.GATHERING,
        WorkerState.DELIVERING, WorkerState.IMPROVING,
        WorkerState.CONSTRUCTING,
    }),
}


@unique
class ActionType(IntEnum):
    """World-affecting actions a worker can queue in a tick."""

    MOVE = 0
    GATHER = 1
    TRANSFER = 2
    IMPROVE = 3
    BUILD = 4


@unique
class ActionResult(IntEnum):
    """Outcome of an action call, checked at call time."""

    OK = 0
    NOT_IN_RANGE = 1
    INVALID_TARGET = 2
    NOT_ENOUGH_RESOURCES = 3
    FULL = 4
    BUSY = 5            # Worker already queued an action this tick
    NO_PATH = 6


@unique
class FacilityKind(IntEnum):
    """Structures that accept energy deliveries."""

    SPAWN = 0
    EXTENSION = 1


@unique
class StructureType(IntEnum):
    """What a construction site turns into when finished."""

    EXTENSION = 0
    ROAD = 1


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    MAP_GEN = 0
    SPAWN = 1


@unique
class Material(IntEnum):
    """Tile materials on the grid."""

    FLOOR = 0
    WALL = 1
    SWAMP = 2
    ROAD = 3

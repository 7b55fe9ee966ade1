"""Engine systems: RNG, room and worker generation, simulation wiring."""

from colony.systems.rng import DeterministicRNG
from colony.systems.generator import RoomGenerator, WorkerGenerator
from colony.systems.simulation import build_simulation

__all__ = ["DeterministicRNG", "RoomGenerator", "WorkerGenerator", "build_simulation"]

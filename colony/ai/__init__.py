"""AI layer: world queries, worker state machines, and role dispatch."""

from colony.ai.brain import WorkerBrain
from colony.ai.perception import Perception, WorldQuery
from colony.ai.states import BuilderMachine, HarvesterMachine, MACHINES, WorkerContext

__all__ = [
    "BuilderMachine",
    "HarvesterMachine",
    "MACHINES",
    "Perception",
    "WorkerBrain",
    "WorkerContext",
    "WorldQuery",
]

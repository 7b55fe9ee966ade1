"""Engine layer: world loop, action queue, intent resolution, population."""

from colony.engine.action_queue import ActionQueue
from colony.engine.population import PopulationManager
from colony.engine.resolver import IntentResolver
from colony.engine.stats import RoomStats, compute_stats
from colony.engine.world_loop import WorldLoop

__all__ = [
    "ActionQueue",
    "IntentResolver",
    "PopulationManager",
    "RoomStats",
    "WorldLoop",
    "compute_stats",
]

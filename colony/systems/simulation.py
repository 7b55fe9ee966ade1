"""Wiring — builds a ready-to-run WorldLoop from a SimulationConfig."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colony.ai.brain import WorkerBrain
from colony.engine.population import PopulationManager
from colony.engine.resolver import IntentResolver
from colony.engine.world_loop import WorldLoop
from colony.systems.generator import RoomGenerator, WorkerGenerator
from colony.systems.rng import DeterministicRNG

if TYPE_CHECKING:
    from colony.actions.base import RouteStyle, Target
    from colony.config import SimulationConfig
    from colony.core.models import Worker
    from colony.utils.event_log import EventLog
    from colony.utils.replay import ReplayRecorder

logger = logging.getLogger("colony.routes")


def log_route(worker: Worker, target: Target, style: RouteStyle) -> None:
    """Route annotation hook: one DEBUG line per annotated move."""
    logger.debug("%s %s → %s [%s]", worker.name, style.text, target.pos, style.colour)


def build_simulation(
    config: SimulationConfig,
    event_log: EventLog | None = None,
    recorder: ReplayRecorder | None = None,
) -> WorldLoop:
    rng = DeterministicRNG(config.world_seed)
    world = RoomGenerator(config, rng).build()
    population = PopulationManager(config, WorkerGenerator(config, rng))
    return WorldLoop(
        config=config,
        world=world,
        brain=WorkerBrain(),
        resolver=IntentResolver(config),
        population=population,
        recorder=recorder,
        event_log=event_log,
        route_hook=log_route if config.annotate_routes else None,
    )

"""Deterministic resolution of queued worker intents."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from colony.actions.move import MoveAction
from colony.actions.work import BuildAction, GatherAction, ImproveAction, TransferAction, WorkAction
from colony.core.enums import ActionType, FacilityKind, Material, StructureType
from colony.core.models import ResourceStore
from colony.core.structures import Facility
from colony.utils.event_log import SimEvent

if TYPE_CHECKING:
    from colony.actions.base import ActionProposal
    from colony.config import SimulationConfig
    from colony.core.structures import ConstructionSite
    from colony.core.world_state import WorldState

logger = logging.getLogger(__name__)


class IntentResolver:
    """Re-validates and applies intents in queue order.

    Resolution policies:
    - Movement: first intent in the queue claims a tile; a worker that
      moves away frees its old tile for later intents.
    - Work: applied against the then-current world; a target drained or
      removed by an earlier intent rejects the later one.
    """

    __slots__ = ("_config", "_work", "_events")

    def __init__(self, config: SimulationConfig) -> None:
        self._config = config
        self._work: dict[ActionType, WorkAction] = {
            action.verb: action
            for action in (GatherAction(config), TransferAction(config),
                           ImproveAction(config), BuildAction(config))
        }
        self._events: list[SimEvent] = []

    @property
    def events(self) -> list[SimEvent]:
        """Construction and controller events from the last ``resolve`` call."""
        return self._events

    def resolve(self, proposals: list[ActionProposal], world: WorldState) -> list[ActionProposal]:
        """Validate and apply proposals. Returns the list of *applied* proposals."""
        self._events = []
        if not proposals:
            return []

        applied: list[ActionProposal] = []
        occupied = world.occupied_positions()

        for proposal in proposals:
            if self._apply_one(proposal, world, occupied):
                applied.append(proposal)

        return applied

    # -- internals --

    def _apply_one(
        self,
        proposal: ActionProposal,
        world: WorldState,
        occupied: set[tuple[int, int]],
    ) -> bool:
        match proposal.verb:
            case ActionType.MOVE:
                if MoveAction.validate(proposal, world, occupied):
                    worker = world.workers[proposal.actor_id]
                    occupied.discard((worker.pos.x, worker.pos.y))
                    MoveAction.apply(proposal, world)
                    occupied.add((proposal.target_pos.x, proposal.target_pos.y))
                    return True

            case ActionType.BUILD:
                if self._work[ActionType.BUILD].apply(proposal, world) > 0:
                    site = world.construction_sites.get(proposal.target_id)
                    if site is not None and site.is_complete:
                        self._complete_site(site, world)
                    return True

            case ActionType.IMPROVE:
                controller = world.controller
                level_before = controller.level if controller else 0
                if self._work[ActionType.IMPROVE].apply(proposal, world) > 0:
                    if controller is not None and controller.level > level_before:
                        self._events.append(SimEvent(
                            tick=world.tick, category="controller",
                            message=f"Controller reached level {controller.level}",
                            entity_ids=(proposal.actor_id,),
                        ))
                    return True

            case ActionType.GATHER | ActionType.TRANSFER:
                if self._work[proposal.verb].apply(proposal, world) > 0:
                    return True

        logger.debug("Rejected: %s", proposal)
        return False

    def _complete_site(self, site: ConstructionSite, world: WorldState) -> None:
        """Replace a finished site with the structure it was building."""
        world.remove_construction_site(site.id)
        match site.structure:
            case StructureType.EXTENSION:
                facility = Facility(
                    id=world.allocate_id(), kind=FacilityKind.EXTENSION, pos=site.pos,
                    store=ResourceStore(capacity=self._config.extension_capacity),
                    name=f"Extension{site.id}",
                )
                world.add_facility(facility)
            case StructureType.ROAD:
                world.grid.set(site.pos, Material.ROAD)
        logger.info("Tick %d: %s finished at %s", world.tick, site.structure.name.capitalize(), site.pos)
        self._events.append(SimEvent(
            tick=world.tick, category="construction",
            message=f"{site.structure.name.capitalize()} finished at {site.pos}",
        ))

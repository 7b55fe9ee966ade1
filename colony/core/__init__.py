"""Core data models and world representation."""

from colony.core.enums import (
    ActionResult, ActionType, Domain, FacilityKind, Material, StructureType,
    WorkerRole, WorkerState,
)
from colony.core.models import Body, ResourceStore, Vector2, Worker, WorkerMemory
from colony.core.grid import Grid
from colony.core.resource_nodes import ResourceNode
from colony.core.structures import ConstructionSite, Controller, Facility
from colony.core.world_state import WorldState
from colony.core.snapshot import Snapshot

__all__ = [
    "ActionResult",
    "ActionType",
    "Body",
    "ConstructionSite",
    "Controller",
    "Domain",
    "Facility",
    "FacilityKind",
    "Grid",
    "Material",
    "ResourceNode",
    "ResourceStore",
    "Snapshot",
    "StructureType",
    "Vector2",
    "WorldState",
    "Worker",
    "WorkerMemory",
    "WorkerRole",
    "WorkerState",
]

"""Action system: proposals, call-time checks, and application."""

from colony.actions.base import ActionInterface, ActionProposal, RouteHook, RouteStyle
from colony.actions.move import MoveAction
from colony.actions.work import BuildAction, GatherAction, ImproveAction, TransferAction
from colony.actions.worker_actions import WorkerActions

__all__ = [
    "ActionInterface",
    "ActionProposal",
    "BuildAction",
    "GatherAction",
    "ImproveAction",
    "MoveAction",
    "RouteHook",
    "RouteStyle",
    "TransferAction",
    "WorkerActions",
]

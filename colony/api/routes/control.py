"""Run control: start, pause, resume, single tick, regenerate, and speed."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from colony.api.dependencies import get_engine_manager
from colony.api.engine_manager import EngineManager
from colony.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _reply(manager: EngineManager, status: str, message: str) -> ControlResponse:
    snapshot = manager.get_snapshot()
    return ControlResponse(status=status, message=message, tick=snapshot.tick if snapshot else 0)


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.start:
            if manager.running:
                return _reply(manager, "noop", "Engine is already running.")
            manager.start()
            return _reply(manager, "ok", "Engine started.")

        case ControlAction.pause | ControlAction.resume if not manager.running:
            return _reply(manager, "error", "Engine is not running.")

        case ControlAction.pause:
            manager.pause()
            return _reply(manager, "ok", "Engine paused.")

        case ControlAction.resume:
            manager.resume()
            return _reply(manager, "ok", "Engine resumed.")

        case ControlAction.step:
            # A stopped engine is advanced right here; a running one is asked
            # for one tick and answers with the tick it was at.
            if manager.running:
                manager.step()
                return _reply(manager, "ok", "One tick queued.")
            if manager.advance(1) == 0:
                return _reply(manager, "error", "Room has reached max_ticks.")
            return _reply(manager, "ok", "Advanced one tick.")

        case ControlAction.reset:
            manager.reset()
            return _reply(manager, "ok", "Room regenerated from seed.")


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    tps: float = Query(20.0, ge=0.5, le=100.0, description="Ticks per second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = 1.0 / tps
    return _reply(manager, "ok", f"Engine set to {1.0 / manager.tick_rate:.1f} ticks per second.")

"""GET /api/v1/map — grid data (changes only when a road is finished)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from colony.api.dependencies import get_engine_manager
from colony.api.engine_manager import EngineManager
from colony.api.schemas import MapResponse

router = APIRouter()


def run_length_encode(values: list[int]) -> list[int]:
    """Encode as [value, count, value, count, ...]."""
    rle: list[int] = []
    if not values:
        return rle
    cur_val = values[0]
    cur_count = 1
    for v in values[1:]:
        if v == cur_val:
            cur_count += 1
        else:
            rle.append(cur_val)
            rle.append(cur_count)
            cur_val = v
            cur_count = 1
    rle.append(cur_val)
    rle.append(cur_count)
    return rle


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    grid = manager.get_grid()
    if grid is None:
        raise HTTPException(status_code=503, detail="Simulation not initialized yet.")

    rle = run_length_encode([int(t) for t in grid.tiles])
    return MapResponse(width=grid.width, height=grid.height, grid=rle)

"""Replay serialization — records tick-by-tick intents and worker states."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from colony.ai.states import state_name

if TYPE_CHECKING:
    from colony.actions.base import ActionProposal
    from colony.core.world_state import WorldState

logger = logging.getLogger(__name__)


class ReplayRecorder:
    """Accumulates tick records and flushes to a JSON replay file."""

    __slots__ = ("_path", "_ticks", "_seed")

    def __init__(self, path: str | Path, seed: int) -> None:
        self._path = Path(path)
        self._seed = seed
        self._ticks: list[dict[str, Any]] = []

    @property
    def ticks(self) -> list[dict[str, Any]]:
        return self._ticks

    def record_tick(
        self,
        tick: int,
        applied_actions: list[ActionProposal],
        world: WorldState,
    ) -> None:
        workers_snapshot = [
            {
                "id": w.id,
                "name": w.name,
                "role": w.role.name,
                "pos": [w.pos.x, w.pos.y],
                "energy": w.store.used,
                "state": state_name(w),
            }
            for w in world.workers.values()
        ]
        actions_log = [
            {
                "actor": a.actor_id,
                "verb": a.verb.name,
                "target": a.target_id,
                "pos": [a.target_pos.x, a.target_pos.y] if a.target_pos else None,
            }
            for a in applied_actions
        ]

        self._ticks.append(
            {
                "tick": tick,
                "actions": actions_log,
                "workers": workers_snapshot,
                "controller_level": world.controller.level if world.controller else None,
            }
        )

    def flush(self) -> None:
        """Write the recorded ticks to the replay file as JSON."""
        replay = {
            "version": "1.0",
            "seed": self._seed,
            "total_ticks": len(self._ticks),
            "ticks": self._ticks,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(replay, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Replay saved to %s (%d ticks)", self._path, len(self._ticks))

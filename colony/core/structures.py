"""Room structures — facilities, construction sites, and the controller.

Three target kinds besides resource nodes:
  - Facility: spawn or extension; stores energy and accepts deliveries
  - ConstructionSite: consumes energy until finished, then becomes a
    structure (extension facility or road tile)
  - Controller: the room's long-running improvement objective
"""

from __future__ import annotations

from dataclasses import dataclass, field

from colony.core.enums import FacilityKind, StructureType
from colony.core.models import ResourceStore, Vector2


# ---------------------------------------------------------------------------
# Facilities
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Facility:
    """An energy-consuming structure (spawn or extension)."""

    id: int
    kind: FacilityKind
    pos: Vector2
    store: ResourceStore = field(default_factory=lambda: ResourceStore(capacity=300))
    name: str = ""

    @property
    def accepts_delivery(self) -> bool:
        return self.store.has_free_capacity

    def copy(self) -> Facility:
        return Facility(id=self.id, kind=self.kind, pos=self.pos,
                        store=self.store.copy(), name=self.name)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ConstructionSite:
    """A structure under construction."""

    id: int
    structure: StructureType
    pos: Vector2
    progress: int = 0
    progress_total: int = 3000

    @property
    def remaining(self) -> int:
        return max(self.progress_total - self.progress, 0)

    @property
    def is_complete(self) -> bool:
        return self.progress >= self.progress_total

    def add_progress(self, amount: int) -> int:
        """Apply up to *amount* build points; return how many were used."""
        used = max(0, min(amount, self.remaining))
        self.progress += used
        return used

    def copy(self) -> ConstructionSite:
        return ConstructionSite(id=self.id, structure=self.structure, pos=self.pos,
                                progress=self.progress, progress_total=self.progress_total)


# ---------------------------------------------------------------------------
# Controller (improvement objective)
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Controller:
    """Room controller.  Upgrading it is the workers' fallback sink for energy."""

    id: int
    pos: Vector2
    progress_table: tuple[int, ...] = (200, 45000, 135000)
    level: int = 1
    progress: int = 0

    @property
    def max_level(self) -> int:
        return len(self.progress_table) + 1

    @property
    def progress_total(self) -> int:
        """Progress needed to reach the next level (0 at max level)."""
        if self.level >= self.max_level:
            return 0
        return self.progress_table[self.level - 1]

    def upgrade(self, amount: int) -> int:
        """Add *amount* progress, levelling up on overflow.  Returns levels gained."""
        if amount <= 0 or self.level >= self.max_level:
            return 0
        gained = 0
        self.progress += amount
        while self.level < self.max_level and self.progress >= self.progress_total:
            self.progress -= self.progress_total
            self.level += 1
            gained += 1
        if self.level >= self.max_level:
            self.progress = 0
        return gained

    def copy(self) -> Controller:
        return Controller(id=self.id, pos=self.pos, progress_table=self.progress_table,
                          level=self.level, progress=self.progress)

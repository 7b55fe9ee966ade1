"""Resource nodes — depletable energy sources that regenerate over time."""

from __future__ import annotations

from dataclasses import dataclass

from colony.core.models import Vector2


@dataclass(slots=True)
class ResourceNode:
    """A harvestable energy source on the map.

    Regeneration starts on the first harvest taken from a full node and
    refills the node completely once ``ticks_to_regeneration`` hits zero,
    whether or not it was drained in the meantime.
    """

    id: int
    pos: Vector2
    energy: int = 3000
    energy_capacity: int = 3000
    regen_ticks: int = 300
    ticks_to_regeneration: int = 0     # 0 = not regenerating

    @property
    def is_available(self) -> bool:
        return self.energy > 0

    @property
    def is_depleted(self) -> bool:
        return self.energy <= 0

    @property
    def regenerating(self) -> bool:
        return self.ticks_to_regeneration > 0

    def harvest(self, amount: int) -> int:
        """Take up to *amount* energy, return how much was taken."""
        if amount <= 0 or not self.is_available:
            return 0
        if self.energy == self.energy_capacity and not self.regenerating:
            self.ticks_to_regeneration = self.regen_ticks
        taken = min(amount, self.energy)
        self.energy -= taken
        return taken

    def tick_regeneration(self) -> None:
        """Count down regeneration; refill when ready."""
        if self.ticks_to_regeneration > 0:
            self.ticks_to_regeneration -= 1
            if self.ticks_to_regeneration <= 0:
                self.energy = self.energy_capacity

    def energy_recovered_per_tick(self) -> float:
        """Average rate at which the missing energy comes back."""
        if self.ticks_to_regeneration <= 0:
            return 0.0
        return (self.energy_capacity - self.energy) / self.ticks_to_regeneration

    def copy(self) -> ResourceNode:
        return ResourceNode(
            id=self.id,
            pos=self.pos,
            energy=self.energy,
            energy_capacity=self.energy_capacity,
            regen_ticks=self.regen_ticks,
            ticks_to_regeneration=self.ticks_to_regeneration,
        )

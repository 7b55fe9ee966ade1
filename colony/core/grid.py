"""Room tile grid."""

from __future__ import annotations

from colony.core.enums import Material
from colony.core.models import Vector2


class Grid:
    """Rectangular room of tiles, one byte per tile.

    Anything outside the room reads as WALL, so callers never need a
    separate bounds check before asking about walkability.
    """

    __slots__ = ("width", "height", "_cells")

    def __init__(self, width: int, height: int, fill: Material = Material.FLOOR) -> None:
        self.width = width
        self.height = height
        self._cells = bytearray([int(fill)]) * (width * height)

    def _offset(self, pos: Vector2) -> int | None:
        if 0 <= pos.x < self.width and 0 <= pos.y < self.height:
            return pos.y * self.width + pos.x
        return None

    def in_bounds(self, pos: Vector2) -> bool:
        return self._offset(pos) is not None

    def get(self, pos: Vector2) -> Material:
        offset = self._offset(pos)
        return Material.WALL if offset is None else Material(self._cells[offset])

    def set(self, pos: Vector2, material: Material) -> None:
        offset = self._offset(pos)
        if offset is not None:
            self._cells[offset] = int(material)

    def is_walkable(self, pos: Vector2) -> bool:
        return self.get(pos) != Material.WALL

    def is_road(self, pos: Vector2) -> bool:
        return self.get(pos) == Material.ROAD

    def wall_border(self) -> None:
        wall = int(Material.WALL)
        last_row = (self.height - 1) * self.width
        for x in range(self.width):
            self._cells[x] = wall
            self._cells[last_row + x] = wall
        for row in range(0, len(self._cells), self.width):
            self._cells[row] = wall
            self._cells[row + self.width - 1] = wall

    @property
    def tiles(self) -> list[Material]:
        """Row-major tile list."""
        return [Material(v) for v in self._cells]

    def copy(self) -> Grid:
        clone = Grid.__new__(Grid)
        clone.width = self.width
        clone.height = self.height
        clone._cells = bytearray(self._cells)
        return clone

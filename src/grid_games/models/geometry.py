"""Board geometry collaborator: maps logical tiles to world coordinates."""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from .grid import Bounds, Position

WorldCoordinate = Tuple[float, float, float]


class BoardGeometry(ABC):
    """Interface the engines consume to translate between world and tile space.

    Engines never compute world coordinates themselves; renderers and input
    handlers provide an implementation of this interface.
    """

    @abstractmethod
    def position_for_tile(self, row: float, column: float) -> WorldCoordinate:
        """Get the world coordinate of the centre of a tile."""

    @abstractmethod
    def closest_tile_for_position(self, world: WorldCoordinate) -> Position:
        """Get the tile nearest to a world coordinate, clamped onto the board."""

    @abstractmethod
    def is_in_bounds(self, position: Position) -> bool:
        """Check whether a logical position lies on the board."""

    def tile_for_world_position(self, world: WorldCoordinate,
                                snap_distance: Optional[float] = None) -> Optional[Position]:
        """Resolve a world coordinate to a tile, or None if it is too far from any tile.

        Distance is measured in the board plane (x/z), so the height at which a
        piece is dragged does not matter.
        """
        tile = self.closest_tile_for_position(world)
        if not self.is_in_bounds(tile):
            return None
        if snap_distance is None:
            return tile

        centre = self.position_for_tile(tile.row, tile.column)
        distance = math.hypot(centre[0] - world[0], centre[2] - world[2])
        return tile if distance < snap_distance else None


@dataclass
class GridGeometry(BoardGeometry):
    """Square grid centred on the world origin; rows run along x, columns along z."""
    rows: int = 8
    columns: int = 8
    tile_size: float = 1.0
    border_thickness: float = 0.0
    height: float = 0.0

    @property
    def bounds(self) -> Bounds:
        return Bounds(0, self.rows, 0, self.columns)

    @property
    def _pitch(self) -> float:
        return self.tile_size + 2 * self.border_thickness

    @property
    def _offset(self) -> Tuple[float, float]:
        return (-(self.rows - 1) / 2 * self._pitch,
                -(self.columns - 1) / 2 * self._pitch)

    def position_for_tile(self, row: float, column: float) -> WorldCoordinate:
        offset_x, offset_z = self._offset
        return (offset_x + row * self._pitch, self.height, offset_z + column * self._pitch)

    def closest_tile_for_position(self, world: WorldCoordinate) -> Position:
        offset_x, offset_z = self._offset
        row = round((world[0] - offset_x) / self._pitch)
        column = round((world[2] - offset_z) / self._pitch)

        # Ensure row and column are within valid range
        row = min(max(row, 0), self.rows - 1)
        column = min(max(column, 0), self.columns - 1)

        return Position(row, column)

    def is_in_bounds(self, position: Position) -> bool:
        return self.bounds.contains(position)

    def get_tiles(self):
        """Enumerate every tile on the board."""
        return Position.get_range(0, self.rows, 0, self.columns)

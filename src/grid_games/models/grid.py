"""Grid primitives shared by all board games: colors, positions and bounds."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


class PlayerColor(Enum):
    """Player colors. NONE means "no active requirement", never a piece color."""
    BLACK = "black"
    WHITE = "white"
    NONE = "none"


def opposite_color(color: PlayerColor) -> PlayerColor:
    """Get the opposing color (NONE maps to NONE)."""
    if color == PlayerColor.BLACK:
        return PlayerColor.WHITE
    if color == PlayerColor.WHITE:
        return PlayerColor.BLACK
    return PlayerColor.NONE


@dataclass(frozen=True)
class Position:
    """An immutable (row, column) square on the board, 0-based."""
    row: int
    column: int

    def __add__(self, other: 'Position') -> 'Position':
        return Position(self.row + other.row, self.column + other.column)

    def __sub__(self, other: 'Position') -> 'Position':
        return Position(self.row - other.row, self.column - other.column)

    def __mul__(self, multiplier: int) -> 'Position':
        return Position(self.row * multiplier, self.column * multiplier)

    __rmul__ = __mul__

    def __truediv__(self, divisor: int) -> 'Position':
        # Integer division truncating toward zero, so (-2, 2) / 2 == (-1, 1)
        return Position(int(self.row / divisor), int(self.column / divisor))

    def __str__(self) -> str:
        return f"{self.row}x{self.column}"

    @property
    def is_odd(self) -> bool:
        """Whether this is an odd (dark) square."""
        return (self.row + self.column) % 2 == 1

    def chebyshev_distance(self, to: 'Position') -> int:
        """King-move distance; used to tell single steps from jumps."""
        return max(abs(to.row - self.row), abs(to.column - self.column))

    def linear_distance(self, to: 'Position') -> float:
        """Euclidean distance, for animation pacing only."""
        return math.hypot(to.row - self.row, to.column - self.column)

    def is_in_bounds(self, bounds: 'Bounds') -> bool:
        return bounds.contains(self)

    def iterate_to_bounds(self, offset: 'Position', bounds: 'Bounds') -> Iterator['Position']:
        """Lazily step by offset from (but excluding) this position until leaving bounds."""
        return iterate_to_bounds(self, offset, bounds)

    @staticmethod
    def get_range(row_start: int, row_count: int, column_start: int, column_count: int) -> Iterator['Position']:
        """Enumerate a rectangle of positions, row by row."""
        for row in range(row_start, row_start + row_count):
            for column in range(column_start, column_start + column_count):
                yield Position(row, column)


@dataclass(frozen=True)
class Bounds:
    """Rectangle with inclusive low and exclusive high edges."""
    low_row: int
    high_row: int
    low_column: int
    high_column: int

    def contains(self, position: Position) -> bool:
        return (self.low_row <= position.row < self.high_row and
                self.low_column <= position.column < self.high_column)

    def __contains__(self, position: Position) -> bool:
        return self.contains(position)


def iterate_to_bounds(position: Position, offset: Position, bounds: Bounds) -> Iterator[Position]:
    """Cast a ray from position along offset, yielding every square inside bounds."""
    candidate = position + offset
    while bounds.contains(candidate):
        yield candidate
        candidate = candidate + offset


BOARD_SIZE = 8
BOARD_BOUNDS = Bounds(0, BOARD_SIZE, 0, BOARD_SIZE)

ORTHOGONAL_OFFSETS: Tuple[Position, ...] = (
    Position(-1, 0),
    Position(0, -1),
    Position(1, 0),
    Position(0, 1),
)

DIAGONAL_OFFSETS: Tuple[Position, ...] = (
    Position(-1, -1),
    Position(1, -1),
    Position(-1, 1),
    Position(1, 1),
)

EIGHT_CONNECTED_OFFSETS: Tuple[Position, ...] = ORTHOGONAL_OFFSETS + DIAGONAL_OFFSETS

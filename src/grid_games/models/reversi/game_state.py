"""Reversi game state."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

from ..grid import PlayerColor, Position, BOARD_SIZE
from .piece import ReversiPiece

SETUP_PLACEMENTS = 4
CENTRE = (3, 4)


@dataclass
class ReversiGameState:
    """Sparse board of placed pieces plus the set of squares not yet played."""
    placed_count: int = 0
    unplayed_positions: Set[Position] = field(
        default_factory=lambda: set(Position.get_range(0, BOARD_SIZE, 0, BOARD_SIZE)))
    _grid: Dict[Position, Tuple[ReversiPiece, PlayerColor]] = field(default_factory=dict, repr=False)

    @classmethod
    def create_new(cls) -> 'ReversiGameState':
        return cls()

    @property
    def in_setup(self) -> bool:
        """Whether the opening placements in the centre are still being made."""
        return self.placed_count < SETUP_PLACEMENTS

    @property
    def placed_pieces(self) -> List[ReversiPiece]:
        return [piece for piece, _ in self._grid.values()]

    def color_at(self, position: Position) -> PlayerColor:
        entry = self._grid.get(position)
        return PlayerColor.NONE if entry is None else entry[1]

    def piece_at(self, position: Position):
        entry = self._grid.get(position)
        return None if entry is None else entry[0]

    def tile_enabled(self, position: Position) -> bool:
        """The whole board opens up once the centre has been set up."""
        return (self.placed_count >= SETUP_PLACEMENTS or
                (position.row in CENTRE and position.column in CENTRE))

    def place(self, position: Position, piece: ReversiPiece, color: PlayerColor) -> None:
        self._grid[position] = (piece, color)
        self.unplayed_positions.discard(position)
        self.placed_count += 1

    def flip_to(self, position: Position, color: PlayerColor) -> ReversiPiece:
        piece, _ = self._grid[position]
        self._grid[position] = (piece, color)
        return piece

    def flip_all(self, positions: Iterable[Position], color: PlayerColor) -> List[ReversiPiece]:
        return [self.flip_to(position, color) for position in positions]

    def get_scores(self) -> Tuple[int, int]:
        """Count pieces per color.

        Returns:
            tuple: (black_score, white_score)
        """
        black = sum(1 for _, color in self._grid.values() if color == PlayerColor.BLACK)
        white = sum(1 for _, color in self._grid.values() if color == PlayerColor.WHITE)
        return black, white

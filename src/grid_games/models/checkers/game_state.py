"""Checkers game state."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..grid import PlayerColor, Position, BOARD_BOUNDS
from .piece import CheckersPiece

LayoutEntry = Tuple[PlayerColor, Position]


@dataclass
class CheckersGameState:
    """Tracks the pieces and the forced-capture turn state of a checkers game."""
    pieces: List[CheckersPiece] = field(default_factory=list)

    # Turn state
    required_color: PlayerColor = PlayerColor.BLACK
    required_piece: Optional[CheckersPiece] = None  # Pinned after a capture with follow-ups
    pieces_that_can_capture: List[CheckersPiece] = field(default_factory=list)
    last_piece_to_capture: Optional[CheckersPiece] = None

    # Game over state
    winner: Optional[PlayerColor] = None

    def __post_init__(self) -> None:
        """Validate the starting layout."""
        squares = Counter(piece.initial_position for piece in self.pieces)
        overlapping = [square for square, count in squares.items() if count > 1]
        if overlapping:
            raise ValueError(f"More than one piece on {', '.join(str(s) for s in overlapping)}")
        for piece in self.pieces:
            if not BOARD_BOUNDS.contains(piece.initial_position):
                raise ValueError(f"Piece off the board at {piece.initial_position}")

    @classmethod
    def standard(cls) -> 'CheckersGameState':
        """Create the standard layout: three rows of dark squares per side."""
        pieces = []
        for color, first_row in ((PlayerColor.BLACK, 0), (PlayerColor.WHITE, 5)):
            for position in Position.get_range(first_row, 3, 0, 8):
                if position.is_odd:
                    pieces.append(CheckersPiece(color, position))
        return cls(pieces=pieces)

    @classmethod
    def from_layout(cls, layout: Iterable[LayoutEntry],
                    required_color: PlayerColor = PlayerColor.BLACK) -> 'CheckersGameState':
        pieces = [CheckersPiece(color, position) for color, position in layout]
        return cls(pieces=pieces, required_color=required_color)

    @property
    def active_pieces(self) -> List[CheckersPiece]:
        return [piece for piece in self.pieces if not piece.captured]

    @property
    def is_game_over(self) -> bool:
        return self.winner is not None

    def piece_at(self, position: Position) -> Optional[CheckersPiece]:
        for piece in self.pieces:
            if not piece.captured and piece.current_position == position:
                return piece
        return None

    def reset(self, required_color: PlayerColor = PlayerColor.BLACK) -> None:
        """Put every piece back on its starting square and clear the turn state."""
        for piece in self.pieces:
            piece.reset()
        self.required_color = required_color
        self.required_piece = None
        self.pieces_that_can_capture = []
        self.last_piece_to_capture = None
        self.winner = None

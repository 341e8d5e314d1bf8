"""Chess move records."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..grid import Position
from .piece import ChessPiece


class MoveType(Enum):
    """Kinds of chess move, as recorded in the history."""
    NORMAL = "normal"
    QUEEN_SIDE_CASTLE = "queen_side_castle"
    KING_SIDE_CASTLE = "king_side_castle"
    EN_PASSANT = "en_passant"
    PAWN_DOUBLE = "pawn_double"
    END_GAME = "end_game"  # Captures a king


@dataclass(frozen=True)
class Move:
    """One committed (or previewed) move.

    Castling records only the king; the rook's relocation is implied by the
    move type.
    """
    piece: ChessPiece
    from_position: Position
    to_position: Position
    captured: Optional[ChessPiece] = None
    move_type: MoveType = MoveType.NORMAL

    @property
    def is_castle(self) -> bool:
        return self.move_type in (MoveType.KING_SIDE_CASTLE, MoveType.QUEEN_SIDE_CASTLE)

    def __str__(self) -> str:
        text = f"{self.piece.name} {self.from_position} -> {self.to_position}"
        if self.captured is not None:
            text += f" capturing {self.captured.name}"
        if self.move_type != MoveType.NORMAL:
            text += f" ({self.move_type.value})"
        return text

"""Chess piece model."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..grid import PlayerColor, Position
from .positions import KING_FILE
from ...utils.errors import unreachable


class PieceType(Enum):
    """The six chess piece kinds."""
    KING = "king"
    QUEEN = "queen"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"
    PAWN = "pawn"


PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


@dataclass(eq=False)
class ChessPiece:
    """A chess piece, identified by its initial square.

    The current square is not stored on the piece; it is derived from the
    move history held by the game state.
    """
    piece_type: PieceType
    color: PlayerColor
    initial_position: Position
    promoted_type: Optional[PieceType] = None

    def __post_init__(self) -> None:
        """Validate piece data after creation."""
        if self.color == PlayerColor.NONE:
            raise ValueError("Chess pieces must be black or white")

    @property
    def type(self) -> PieceType:
        """Effective type, taking promotion into account."""
        return self.promoted_type or self.piece_type

    @property
    def is_promoted(self) -> bool:
        return self.promoted_type is not None

    def promote_to(self, piece_type: PieceType) -> None:
        self.promoted_type = piece_type

    def reset(self) -> None:
        self.promoted_type = None

    @property
    def name(self) -> str:
        color = self.color.value.title()
        type_name = self.piece_type.value.title()
        side = "King's" if self.initial_position.column >= KING_FILE else "Queen's"

        if self.piece_type in (PieceType.KING, PieceType.QUEEN):
            return f"{color} {type_name}"
        if self.piece_type in (PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK):
            return f"{color} {side} {type_name}"
        if self.piece_type == PieceType.PAWN:
            return f"{color} {type_name} (File {self.initial_position.column + 1})"
        unreachable(self.piece_type)

    def __str__(self) -> str:
        if self.promoted_type is not None:
            return f"{self.name} (Promoted to {self.promoted_type.value.title()})"
        return self.name

"""Chess models."""

from .piece import ChessPiece, PieceType, PROMOTION_TYPES
from .move import Move, MoveType
from .game_state import ChessGameState
from . import positions

__all__ = [
    "ChessPiece",
    "PieceType",
    "PROMOTION_TYPES",
    "Move",
    "MoveType",
    "ChessGameState",
    "positions",
]

"""Checkers models."""

from .piece import CheckersPiece, BLACK_PROMOTION_ROW, WHITE_PROMOTION_ROW
from .game_state import CheckersGameState

__all__ = [
    "CheckersPiece",
    "CheckersGameState",
    "BLACK_PROMOTION_ROW",
    "WHITE_PROMOTION_ROW",
]

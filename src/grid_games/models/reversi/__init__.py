"""Reversi models."""

from .piece import ReversiPiece
from .game_state import ReversiGameState, SETUP_PLACEMENTS

__all__ = [
    "ReversiPiece",
    "ReversiGameState",
    "SETUP_PLACEMENTS",
]

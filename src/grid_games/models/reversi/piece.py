"""Reversi piece model."""

from dataclasses import dataclass


@dataclass(eq=False)
class ReversiPiece:
    """A reversi disc. Its color lives on the board, since flips change it."""
    index: int

    def __str__(self) -> str:
        return f"Disc {self.index}"

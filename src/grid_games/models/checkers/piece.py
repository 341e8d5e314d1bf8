"""Checkers piece model."""

from dataclasses import dataclass, field

from ..grid import PlayerColor, Position

# Black starts on rows 0-2 and heads for row 7; White starts on rows 5-7 and heads for row 0
BLACK_PROMOTION_ROW = 7
WHITE_PROMOTION_ROW = 0


@dataclass(eq=False)
class CheckersPiece:
    """A checkers piece. Captured pieces stay addressable but are inert."""
    color: PlayerColor
    initial_position: Position
    current_position: Position = field(init=False)
    promoted: bool = False
    captured: bool = False

    def __post_init__(self) -> None:
        """Validate piece data after creation."""
        if self.color == PlayerColor.NONE:
            raise ValueError("Checkers pieces must be black or white")
        self.current_position = self.initial_position

    @property
    def forward(self) -> int:
        """Row delta of a forward move for this piece's color."""
        return 1 if self.color == PlayerColor.BLACK else -1

    @property
    def promotion_row(self) -> int:
        return BLACK_PROMOTION_ROW if self.color == PlayerColor.BLACK else WHITE_PROMOTION_ROW

    def is_direction_allowed(self, to_position: Position) -> bool:
        """Check a move heads forward, or in any direction once promoted."""
        if self.promoted:
            return True
        row_delta = to_position.row - self.current_position.row
        return row_delta * self.forward > 0

    def maybe_promote(self) -> bool:
        """Promote if the piece has reached its promotion row.

        Returns:
            bool: True if the piece was promoted by this call
        """
        if self.promoted or self.current_position.row != self.promotion_row:
            return False
        self.promoted = True
        return True

    def capture(self) -> None:
        self.captured = True

    def reset(self) -> None:
        """Return the piece to its starting square, uncaptured and unpromoted."""
        self.current_position = self.initial_position
        self.promoted = False
        self.captured = False

    def __str__(self) -> str:
        kind = "King" if self.promoted else "Man"
        return f"{self.color.value.title()} {kind} at {self.current_position}"

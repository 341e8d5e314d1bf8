"""Move result system for structured engine responses."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from ..models.grid import Position


class MoveValidationResult(Enum):
    """Classification of a chess or checkers destination."""
    INVALID = "invalid"
    OCCUPIED = "occupied"
    VALID = "valid"


class PlacementValidationResult(Enum):
    """Classification of a reversi placement, in the order the checks run."""
    OUT_OF_RANGE = "out_of_range"
    TILE_DISABLED = "tile_disabled"
    OCCUPIED = "occupied"
    INVALID = "invalid"
    VALID = "valid"


@dataclass
class MoveResult:
    """Structured result of ending a move.

    ``position`` is always the piece's resulting logical square: the
    destination on success, the square it started from on rejection.
    """
    success: bool
    piece: Any
    position: Optional[Position]
    from_position: Optional[Position] = None
    captured: List[Any] = field(default_factory=list)
    move: Any = None  # Chess Move record when one was committed
    flipped: List[Position] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None

    @classmethod
    def success_result(cls, piece: Any, from_position: Optional[Position], position: Position,
                       **data) -> 'MoveResult':
        """Create a successful move result.

        ``captured``, ``move`` and ``flipped`` are lifted out of the keyword
        data; anything else lands in ``data``.
        """
        return cls(
            success=True,
            piece=piece,
            position=position,
            from_position=from_position,
            captured=list(data.pop('captured', [])),
            move=data.pop('move', None),
            flipped=list(data.pop('flipped', [])),
            data=data
        )

    @classmethod
    def failure_result(cls, piece: Any, position: Optional[Position], error_message: str) -> 'MoveResult':
        """Create a failed move result; the piece stays where it was."""
        return cls(
            success=False,
            piece=piece,
            position=position,
            from_position=position,
            error_message=error_message
        )

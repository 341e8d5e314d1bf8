"""Per-type chess movement rules.

Each specialization produces pseudo-legal destinations: squares a piece may
reach under its movement and occupancy rules, before the engine filters out
moves that would leave the mover's own king attacked.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from ..models.grid import (
    PlayerColor, Position, BOARD_BOUNDS,
    ORTHOGONAL_OFFSETS, DIAGONAL_OFFSETS, EIGHT_CONNECTED_OFFSETS,
)
from ..models.chess.game_state import ChessGameState
from ..models.chess.move import MoveType
from ..models.chess.piece import PieceType
from ..models.chess.positions import (
    QUEENS_ROOK_FILE, KINGS_ROOK_FILE,
    forward_for_color, king_home, pawn_rank_for_color,
)
from ..utils.errors import unreachable

# Asks whether a square would be attacked by the opponents of a color
AttackQuery = Callable[[PlayerColor, Position], bool]

KNIGHT_OFFSETS = (
    Position(2, 1), Position(2, -1), Position(-2, 1), Position(-2, -1),
    Position(1, 2), Position(1, -2), Position(-1, 2), Position(-1, -2),
)


class MoveTestResult(Enum):
    """What a piece of some color could do on a square."""
    CAPTURE = "capture"
    MOVE = "move"
    INVALID = "invalid"


def test_move(color: PlayerColor, position: Position, state: ChessGameState) -> MoveTestResult:
    """Classify a square for a piece of the given color."""
    if not BOARD_BOUNDS.contains(position):
        return MoveTestResult.INVALID

    occupant = state.get_by_current_position(position)
    if occupant is None:
        return MoveTestResult.MOVE
    if occupant.color != color:
        return MoveTestResult.CAPTURE
    return MoveTestResult.INVALID


def _slide(color: PlayerColor, position: Position, state: ChessGameState,
           directions: Iterable[Position]) -> Iterator[Position]:
    """Walk each ray: empty squares, then the first occupied square if it is an enemy."""
    for offset in directions:
        for candidate in position.iterate_to_bounds(offset, BOARD_BOUNDS):
            result = test_move(color, candidate, state)
            if result == MoveTestResult.INVALID:
                break
            yield candidate
            if result == MoveTestResult.CAPTURE:
                break


def _steps(color: PlayerColor, position: Position, state: ChessGameState,
           offsets: Iterable[Position]) -> Iterator[Position]:
    for offset in offsets:
        candidate = position + offset
        if test_move(color, candidate, state) != MoveTestResult.INVALID:
            yield candidate


class ChessPieceSpecialization(ABC):
    """Movement rules for one piece type."""

    @abstractmethod
    def get_valid_moves(self, color: PlayerColor, position: Position,
                        state: ChessGameState) -> Iterator[Position]:
        """Lazily yield pseudo-legal destinations from a square."""

    def get_attacked_squares(self, color: PlayerColor, position: Position,
                             state: ChessGameState) -> Iterator[Position]:
        """Squares this piece threatens; the same as its moves for most pieces."""
        return self.get_valid_moves(color, position, state)


class Rook(ChessPieceSpecialization):
    def get_valid_moves(self, color, position, state):
        return _slide(color, position, state, ORTHOGONAL_OFFSETS)


class Bishop(ChessPieceSpecialization):
    def get_valid_moves(self, color, position, state):
        return _slide(color, position, state, DIAGONAL_OFFSETS)


class Queen(ChessPieceSpecialization):
    def get_valid_moves(self, color, position, state):
        return _slide(color, position, state, EIGHT_CONNECTED_OFFSETS)


class Knight(ChessPieceSpecialization):
    def get_valid_moves(self, color, position, state):
        return _steps(color, position, state, KNIGHT_OFFSETS)


class King(ChessPieceSpecialization):
    """King steps, plus castling when the caller supplies an attack query."""

    def get_valid_moves(self, color: PlayerColor, position: Position, state: ChessGameState,
                        is_attacked: Optional[AttackQuery] = None) -> Iterator[Position]:
        yield from _steps(color, position, state, EIGHT_CONNECTED_OFFSETS)
        if is_attacked is not None:
            yield from self.get_castling_moves(color, position, state, is_attacked)

    def get_attacked_squares(self, color, position, state):
        return _steps(color, position, state, EIGHT_CONNECTED_OFFSETS)

    def get_castling_moves(self, color: PlayerColor, position: Position, state: ChessGameState,
                           is_attacked: AttackQuery) -> List[Position]:
        """Two-file king shifts towards each rook that may still castle."""
        king = state.get_by_current_position(position)
        if king is None or king.type != PieceType.KING or king.initial_position != king_home(color):
            return []
        if state.has_moved(king) or is_attacked(color, position):
            return []

        moves = []
        for direction, rook_file in ((-1, QUEENS_ROOK_FILE), (1, KINGS_ROOK_FILE)):
            rook = state.get_by_initial_position(Position(position.row, rook_file))
            if rook is None or rook.color != color or rook.type != PieceType.ROOK:
                continue
            if state.has_moved(rook) or state.is_captured(rook):
                continue
            if not self._castle_path_clear(color, position, rook_file, direction, state, is_attacked):
                continue
            moves.append(position + Position(0, 2 * direction))
        return moves

    @staticmethod
    def _castle_path_clear(color: PlayerColor, king_position: Position, rook_file: int,
                           direction: int, state: ChessGameState, is_attacked: AttackQuery) -> bool:
        low = min(king_position.column, rook_file)
        high = max(king_position.column, rook_file)

        for column in range(low + 1, high):
            square = Position(king_position.row, column)
            if test_move(color, square, state) != MoveTestResult.MOVE:
                return False

        # Only the squares the king crosses or lands on must be safe
        for step in (1, 2):
            if is_attacked(color, king_position + Position(0, step * direction)):
                return False
        return True


class Pawn(ChessPieceSpecialization):
    """Pawn pushes, diagonal captures, the double step and en passant."""

    def get_valid_moves(self, color, position, state):
        forward = forward_for_color(color)

        single = position + Position(forward, 0)
        if test_move(color, single, state) == MoveTestResult.MOVE:
            yield single

            double = position + Position(2 * forward, 0)
            if (position.row == pawn_rank_for_color(color) and
                    test_move(color, double, state) == MoveTestResult.MOVE):
                yield double

        for side in (-1, 1):
            diagonal = position + Position(forward, side)
            if test_move(color, diagonal, state) == MoveTestResult.CAPTURE:
                yield diagonal

        en_passant = self.en_passant_target(color, position, state)
        if en_passant is not None:
            yield en_passant

    def get_attacked_squares(self, color, position, state):
        """Both forward diagonals, whether or not anything stands there."""
        forward = forward_for_color(color)
        for side in (-1, 1):
            diagonal = position + Position(forward, side)
            if BOARD_BOUNDS.contains(diagonal):
                yield diagonal

    @staticmethod
    def en_passant_target(color: PlayerColor, position: Position,
                          state: ChessGameState) -> Optional[Position]:
        """Square behind an enemy pawn that has just double-stepped alongside this one."""
        last = state.last_move()
        if last is None or last.move_type != MoveType.PAWN_DOUBLE:
            return None
        if last.piece.color == color or last.piece.type != PieceType.PAWN:
            return None
        if last.to_position.row != position.row:
            return None
        if abs(last.to_position.column - position.column) != 1:
            return None

        target = last.to_position + Position(forward_for_color(color), 0)
        if test_move(color, target, state) != MoveTestResult.MOVE:
            return None
        return target


_SPECIALIZATIONS: Dict[PieceType, ChessPieceSpecialization] = {}


def specialization_for_type(piece_type: PieceType) -> ChessPieceSpecialization:
    """Get the movement rules for a piece type."""
    if piece_type not in _SPECIALIZATIONS:
        if piece_type == PieceType.KING:
            specialization = King()
        elif piece_type == PieceType.QUEEN:
            specialization = Queen()
        elif piece_type == PieceType.ROOK:
            specialization = Rook()
        elif piece_type == PieceType.BISHOP:
            specialization = Bishop()
        elif piece_type == PieceType.KNIGHT:
            specialization = Knight()
        elif piece_type == PieceType.PAWN:
            specialization = Pawn()
        else:
            unreachable(piece_type)
        _SPECIALIZATIONS[piece_type] = specialization
    return _SPECIALIZATIONS[piece_type]

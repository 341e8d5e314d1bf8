"""Checkers rule engine with forced captures and multi-jump turns."""

from typing import Dict, Iterable, List, Optional, Tuple

from ..models.grid import PlayerColor, Position, DIAGONAL_OFFSETS, opposite_color
from ..models.checkers.game_state import CheckersGameState, LayoutEntry
from ..models.checkers.piece import CheckersPiece
from ..utils.logging_config import get_game_logger
from .board_engine import BoardGameEngine, MoveTarget
from .event_system import GameEvent
from .move_result import MoveResult, MoveValidationResult

logger = get_game_logger(__name__)

# Single diagonal steps followed by two-square jumps
MOVE_OFFSETS: Tuple[Position, ...] = DIAGONAL_OFFSETS + tuple(offset * 2 for offset in DIAGONAL_OFFSETS)


class CheckersEngine(BoardGameEngine):
    """Runs a game of checkers.

    Whenever a piece of the color to move can capture, only capturing pieces
    may move and only by jumping. A piece that captures and can capture again
    is pinned: it is the only piece allowed to move until its chain ends.
    """

    def __init__(self, geometry=None, event_manager=None, config=None):
        super().__init__(geometry, event_manager, config)
        self.state = CheckersGameState.standard()
        self._standard_layout = True
        self._dragging: Optional[CheckersPiece] = None
        self._current_valid_moves: Dict[Position, MoveValidationResult] = {}

    def new_game(self, layout: Optional[Iterable[LayoutEntry]] = None,
                 required_color: PlayerColor = PlayerColor.BLACK) -> None:
        """Reset the board; the standard pieces are reused between games."""
        if layout is not None:
            self.state = CheckersGameState.from_layout(layout, required_color)
            self._standard_layout = False
        elif self._standard_layout:
            self.state.reset(required_color)
        else:
            self.state = CheckersGameState.standard()
            self.state.required_color = required_color
            self._standard_layout = True

        self._clear_drag()
        self.state.pieces_that_can_capture = self.get_pieces_that_can_capture(required_color)
        logger.debug(f"New checkers game, {required_color.value} to play")
        self.trigger(GameEvent.NEW_GAME, color=required_color)

    # Properties

    @property
    def required_color(self) -> PlayerColor:
        return self.state.required_color

    @property
    def required_piece(self) -> Optional[CheckersPiece]:
        return self.state.required_piece

    @property
    def pieces_that_can_capture(self) -> List[CheckersPiece]:
        return list(self.state.pieces_that_can_capture)

    @property
    def is_game_over(self) -> bool:
        return self.state.is_game_over

    @property
    def winner(self) -> Optional[PlayerColor]:
        return self.state.winner

    def get_movables(self) -> Iterable[CheckersPiece]:
        return iter(self.state.active_pieces)

    def position_of(self, piece: CheckersPiece) -> Position:
        return piece.current_position

    def resolve_target(self, target: MoveTarget) -> Optional[Position]:
        """Drags only ever snap onto dark squares."""
        position = super().resolve_target(target)
        if position is None or (not isinstance(target, Position) and not position.is_odd):
            return None
        return position

    # Validation

    def jumped_piece(self, from_position: Position, to_position: Position) -> Optional[CheckersPiece]:
        return self.state.piece_at(from_position + (to_position - from_position) / 2)

    def validate_move(self, piece: CheckersPiece, to_position: Position) -> MoveValidationResult:
        """Classify a single destination for a piece."""
        if self.state.piece_at(to_position) is not None:
            return MoveValidationResult.OCCUPIED
        if not piece.is_direction_allowed(to_position):
            return MoveValidationResult.INVALID

        distance = piece.current_position.chebyshev_distance(to_position)
        if distance == 1:
            have_taken_this_turn = self.state.last_piece_to_capture is piece
            can_capture = bool(self.state.pieces_that_can_capture)
            if have_taken_this_turn or can_capture:
                return MoveValidationResult.INVALID
            return MoveValidationResult.VALID

        jumped = self.jumped_piece(piece.current_position, to_position)
        if jumped is not None and jumped.color == opposite_color(piece.color):
            return MoveValidationResult.VALID
        return MoveValidationResult.INVALID

    def validate_moves(self, piece: CheckersPiece) -> Dict[Position, MoveValidationResult]:
        """Classify every on-board step and jump destination of a piece."""
        position = piece.current_position
        return {
            position + offset: self.validate_move(piece, position + offset)
            for offset in MOVE_OFFSETS
            if self.geometry.is_in_bounds(position + offset)
        }

    def has_any_valid_moves(self, piece: CheckersPiece) -> bool:
        return any(result == MoveValidationResult.VALID for result in self.validate_moves(piece).values())

    def color_has_any_valid_moves(self, color: PlayerColor) -> bool:
        return any(self.has_any_valid_moves(piece)
                   for piece in self.state.active_pieces if piece.color == color)

    def get_pieces_that_can_capture(self, color: PlayerColor) -> List[CheckersPiece]:
        """Active pieces of a color with at least one valid jump."""
        capturers = []
        for piece in self.state.active_pieces:
            if piece.color != color:
                continue
            for destination, result in self.validate_moves(piece).items():
                if result == MoveValidationResult.VALID and \
                        destination.chebyshev_distance(piece.current_position) == 2:
                    capturers.append(piece)
                    break
        return capturers

    def _move_blocker(self, piece: CheckersPiece) -> Optional[str]:
        """Reason the piece may not move right now, if any."""
        if self.is_game_over:
            return "The game is over"
        if piece.captured:
            return "Piece has been captured"
        if self.required_color != PlayerColor.NONE and piece.color != self.required_color:
            return f"It is {self.required_color.value}'s turn"
        if self.required_piece is not None and piece is not self.required_piece:
            return "Another piece must continue capturing"
        if self.state.pieces_that_can_capture and piece not in self.state.pieces_that_can_capture:
            return "Another piece must capture"
        return None

    # Move lifecycle

    def begin_move(self, piece: CheckersPiece) -> Dict[Position, MoveValidationResult]:
        """Start dragging a piece; empty if the piece may not move now."""
        self._clear_drag()
        if self._move_blocker(piece) is not None:
            return {}
        self._dragging = piece
        self._current_valid_moves = self.validate_moves(piece)
        return dict(self._current_valid_moves)

    def move(self, piece: CheckersPiece, target: MoveTarget) -> MoveValidationResult:
        """Classify the tile under a dragged piece without changing anything."""
        position = self.resolve_target(target)
        if position is None:
            return MoveValidationResult.INVALID
        if self._move_blocker(piece) is not None:
            return MoveValidationResult.INVALID
        if piece is self._dragging:
            moves = self._current_valid_moves
        else:
            moves = self.validate_moves(piece)
        return moves.get(position, MoveValidationResult.INVALID)

    def end_move(self, piece: CheckersPiece, target: MoveTarget) -> MoveResult:
        """Try to commit a step or jump and advance the turn state."""
        self._clear_drag()
        from_position = piece.current_position

        blocker = self._move_blocker(piece)
        if blocker is not None:
            logger.debug(f"Rejected move of {piece}: {blocker}")
            return MoveResult.failure_result(piece, from_position, blocker)

        to_position = self.resolve_target(target)
        if to_position is None or to_position == from_position:
            return MoveResult.failure_result(piece, from_position, "No destination tile")
        if self.validate_moves(piece).get(to_position) != MoveValidationResult.VALID:
            logger.debug(f"Rejected move of {piece} to {to_position}")
            return MoveResult.failure_result(piece, from_position, f"Cannot move to {to_position}")

        piece.current_position = to_position
        promoted = piece.maybe_promote()
        logger.debug(f"{piece.color.value} moved {from_position} -> {to_position}")
        if promoted:
            self.trigger(GameEvent.PIECE_PROMOTED, source=piece, color=piece.color)

        captured = []
        continues = False
        if from_position.chebyshev_distance(to_position) == 1:
            self._pass_turn(piece.color)
        else:
            jumped = self.jumped_piece(from_position, to_position)
            jumped.capture()
            captured.append(jumped)
            self.state.last_piece_to_capture = piece
            self.trigger(GameEvent.PIECE_CAPTURED, source=piece, target=jumped, color=jumped.color)

            if self.has_any_valid_moves(piece):
                # Further captures are compulsory, and only this piece may make them
                continues = True
                self.state.required_piece = piece
                self.state.required_color = piece.color
                self.state.pieces_that_can_capture = [piece]
                self._dragging = piece
                self._current_valid_moves = self.validate_moves(piece)
            else:
                self._pass_turn(piece.color)

        if not self.color_has_any_valid_moves(self.required_color):
            self.state.winner = opposite_color(self.required_color)
            logger.info(f"Game over: {self.state.winner.value} wins")
            self.trigger(GameEvent.GAME_OVER, source=piece, winner=self.state.winner)

        return MoveResult.success_result(piece, from_position, to_position,
                                         captured=captured, promoted=promoted, continues=continues)

    def _clear_drag(self) -> None:
        self._dragging = None
        self._current_valid_moves = {}

    def _pass_turn(self, from_color: PlayerColor) -> None:
        self.state.required_color = opposite_color(from_color)
        self.state.required_piece = None
        self.state.last_piece_to_capture = None
        self.state.pieces_that_can_capture = self.get_pieces_that_can_capture(self.state.required_color)
        self.trigger(GameEvent.TURN_CHANGED, color=self.state.required_color)

"""Chess rule engine: legality, check detection, promotion and game end."""

from typing import Dict, Iterable, List, Optional

from ..models.grid import PlayerColor, Position, opposite_color
from ..models.chess.game_state import ChessGameState, LayoutEntry
from ..models.chess.move import Move, MoveType
from ..models.chess.piece import ChessPiece, PieceType, PROMOTION_TYPES
from ..models.chess.positions import promotion_rank_for_color
from ..utils.logging_config import get_game_logger
from .board_engine import BoardGameEngine, MoveTarget
from .chess_pieces import King, Pawn, specialization_for_type
from .event_system import GameEvent
from .move_result import MoveResult, MoveValidationResult

logger = get_game_logger(__name__)


class ChessEngine(BoardGameEngine):
    """Runs a game of chess.

    The engine is either waiting for the playing color to move, waiting for a
    pawn promotion choice, or finished because a king has been captured.
    Moves are validated against the pieces' movement rules and then filtered
    by previewing each one to make sure the mover's king is not left attacked.
    """

    def __init__(self, geometry=None, event_manager=None, config=None):
        super().__init__(geometry, event_manager, config)
        self.state = ChessGameState.standard()
        self._standard_layout = True
        self._promoting_piece: Optional[ChessPiece] = None
        self._winner: Optional[PlayerColor] = None
        self._dragging: Optional[ChessPiece] = None
        self._drag_moves: Dict[Position, MoveValidationResult] = {}

    # Game setup

    def new_game(self, layout: Optional[Iterable[LayoutEntry]] = None,
                 playing_color: PlayerColor = PlayerColor.WHITE) -> None:
        """Reset to the standard layout, or to a custom one.

        The standard pieces are reused between games.
        """
        if layout is not None:
            self.state = ChessGameState.from_layout(layout, playing_color)
            self._standard_layout = False
        elif self._standard_layout:
            self.state.reset(playing_color)
        else:
            self.state = ChessGameState.standard()
            self.state.playing_color = playing_color
            self._standard_layout = True

        self._promoting_piece = None
        self._winner = None
        self._clear_drag()
        logger.debug(f"New chess game, {playing_color.value} to play")
        self.trigger(GameEvent.NEW_GAME, color=playing_color)

    # Properties

    @property
    def playing_color(self) -> PlayerColor:
        return self.state.playing_color

    @property
    def promoting_piece(self) -> Optional[ChessPiece]:
        return self._promoting_piece

    @property
    def is_game_over(self) -> bool:
        return self.state.is_game_over

    @property
    def winner(self) -> Optional[PlayerColor]:
        return self._winner

    @property
    def history(self):
        return self.state.history

    def get_movables(self) -> Iterable[ChessPiece]:
        return iter(self.state.alive_pieces)

    def position_of(self, piece: ChessPiece) -> Position:
        return self.state.get_position(piece)

    # Attack detection

    def can_be_taken(self, color: PlayerColor, position: Position, recurse: bool = False) -> List[Position]:
        """Find the opposing pieces that attack a square.

        Args:
            color: Color of the (possibly hypothetical) piece on the square
            position: Square to test
            recurse: Also require each attacking move to be legal for the attacker

        Returns:
            Current squares of every attacking piece
        """
        attackers = []
        for piece in self.state.alive_pieces:
            if piece.color == color:
                continue

            piece_position = self.state.get_position(piece)
            attacked = list(specialization_for_type(piece.type).get_attacked_squares(
                piece.color, piece_position, self.state))
            if recurse:
                attacked = [square for square in attacked if self._is_legal(piece, square)]

            if position in attacked:
                attackers.append(piece_position)
        return attackers

    def _is_attacked(self, color: PlayerColor, position: Position) -> bool:
        return bool(self.can_be_taken(color, position))

    def get_checkers(self, color: PlayerColor) -> List[Position]:
        """Squares of the pieces giving check to a color's king."""
        king = self.state.king(color)
        if self.state.is_captured(king):
            return []
        return self.can_be_taken(color, self.state.get_position(king))

    def is_in_check(self, color: PlayerColor) -> bool:
        return bool(self.get_checkers(color))

    def is_checkmate(self, color: PlayerColor) -> bool:
        """True when no live piece of the color has a legal move."""
        return not any(self._is_legal(piece, square)
                       for piece in self.state.alive_pieces if piece.color == color
                       for square in self.pseudo_legal_destinations(piece))

    # Legality

    def pseudo_legal_destinations(self, piece: ChessPiece) -> List[Position]:
        position = self.state.get_position(piece)
        specialization = specialization_for_type(piece.type)
        if isinstance(specialization, King):
            return list(specialization.get_valid_moves(piece.color, position, self.state,
                                                       is_attacked=self._is_attacked))
        return list(specialization.get_valid_moves(piece.color, position, self.state))

    def _is_legal(self, piece: ChessPiece, destination: Position) -> bool:
        move = self.build_move(piece, destination)
        with self.state.preview(move):
            return not self.get_checkers(piece.color)

    def legal_destinations(self, piece: ChessPiece) -> List[Position]:
        """Squares the piece may move to without leaving its own king attacked."""
        if self.state.is_captured(piece):
            return []
        return [square for square in self.pseudo_legal_destinations(piece)
                if self._is_legal(piece, square)]

    def legal_moves(self, piece: ChessPiece) -> List[Move]:
        return [self.build_move(piece, square) for square in self.legal_destinations(piece)]

    def build_move(self, piece: ChessPiece, destination: Position) -> Move:
        """Classify a move from the piece's current square."""
        from_position = self.state.get_position(piece)
        captured = self.state.get_by_current_position(destination)
        move_type = MoveType.NORMAL

        if piece.type == PieceType.PAWN:
            if abs(destination.row - from_position.row) == 2:
                move_type = MoveType.PAWN_DOUBLE
            elif captured is None and destination.column != from_position.column:
                # Diagonal onto an empty square: the victim sits beside the pawn
                victim = self.state.get_by_current_position(Position(from_position.row, destination.column))
                if (victim is not None and victim.color != piece.color and
                        destination == Pawn.en_passant_target(piece.color, from_position, self.state)):
                    captured = victim
                    move_type = MoveType.EN_PASSANT
        elif piece.type == PieceType.KING:
            shift = destination.column - from_position.column
            if abs(shift) == 2 and destination.row == from_position.row:
                move_type = MoveType.KING_SIDE_CASTLE if shift > 0 else MoveType.QUEEN_SIDE_CASTLE

        if captured is not None and captured.type == PieceType.KING:
            move_type = MoveType.END_GAME

        return Move(piece, from_position, destination, captured, move_type)

    def _move_blocker(self, piece: ChessPiece) -> Optional[str]:
        """Reason the piece may not move right now, if any."""
        if self.is_game_over:
            return "The game is over"
        if self._promoting_piece is not None:
            return "A pawn promotion must be chosen first"
        if self.state.is_captured(piece):
            return f"{piece.name} has been captured"
        if piece.color != self.playing_color:
            return f"It is {self.playing_color.value}'s turn"
        return None

    # Move lifecycle

    def begin_move(self, piece: ChessPiece) -> Dict[Position, MoveValidationResult]:
        """Start dragging a piece; returns its legal destinations."""
        self._clear_drag()
        if self._move_blocker(piece) is not None:
            return {}

        self._dragging = piece
        self._drag_moves = {square: MoveValidationResult.VALID for square in self.legal_destinations(piece)}
        return dict(self._drag_moves)

    def move(self, piece: ChessPiece, target: MoveTarget) -> MoveValidationResult:
        """Classify the tile under a dragged piece without changing anything."""
        position = self.resolve_target(target)
        if position is None:
            return MoveValidationResult.INVALID

        if piece is not self._dragging:
            self.begin_move(piece)
        return self._drag_moves.get(position, MoveValidationResult.INVALID)

    def end_move(self, piece: ChessPiece, target: MoveTarget) -> MoveResult:
        """Try to commit a move.

        Returns:
            MoveResult whose position is the piece's square afterwards
        """
        self._clear_drag()
        from_position = self.state.get_position(piece)

        blocker = self._move_blocker(piece)
        if blocker is not None:
            logger.debug(f"Rejected move of {piece.name}: {blocker}")
            return MoveResult.failure_result(piece, from_position, blocker)

        destination = self.resolve_target(target)
        if destination is None:
            return MoveResult.failure_result(piece, from_position, "Target is not on the board")
        if destination not in self.legal_destinations(piece):
            logger.debug(f"Rejected move of {piece.name} to {destination}")
            return MoveResult.failure_result(piece, from_position, f"{piece.name} cannot move to {destination}")

        move = self.build_move(piece, destination)
        self.state.commit_move(move)
        logger.debug(f"Committed {move}")

        if move.captured is not None:
            self.trigger(GameEvent.PIECE_CAPTURED, source=piece, target=move.captured,
                         color=move.captured.color, move=move)

        if move.move_type == MoveType.END_GAME:
            self._winner = piece.color
            logger.info(f"Game over: {piece.color.value} wins")
            self.trigger(GameEvent.GAME_OVER, source=piece, winner=piece.color)
            return self._success(move)

        self.state.playing_color = opposite_color(piece.color)

        if piece.type == PieceType.PAWN and destination.row == promotion_rank_for_color(piece.color):
            self._promoting_piece = piece
            self.trigger(GameEvent.PROMOTION_PENDING, source=piece, color=piece.color)
        else:
            self._update_checks()

        if self.playing_color != piece.color:
            self.trigger(GameEvent.TURN_CHANGED, color=self.playing_color)
        return self._success(move)

    def _success(self, move: Move) -> MoveResult:
        captured = [move.captured] if move.captured is not None else []
        return MoveResult.success_result(move.piece, move.from_position, move.to_position,
                                         captured=captured, move=move, move_type=move.move_type)

    def _clear_drag(self) -> None:
        self._dragging = None
        self._drag_moves = {}

    def _update_checks(self) -> None:
        """Hand the turn to the winning side on checkmate, then report checks."""
        for color in (PlayerColor.BLACK, PlayerColor.WHITE):
            if self.is_checkmate(color):
                self.state.playing_color = opposite_color(color)
                logger.info(f"Checkmate: {color.value} has no legal moves")
                self.trigger(GameEvent.CHECKMATE, color=color)

        for color in (PlayerColor.BLACK, PlayerColor.WHITE):
            checkers = self.get_checkers(color)
            if checkers:
                self.trigger(GameEvent.CHECK, color=color, checkers=checkers,
                             king_position=self.state.get_position(self.state.king(color)))

    # Promotion

    def promote_pawn(self, piece_type: PieceType) -> bool:
        """Resolve a pending promotion.

        Returns:
            bool: False if no promotion was pending

        Raises:
            ValueError: If the piece type cannot be promoted to
        """
        if piece_type not in PROMOTION_TYPES:
            raise ValueError(f"Cannot promote a pawn to {piece_type.value}")
        if self._promoting_piece is None:
            return False

        piece = self._promoting_piece
        piece.promote_to(piece_type)
        self._promoting_piece = None
        logger.debug(f"Promoted {piece.name} to {piece_type.value}")
        self.trigger(GameEvent.PIECE_PROMOTED, source=piece, color=piece.color, piece_type=piece_type)

        playing_color = self.playing_color
        self._update_checks()
        if self.playing_color != playing_color:
            self.trigger(GameEvent.TURN_CHANGED, color=self.playing_color)
        return True

"""Reversi rule engine: line search, flips, turn skipping and game end."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.grid import (
    PlayerColor, Position, BOARD_BOUNDS, BOARD_SIZE, EIGHT_CONNECTED_OFFSETS, opposite_color,
)
from ..models.reversi.game_state import ReversiGameState
from ..models.reversi.piece import ReversiPiece
from ..utils.logging_config import get_game_logger
from .board_engine import BoardGameEngine, MoveTarget
from .event_system import GameEvent
from .move_result import MoveResult, PlacementValidationResult

logger = get_game_logger(__name__)

PIECE_COUNT = 64


@dataclass(frozen=True)
class FlipLine:
    """A run of opponent squares, from start up to (excluding) end, that a placement flips."""
    start: Position
    end: Position
    step: Position
    flip_to_color: PlayerColor

    @property
    def positions(self) -> List[Position]:
        squares = []
        position = self.start
        while position != self.end:
            squares.append(position)
            position = position + self.step
        return squares


class ReversiEngine(BoardGameEngine):
    """Runs a game of reversi.

    The first four placements fill the central 2x2 block without flipping.
    After that a placement must outflank at least one line of opponent
    pieces. A color with no legal placement is skipped once; when neither
    color can place, or the board is full, the game ends.
    """

    def __init__(self, geometry=None, event_manager=None, config=None):
        super().__init__(geometry, event_manager, config)
        self.pieces = [ReversiPiece(index) for index in range(PIECE_COUNT)]
        self.state = ReversiGameState.create_new()
        self.placing_color = PlayerColor.BLACK
        self._game_over = False
        self._winner: Optional[PlayerColor] = None
        self._piece_positions: Dict[ReversiPiece, Position] = {}

    def new_game(self, placing_color: PlayerColor = PlayerColor.BLACK) -> None:
        """Clear the board; the same 64 pieces are reused."""
        self.state = ReversiGameState.create_new()
        self.placing_color = placing_color
        self._game_over = False
        self._winner = None
        self._piece_positions = {}
        logger.debug(f"New reversi game, {placing_color.value} to place")
        self.trigger(GameEvent.NEW_GAME, color=placing_color)

    # Properties

    @property
    def is_game_over(self) -> bool:
        return self._game_over

    @property
    def winner(self) -> Optional[PlayerColor]:
        return self._winner

    def get_movables(self) -> Iterable[ReversiPiece]:
        return (piece for piece in self.pieces if piece not in self._piece_positions)

    def position_of(self, piece: ReversiPiece) -> Optional[Position]:
        return self._piece_positions.get(piece)

    def get_scores(self) -> Tuple[int, int]:
        """(black, white) piece counts."""
        return self.state.get_scores()

    # Line search

    def search_line(self, from_position: Position, step: Position,
                    self_color: PlayerColor) -> Optional[FlipLine]:
        """Find the opponent run along one direction that a placement would flip."""
        other_color = opposite_color(self_color)
        found_other = False

        for check_position in from_position.iterate_to_bounds(step, BOARD_BOUNDS):
            color = self.state.color_at(check_position)
            if color == PlayerColor.NONE:
                return None
            if color == other_color:
                found_other = True
                continue
            # Reached our own color: a line only if something was outflanked
            if not found_other:
                return None
            return FlipLine(from_position + step, check_position, step, self_color)
        return None

    def search_lines(self, position: Position, self_color: PlayerColor) -> List[FlipLine]:
        lines = []
        for offset in EIGHT_CONNECTED_OFFSETS:
            line = self.search_line(position, offset, self_color)
            if line is not None:
                lines.append(line)
        return lines

    # Validation

    def validate_placement(self, position: Optional[Position],
                           color: PlayerColor) -> Tuple[PlacementValidationResult, List[FlipLine]]:
        """Classify a placement and collect the lines it would flip."""
        if position is None:
            return PlacementValidationResult.OUT_OF_RANGE, []
        if not self.state.tile_enabled(position):
            return PlacementValidationResult.TILE_DISABLED, []
        if self.state.color_at(position) != PlayerColor.NONE:
            return PlacementValidationResult.OCCUPIED, []
        if self.state.in_setup:
            return PlacementValidationResult.VALID, []

        lines = self.search_lines(position, color)
        if not lines:
            return PlacementValidationResult.INVALID, []
        return PlacementValidationResult.VALID, lines

    def is_move_valid(self, target: MoveTarget,
                      color: Optional[PlayerColor] = None) -> Tuple[PlacementValidationResult, List[FlipLine]]:
        return self.validate_placement(self.resolve_target(target), color or self.placing_color)

    def has_valid_placement(self, color: PlayerColor) -> bool:
        return any(self.validate_placement(position, color)[0] == PlacementValidationResult.VALID
                   for position in self.state.unplayed_positions)

    # Move lifecycle

    def begin_move(self, piece: ReversiPiece) -> Dict[Position, PlacementValidationResult]:
        """Classify every tile for the color to place; empty if the piece is not placeable."""
        if self._game_over or piece in self._piece_positions:
            return {}
        return {position: self.validate_placement(position, self.placing_color)[0]
                for position in Position.get_range(0, BOARD_SIZE, 0, BOARD_SIZE)}

    def move(self, piece: ReversiPiece, target: MoveTarget) -> PlacementValidationResult:
        """Classify the tile under a dragged piece without changing anything."""
        if self._game_over or piece in self._piece_positions:
            return PlacementValidationResult.INVALID
        return self.is_move_valid(target)[0]

    def end_move(self, piece: ReversiPiece, target: MoveTarget) -> MoveResult:
        """Try to place a piece, flipping every outflanked line."""
        current = self._piece_positions.get(piece)
        if self._game_over:
            return MoveResult.failure_result(piece, current, "The game is over")
        if current is not None:
            return MoveResult.failure_result(piece, current, "Piece has already been placed")

        position = self.resolve_target(target)
        result, lines = self.validate_placement(position, self.placing_color)
        if result != PlacementValidationResult.VALID:
            logger.debug(f"Rejected placement at {position}: {result.value}")
            return MoveResult.failure_result(piece, None, f"Cannot place here: {result.value}")

        mover = self.placing_color
        self.state.place(position, piece, mover)
        self._piece_positions[piece] = position

        flipped = []
        for line in lines:
            squares = line.positions
            self.state.flip_all(squares, mover)
            flipped.extend(squares)
        logger.debug(f"{mover.value} placed at {position}, flipping {len(flipped)}")
        if flipped:
            self.trigger(GameEvent.PIECES_FLIPPED, source=piece, color=mover,
                         position=position, flipped=list(flipped))

        skipped = self._advance_turn(mover)
        black, white = self.get_scores()
        return MoveResult.success_result(piece, None, position, flipped=flipped,
                                         scores=(black, white), black_score=black, white_score=white,
                                         skipped=skipped)

    def _advance_turn(self, mover: PlayerColor) -> bool:
        """Hand the turn over, skipping a color that cannot place.

        Returns:
            bool: True if the opponent's turn was skipped
        """
        opponent = opposite_color(mover)
        if self.has_valid_placement(opponent):
            self.placing_color = opponent
            self.trigger(GameEvent.TURN_CHANGED, color=opponent)
            return False

        if self.has_valid_placement(mover):
            self.placing_color = mover
            logger.debug(f"{opponent.value} cannot place, turn returns to {mover.value}")
            self.trigger(GameEvent.TURN_SKIPPED, color=opponent)
            return True

        self._end_game()
        return False

    def _end_game(self) -> None:
        black, white = self.get_scores()
        if black > white:
            self._winner = PlayerColor.BLACK
        elif white > black:
            self._winner = PlayerColor.WHITE
        else:
            self._winner = PlayerColor.NONE
        self._game_over = True
        logger.info(f"Game over: black {black}, white {white}")
        self.trigger(GameEvent.GAME_OVER, winner=self._winner, black_score=black, white_score=white)

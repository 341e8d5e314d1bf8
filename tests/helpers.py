"""Shared test helpers and utilities for all test files."""

from typing import Iterable, List, Tuple

from grid_games.models.grid import PlayerColor, Position
from grid_games.models.chess.piece import PieceType
from grid_games.models.reversi.piece import ReversiPiece
from grid_games.engine.event_system import GameEvent, EventContext, GameEventManager
from grid_games.engine.chess_engine import ChessEngine
from grid_games.engine.checkers_engine import CheckersEngine
from grid_games.engine.reversi_engine import ReversiEngine

WHITE = PlayerColor.WHITE
BLACK = PlayerColor.BLACK


def pos(row: int, column: int) -> Position:
    """Shorthand for building positions in assertions."""
    return Position(row, column)


class EventRecorder:
    """Listener that records every event it sees."""

    def __init__(self, event_manager: GameEventManager):
        self.events: List[EventContext] = []
        event_manager.register_for_all(self.events.append)

    def of_type(self, event_type: GameEvent) -> List[EventContext]:
        return [event for event in self.events if event.event_type == event_type]

    def types(self) -> List[GameEvent]:
        return [event.event_type for event in self.events]

    def clear(self) -> None:
        self.events.clear()


def kings(white_king: Tuple[int, int] = (0, 4), black_king: Tuple[int, int] = (7, 4)):
    """Layout entries for the two kings, which every chess layout needs."""
    return [
        (PieceType.KING, WHITE, pos(*white_king)),
        (PieceType.KING, BLACK, pos(*black_king)),
    ]


def create_chess_engine(layout=None, playing_color: PlayerColor = WHITE):
    """Helper to create a chess engine with a recorder on its events."""
    engine = ChessEngine()
    recorder = EventRecorder(engine.event_manager)
    engine.new_game(layout=layout, playing_color=playing_color)
    recorder.clear()
    return engine, recorder


def chess_piece_at(engine: ChessEngine, row: int, column: int):
    return engine.state.get_by_current_position(pos(row, column))


def play_chess(engine: ChessEngine, moves: Iterable[Tuple[Tuple[int, int], Tuple[int, int]]]):
    """Play a sequence of ((row, column), (row, column)) moves, asserting each succeeds."""
    results = []
    for from_square, to_square in moves:
        piece = chess_piece_at(engine, *from_square)
        assert piece is not None, f"No piece on {from_square}"
        result = engine.end_move(piece, pos(*to_square))
        assert result.success, result.error_message
        results.append(result)
    return results


def create_checkers_engine(layout=None, required_color: PlayerColor = BLACK):
    """Helper to create a checkers engine with a recorder on its events.

    Args:
        layout: (color, (row, column)) entries, or None for the standard layout
    """
    engine = CheckersEngine()
    recorder = EventRecorder(engine.event_manager)
    if layout is not None:
        layout = [(color, pos(*square)) for color, square in layout]
    engine.new_game(layout=layout, required_color=required_color)
    recorder.clear()
    return engine, recorder


def create_reversi_engine(placing_color: PlayerColor = BLACK):
    engine = ReversiEngine()
    recorder = EventRecorder(engine.event_manager)
    engine.new_game(placing_color=placing_color)
    recorder.clear()
    return engine, recorder


def place_reversi(engine: ReversiEngine, row: int, column: int):
    """Place the next free piece for whoever is to play."""
    piece = next(iter(engine.get_movables()))
    return engine.end_move(piece, pos(row, column))


def seed_reversi_board(engine: ReversiEngine, squares: Iterable[Tuple[Tuple[int, int], PlayerColor]]):
    """Put pieces straight onto the board, bypassing placement rules."""
    for index, (square, color) in enumerate(squares):
        engine.state.place(pos(*square), ReversiPiece(1000 + index), color)


def standard_reversi_opening(engine: ReversiEngine):
    """Black (3,3), White (3,4), Black (4,3), White (4,4)."""
    return [place_reversi(engine, row, column) for row, column in ((3, 3), (3, 4), (4, 3), (4, 4))]

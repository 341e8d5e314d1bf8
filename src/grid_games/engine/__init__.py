"""Rule engines for chess, checkers and reversi."""

from .event_system import GameEvent, EventContext, GameEventManager
from .move_result import MoveResult, MoveValidationResult, PlacementValidationResult
from .board_engine import BoardGameEngine
from .chess_pieces import MoveTestResult, specialization_for_type
from .chess_engine import ChessEngine
from .checkers_engine import CheckersEngine
from .reversi_engine import ReversiEngine, FlipLine
from .game_session import GameSession, GameKind

__all__ = [
    'GameEvent',
    'EventContext',
    'GameEventManager',
    'MoveResult',
    'MoveValidationResult',
    'PlacementValidationResult',
    'BoardGameEngine',
    'MoveTestResult',
    'specialization_for_type',
    'ChessEngine',
    'CheckersEngine',
    'ReversiEngine',
    'FlipLine',
    'GameSession',
    'GameKind',
]

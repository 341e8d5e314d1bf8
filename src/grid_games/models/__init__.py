"""Board game data models."""

from . import grid
from . import geometry
from . import chess
from . import checkers
from . import reversi

__all__ = ["grid", "geometry", "chess", "checkers", "reversi"]

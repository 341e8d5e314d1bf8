"""Shared utilities: logging setup and error helpers."""

from .logging_config import setup_logging, get_game_logger
from .errors import UnreachableStateError, unreachable

__all__ = [
    'setup_logging',
    'get_game_logger',
    'UnreachableStateError',
    'unreachable',
]

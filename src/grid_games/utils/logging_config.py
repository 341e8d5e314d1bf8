"""Logging configuration for the grid game engines."""

import logging
import sys

PACKAGE_PREFIX = "grid_games."

LOG_FORMATS = {
    "simple": "%(name)s - %(levelname)s - %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
    "json": '{"time": "%(asctime)s", "logger": "%(name)s", "level": "%(levelname)s", "message": "%(message)s"}',
}


def setup_logging(level: str = "INFO", format_style: str = "simple") -> None:
    """
    Configure the root logger the engine loggers propagate to.

    The first call installs a stdout handler; later calls only adjust the
    level, so importing the package never stacks handlers.

    Args:
        level: Logging level name; unknown names fall back to INFO
        format_style: "simple", "detailed" or "json"; unknown styles fall back to "simple"
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMATS.get(format_style, LOG_FORMATS["simple"]),
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger().setLevel(numeric_level)


def get_game_logger(module_name: str) -> logging.Logger:
    """
    Get a logger named after a module, minus the package prefix.

    Args:
        module_name: Full module name (e.g., 'grid_games.engine.chess_engine')

    Returns:
        Logger named e.g. 'engine.chess_engine'
    """
    if module_name.startswith(PACKAGE_PREFIX):
        module_name = module_name[len(PACKAGE_PREFIX):]
    return logging.getLogger(module_name)

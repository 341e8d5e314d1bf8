"""Engine configuration."""

import os
from dataclasses import dataclass

from .models.grid import BOARD_SIZE


@dataclass(frozen=True)
class EngineConfig:
    """Board dimensions and input-snapping settings shared by the engines."""
    rows: int = BOARD_SIZE
    columns: int = BOARD_SIZE

    # World units within which a dragged piece snaps onto a tile
    snap_distance: float = 1.5

    # Default geometry
    tile_size: float = 1.0
    border_thickness: float = 0.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        # Rule tables such as promotion rows and the reversi centre assume 8x8
        if (self.rows, self.columns) != (BOARD_SIZE, BOARD_SIZE):
            raise ValueError(f"Only {BOARD_SIZE}x{BOARD_SIZE} boards are supported, got {self.rows}x{self.columns}")
        if self.snap_distance <= 0:
            raise ValueError(f"Snap distance must be positive: {self.snap_distance}")
        if self.tile_size <= 0:
            raise ValueError(f"Tile size must be positive: {self.tile_size}")
        if self.border_thickness < 0:
            raise ValueError(f"Border thickness cannot be negative: {self.border_thickness}")

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """Create a configuration, overriding defaults from the environment."""
        defaults = cls()
        return cls(
            snap_distance=_float_from_env('GRID_GAMES_SNAP_DISTANCE', defaults.snap_distance),
            tile_size=_float_from_env('GRID_GAMES_TILE_SIZE', defaults.tile_size),
            border_thickness=_float_from_env('GRID_GAMES_BORDER_THICKNESS', defaults.border_thickness),
        )


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from None

"""Shared plumbing for the per-game rule engines."""

from typing import Any, Optional, Union

from ..config import EngineConfig
from ..models.geometry import BoardGeometry, GridGeometry, WorldCoordinate
from ..models.grid import PlayerColor, Position
from .event_system import GameEventManager, GameEvent, EventContext

# Engines accept either a logical square or a world coordinate from a drag
MoveTarget = Union[Position, WorldCoordinate]


class BoardGameEngine:
    """Holds the geometry, event manager and configuration an engine works with."""

    def __init__(self, geometry: Optional[BoardGeometry] = None,
                 event_manager: Optional[GameEventManager] = None,
                 config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.geometry = geometry or GridGeometry(
            rows=self.config.rows,
            columns=self.config.columns,
            tile_size=self.config.tile_size,
            border_thickness=self.config.border_thickness,
        )
        self.event_manager = event_manager or GameEventManager()

    def resolve_target(self, target: MoveTarget) -> Optional[Position]:
        """Turn a move target into a board square, or None if it misses the board."""
        if isinstance(target, Position):
            return target if self.geometry.is_in_bounds(target) else None
        return self.geometry.tile_for_world_position(target, self.config.snap_distance)

    def world_position(self, position: Position) -> WorldCoordinate:
        return self.geometry.position_for_tile(position.row, position.column)

    def trigger(self, event: GameEvent, source: Any = None, target: Any = None,
                color: Optional[PlayerColor] = None, winner: Optional[PlayerColor] = None,
                **additional_data):
        """Build an EventContext and dispatch it."""
        return self.event_manager.trigger_event(EventContext(
            event_type=event,
            source=source,
            target=target,
            color=color,
            winner=winner,
            additional_data=additional_data
        ))

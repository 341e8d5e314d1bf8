"""Event system for notifying collaborators of game state changes."""

from enum import Enum
from typing import Dict, Any, List, Optional, Callable
from dataclasses import dataclass

from ..models.grid import PlayerColor
from ..utils.logging_config import get_game_logger

logger = get_game_logger(__name__)


class GameEvent(Enum):
    """Types of game events that collaborators can listen for."""
    # Capture events
    PIECE_CAPTURED = "piece_captured"
    PIECES_FLIPPED = "pieces_flipped"

    # Chess king safety
    CHECK = "check"
    CHECKMATE = "checkmate"

    # Promotion events
    PROMOTION_PENDING = "promotion_pending"
    PIECE_PROMOTED = "piece_promoted"

    # Turn structure events
    TURN_CHANGED = "turn_changed"
    TURN_SKIPPED = "turn_skipped"

    # Game state events
    NEW_GAME = "new_game"
    GAME_OVER = "game_over"


@dataclass
class EventContext:
    """Context information for game events."""
    event_type: GameEvent
    source: Any = None  # The piece that caused the event
    target: Any = None  # The piece affected by the event (if any)
    color: Optional[PlayerColor] = None  # The color the event concerns
    winner: Optional[PlayerColor] = None  # For GAME_OVER
    additional_data: Dict[str, Any] = None

    def __post_init__(self):
        if self.additional_data is None:
            self.additional_data = {}


Listener = Callable[[EventContext], Any]


class GameEventManager:
    """Dispatches game events to registered listeners.

    Listeners are plain callables taking an EventContext. A listener that
    raises does not stop dispatch to the others; the error is logged and
    reported in the results of trigger_event.
    """

    def __init__(self):
        self._listeners: Dict[GameEvent, List[Listener]] = {}
        self._history: List[EventContext] = []

    def register_listener(self, event: GameEvent, listener: Listener) -> None:
        """Register a listener for one event type."""
        if event not in self._listeners:
            self._listeners[event] = []
        self._listeners[event].append(listener)

    def register_for_all(self, listener: Listener) -> None:
        for event in GameEvent:
            self.register_listener(event, listener)

    def unregister_listener(self, listener: Listener, event: Optional[GameEvent] = None) -> None:
        """Unregister a listener from one event type, or from all of them."""
        event_lists = [self._listeners.get(event, [])] if event else self._listeners.values()
        for event_list in event_lists:
            if listener in event_list:
                event_list.remove(listener)

    def trigger_event(self, event_context: EventContext) -> List[str]:
        """Trigger an event and call every listener registered for it."""
        self._history.append(event_context)
        results = []

        for listener in list(self._listeners.get(event_context.event_type, [])):
            try:
                listener(event_context)
            except Exception as e:
                logger.exception("Listener %r failed on %s", listener, event_context.event_type.value)
                results.append(f"Error in listener {listener}: {str(e)}")

        return results

    @property
    def history(self) -> List[EventContext]:
        """Every event triggered so far, oldest first."""
        return list(self._history)

    def last_event(self, event_type: Optional[GameEvent] = None) -> Optional[EventContext]:
        """Most recent event, optionally of a given type."""
        for event_context in reversed(self._history):
            if event_type is None or event_context.event_type == event_type:
                return event_context
        return None

    def clear_history(self) -> None:
        self._history.clear()

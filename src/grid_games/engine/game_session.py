"""Game session: owns the engines and the collaborators they share."""

from enum import Enum
from typing import Dict, Optional, Union

from ..config import EngineConfig
from ..models.geometry import BoardGeometry, GridGeometry
from ..utils.errors import unreachable
from ..utils.logging_config import get_game_logger
from .checkers_engine import CheckersEngine
from .chess_engine import ChessEngine
from .event_system import GameEventManager
from .reversi_engine import ReversiEngine

logger = get_game_logger(__name__)

Engine = Union[ChessEngine, CheckersEngine, ReversiEngine]


class GameKind(Enum):
    """The games a session can host."""
    CHESS = "chess"
    CHECKERS = "checkers"
    REVERSI = "reversi"


class GameSession:
    """Hands one engine per game kind to renderers and input handlers.

    All engines share the session's geometry, event manager and
    configuration, so a collaborator registers its listeners once.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 geometry: Optional[BoardGeometry] = None,
                 event_manager: Optional[GameEventManager] = None):
        self.config = config or EngineConfig.from_env()
        self.geometry = geometry or GridGeometry(
            rows=self.config.rows,
            columns=self.config.columns,
            tile_size=self.config.tile_size,
            border_thickness=self.config.border_thickness,
        )
        self.event_manager = event_manager or GameEventManager()
        self._engines: Dict[GameKind, Engine] = {}
        self.active_kind: Optional[GameKind] = None

    def engine(self, kind: GameKind) -> Engine:
        """Get the engine for a game kind, creating it on first use."""
        if kind not in self._engines:
            self._engines[kind] = self._create_engine(kind)
        return self._engines[kind]

    def _create_engine(self, kind: GameKind) -> Engine:
        if kind == GameKind.CHESS:
            engine_class = ChessEngine
        elif kind == GameKind.CHECKERS:
            engine_class = CheckersEngine
        elif kind == GameKind.REVERSI:
            engine_class = ReversiEngine
        else:
            unreachable(kind)
        return engine_class(geometry=self.geometry, event_manager=self.event_manager, config=self.config)

    def select_game(self, kind: GameKind) -> Engine:
        """Activate a game and start it afresh."""
        engine = self.engine(kind)
        engine.new_game()
        self.active_kind = kind
        logger.info(f"Selected {kind.value}")
        return engine

    @property
    def active_engine(self) -> Optional[Engine]:
        if self.active_kind is None:
            return None
        return self._engines[self.active_kind]

    @property
    def chess(self) -> ChessEngine:
        return self.engine(GameKind.CHESS)

    @property
    def checkers(self) -> CheckersEngine:
        return self.engine(GameKind.CHECKERS)

    @property
    def reversi(self) -> ReversiEngine:
        return self.engine(GameKind.REVERSI)

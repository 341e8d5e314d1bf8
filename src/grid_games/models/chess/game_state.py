"""Chess game state: pieces plus an append-only move history."""

from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from ..grid import PlayerColor, Position, BOARD_BOUNDS
from .move import Move, MoveType
from .piece import ChessPiece, PieceType
from .positions import (
    QUEENS_ROOK_FILE, QUEENS_KNIGHT_FILE, QUEENS_BISHOP_FILE, QUEEN_FILE,
    KING_FILE, KINGS_BISHOP_FILE, KINGS_KNIGHT_FILE, KINGS_ROOK_FILE,
    castle_position, pawn_rank_for_color, rank_for_color
)

BACK_RANK_LAYOUT = (
    (PieceType.ROOK, QUEENS_ROOK_FILE),
    (PieceType.KNIGHT, QUEENS_KNIGHT_FILE),
    (PieceType.BISHOP, QUEENS_BISHOP_FILE),
    (PieceType.QUEEN, QUEEN_FILE),
    (PieceType.KING, KING_FILE),
    (PieceType.BISHOP, KINGS_BISHOP_FILE),
    (PieceType.KNIGHT, KINGS_KNIGHT_FILE),
    (PieceType.ROOK, KINGS_ROOK_FILE),
)

LayoutEntry = Tuple[PieceType, PlayerColor, Position]


@dataclass
class _DerivedIndex:
    """Positions and statuses derived by replaying the history."""
    positions: Dict[ChessPiece, Position]
    occupants: Dict[Position, ChessPiece]
    captured: List[ChessPiece]
    captured_set: Set[ChessPiece]
    moved: Set[ChessPiece]


@dataclass
class ChessGameState:
    """Authoritative owner of the chess pieces and the move history.

    A piece's current square, whether it has moved and whether it has been
    captured are never stored; they are derived by replaying the committed
    history plus any speculative preview moves. The derived index is cached
    and rebuilt whenever either layer changes.
    """
    pieces: List[ChessPiece] = field(default_factory=list)
    playing_color: PlayerColor = PlayerColor.WHITE

    _moves: List[Move] = field(default_factory=list, repr=False)
    _preview: List[Move] = field(default_factory=list, repr=False)
    _index: Optional[_DerivedIndex] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate the starting layout."""
        squares = Counter(piece.initial_position for piece in self.pieces)
        overlapping = [square for square, count in squares.items() if count > 1]
        if overlapping:
            raise ValueError(f"More than one piece on {', '.join(str(s) for s in overlapping)}")

        for piece in self.pieces:
            if not BOARD_BOUNDS.contains(piece.initial_position):
                raise ValueError(f"{piece.name} is off the board at {piece.initial_position}")

        for color in (PlayerColor.WHITE, PlayerColor.BLACK):
            kings = sum(1 for piece in self.pieces
                        if piece.color == color and piece.type == PieceType.KING)
            if kings != 1:
                raise ValueError(f"{color.value.title()} must have exactly one king, found {kings}")

    # Construction

    @classmethod
    def standard(cls) -> 'ChessGameState':
        """Create a game state with the standard starting layout."""
        pieces = []
        for color in (PlayerColor.WHITE, PlayerColor.BLACK):
            rank = rank_for_color(color)
            for piece_type, file in BACK_RANK_LAYOUT:
                pieces.append(ChessPiece(piece_type, color, Position(rank, file)))

            pawn_rank = pawn_rank_for_color(color)
            for file in range(8):
                pieces.append(ChessPiece(PieceType.PAWN, color, Position(pawn_rank, file)))

        return cls(pieces=pieces)

    @classmethod
    def from_layout(cls, layout: Iterable[LayoutEntry],
                    playing_color: PlayerColor = PlayerColor.WHITE) -> 'ChessGameState':
        """Create a game state from (type, color, square) entries."""
        pieces = [ChessPiece(piece_type, color, position) for piece_type, color, position in layout]
        return cls(pieces=pieces, playing_color=playing_color)

    # History

    @property
    def history(self) -> Tuple[Move, ...]:
        """Committed moves, oldest first."""
        return tuple(self._moves)

    @property
    def is_previewing(self) -> bool:
        return bool(self._preview)

    def last_move(self) -> Optional[Move]:
        """Most recent move, including a previewed one."""
        if self._preview:
            return self._preview[-1]
        return self._moves[-1] if self._moves else None

    def reset(self, playing_color: PlayerColor = PlayerColor.WHITE) -> None:
        """Clear the history and undo promotions, keeping the same pieces."""
        if self._preview:
            raise RuntimeError("Cannot reset while a preview is active")
        for piece in self.pieces:
            piece.reset()
        self._moves.clear()
        self._index = None
        self.playing_color = playing_color

    def commit_move(self, move: Move) -> None:
        if self._preview:
            raise RuntimeError("Cannot commit a move while a preview is active")
        self._moves.append(move)
        self._index = None

    @contextmanager
    def preview(self, move: Move) -> Iterator['ChessGameState']:
        """Speculatively apply a move for the duration of the block.

        The move is always rolled back on exit, however the block is left.
        """
        self._preview.append(move)
        self._index = None
        try:
            yield self
        finally:
            self._preview.pop()
            self._index = None

    @property
    def is_game_over(self) -> bool:
        return any(move.move_type == MoveType.END_GAME for move in self._moves)

    # Derived state

    def _derived(self) -> _DerivedIndex:
        if self._index is None:
            self._index = self._replay()
        return self._index

    def _replay(self) -> _DerivedIndex:
        positions = {piece: piece.initial_position for piece in self.pieces}
        captured: List[ChessPiece] = []
        moved: Set[ChessPiece] = set()

        for move in self._moves + self._preview:
            if move.captured is not None:
                captured.append(move.captured)
            positions[move.piece] = move.to_position
            moved.add(move.piece)

            if move.is_castle:
                rook = self._castling_rook(move)
                if rook is not None:
                    positions[rook] = castle_position(rook.color, rook.initial_position.column)
                    moved.add(rook)

        captured_set = set(captured)
        occupants = {position: piece for piece, position in positions.items()
                     if piece not in captured_set}
        return _DerivedIndex(positions, occupants, captured, captured_set, moved)

    def _castling_rook(self, move: Move) -> Optional[ChessPiece]:
        rook_file = KINGS_ROOK_FILE if move.move_type == MoveType.KING_SIDE_CASTLE else QUEENS_ROOK_FILE
        rook = self.get_by_initial_position(Position(move.from_position.row, rook_file))
        if rook is None or rook.color != move.piece.color or rook.piece_type != PieceType.ROOK:
            return None
        return rook

    def get_position(self, piece: ChessPiece) -> Position:
        return self._derived().positions[piece]

    def has_moved(self, piece: ChessPiece) -> bool:
        return piece in self._derived().moved

    def is_captured(self, piece: ChessPiece) -> bool:
        return piece in self._derived().captured_set

    @property
    def captured(self) -> List[ChessPiece]:
        """Captured pieces in capture order."""
        return list(self._derived().captured)

    @property
    def alive_pieces(self) -> List[ChessPiece]:
        captured = self._derived().captured_set
        return [piece for piece in self.pieces if piece not in captured]

    def get_by_initial_position(self, position: Position) -> Optional[ChessPiece]:
        for piece in self.pieces:
            if piece.initial_position == position:
                return piece
        return None

    def get_by_current_position(self, position: Position) -> Optional[ChessPiece]:
        """Get the live piece on a square, if any."""
        return self._derived().occupants.get(position)

    def king(self, color: PlayerColor) -> ChessPiece:
        for piece in self.pieces:
            if piece.color == color and piece.type == PieceType.KING:
                return piece
        raise ValueError(f"No {color.value} king on the board")

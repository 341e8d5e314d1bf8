"""Named files, ranks and home squares of the chess board."""

from ..grid import PlayerColor, Position
from ...utils.errors import unreachable

QUEENS_ROOK_FILE = 0
QUEENS_KNIGHT_FILE = 1
QUEENS_BISHOP_FILE = 2
QUEEN_FILE = 3
KING_FILE = 4
KINGS_BISHOP_FILE = 5
KINGS_KNIGHT_FILE = 6
KINGS_ROOK_FILE = 7

WHITE_RANK = 0
BLACK_RANK = 7

WHITE_KING = Position(WHITE_RANK, KING_FILE)
BLACK_KING = Position(BLACK_RANK, KING_FILE)


def rank_for_color(color: PlayerColor) -> int:
    """Home (back) rank for a color."""
    return BLACK_RANK if color == PlayerColor.BLACK else WHITE_RANK


def pawn_rank_for_color(color: PlayerColor) -> int:
    """Starting rank of a color's pawns."""
    return WHITE_RANK + 1 if color == PlayerColor.WHITE else BLACK_RANK - 1


def promotion_rank_for_color(color: PlayerColor) -> int:
    """Rank on which a color's pawns promote (the opponent's home rank)."""
    return BLACK_RANK if color == PlayerColor.WHITE else WHITE_RANK


def forward_for_color(color: PlayerColor) -> int:
    """Row delta of a single forward pawn step."""
    return 1 if color == PlayerColor.WHITE else -1


def king_home(color: PlayerColor) -> Position:
    return BLACK_KING if color == PlayerColor.BLACK else WHITE_KING


def castle_position(color: PlayerColor, rook_file: int) -> Position:
    """Square a rook lands on when its side castles."""
    rank = rank_for_color(color)
    if rook_file == KINGS_ROOK_FILE:
        return Position(rank, KINGS_BISHOP_FILE)
    if rook_file == QUEENS_ROOK_FILE:
        return Position(rank, QUEEN_FILE)
    unreachable(rook_file)

"""Tests for the chess engine."""

import pytest

from grid_games.engine import chess_pieces
from grid_games.engine.chess_pieces import MoveTestResult, specialization_for_type
from grid_games.engine.event_system import GameEvent
from grid_games.engine.move_result import MoveValidationResult
from grid_games.models.chess import MoveType, PieceType
from grid_games.utils.errors import UnreachableStateError
from tests.helpers import (
    WHITE, BLACK, pos, kings, create_chess_engine, chess_piece_at, play_chess,
)


@pytest.fixture
def engine():
    engine, _ = create_chess_engine()
    return engine


def destinations(engine, row, column):
    return set(engine.begin_move(chess_piece_at(engine, row, column)))


class TestMoveGeneration:
    """Test per-piece movement rules."""

    def test_square_classification(self, engine):
        assert chess_pieces.test_move(WHITE, pos(1, 0), engine.state) == MoveTestResult.INVALID
        assert chess_pieces.test_move(WHITE, pos(6, 0), engine.state) == MoveTestResult.CAPTURE
        assert chess_pieces.test_move(WHITE, pos(3, 3), engine.state) == MoveTestResult.MOVE
        assert chess_pieces.test_move(WHITE, pos(8, 0), engine.state) == MoveTestResult.INVALID

    def test_opening_has_twenty_moves(self, engine):
        """Test the classic count of legal first moves."""
        white = [piece for piece in engine.get_movables() if piece.color == WHITE]
        assert sum(len(engine.legal_destinations(piece)) for piece in white) == 20

    def test_knight_from_home(self, engine):
        assert destinations(engine, 0, 1) == {pos(2, 0), pos(2, 2)}

    def test_pawn_single_and_double_step(self, engine):
        assert destinations(engine, 1, 4) == {pos(2, 4), pos(3, 4)}

    def test_pawn_double_step_needs_both_squares_empty(self):
        engine, _ = create_chess_engine(kings() + [
            (PieceType.PAWN, WHITE, pos(1, 0)),
            (PieceType.PAWN, WHITE, pos(1, 1)),
            (PieceType.KNIGHT, BLACK, pos(2, 0)),
            (PieceType.KNIGHT, BLACK, pos(3, 1)),
        ])
        # Blocked directly in front, nothing to capture
        assert destinations(engine, 1, 0) == set()
        # Far square blocked: single step and the diagonal capture
        assert destinations(engine, 1, 1) == {pos(2, 1), pos(2, 0)}

    def test_sliding_piece_stops_at_blockers(self):
        engine, _ = create_chess_engine(kings() + [
            (PieceType.ROOK, WHITE, pos(3, 3)),
            (PieceType.PAWN, WHITE, pos(5, 3)),
            (PieceType.PAWN, BLACK, pos(3, 6)),
        ])
        assert destinations(engine, 3, 3) == {
            pos(4, 3),
            pos(2, 3), pos(1, 3), pos(0, 3),
            pos(3, 2), pos(3, 1), pos(3, 0),
            pos(3, 4), pos(3, 5), pos(3, 6),
        }

    def test_unknown_type_is_unreachable(self):
        with pytest.raises(UnreachableStateError):
            specialization_for_type("bishop-knight")


class TestTurnsAndLegality:
    """Test turn order and king safety."""

    def test_black_cannot_move_first(self, engine):
        pawn = chess_piece_at(engine, 6, 4)
        assert engine.begin_move(pawn) == {}

        result = engine.end_move(pawn, pos(4, 4))
        assert not result.success
        assert result.position == pos(6, 4)
        assert engine.history == ()

    def test_illegal_destination_keeps_position(self, engine):
        pawn = chess_piece_at(engine, 1, 4)
        result = engine.end_move(pawn, pos(4, 4))
        assert not result.success
        assert result.position == pos(1, 4)
        assert engine.position_of(pawn) == pos(1, 4)
        assert engine.playing_color == WHITE

    def test_commit_alternates_turn(self, engine):
        results = play_chess(engine, [((1, 4), (3, 4))])
        assert results[0].position == pos(3, 4)
        assert results[0].move.move_type == MoveType.PAWN_DOUBLE
        assert engine.playing_color == BLACK

    def test_pinned_piece_stays_on_line(self):
        """Test that a pinned rook may only move along the pinning file."""
        engine, _ = create_chess_engine(kings(black_king=(7, 0)) + [
            (PieceType.ROOK, WHITE, pos(1, 4)),
            (PieceType.ROOK, BLACK, pos(7, 4)),
        ])
        assert destinations(engine, 1, 4) == {pos(row, 4) for row in range(2, 8)}

    def test_legal_moves_never_leave_king_attacked(self, engine):
        """Test every legal reply in a position with a pin."""
        play_chess(engine, [((1, 4), (3, 4)), ((6, 4), (4, 4)), ((0, 3), (4, 7))])
        assert engine.playing_color == BLACK

        # f7 is pinned against the king by the queen on h5
        assert engine.legal_destinations(chess_piece_at(engine, 6, 5)) == []

        for piece in [p for p in engine.get_movables() if p.color == BLACK]:
            for move in engine.legal_moves(piece):
                with engine.state.preview(move):
                    assert engine.get_checkers(BLACK) == []
        assert not engine.state.is_previewing

    def test_move_is_read_only(self, engine):
        """Test drag feedback for logical and world targets."""
        pawn = chess_piece_at(engine, 1, 4)
        engine.begin_move(pawn)

        assert engine.move(pawn, pos(3, 4)) == MoveValidationResult.VALID
        assert engine.move(pawn, pos(4, 4)) == MoveValidationResult.INVALID
        assert engine.move(pawn, engine.world_position(pos(2, 4))) == MoveValidationResult.VALID
        assert engine.move(pawn, (100.0, 0.0, 100.0)) == MoveValidationResult.INVALID
        assert engine.history == ()
        assert engine.position_of(pawn) == pos(1, 4)

    def test_end_move_with_world_coordinate(self, engine):
        knight = chess_piece_at(engine, 0, 6)
        result = engine.end_move(knight, engine.world_position(pos(2, 5)))
        assert result.success
        assert engine.position_of(knight) == pos(2, 5)

    def test_off_board_target(self, engine):
        knight = chess_piece_at(engine, 0, 6)
        assert not engine.end_move(knight, pos(8, 6)).success


class TestAttackDetection:
    """Test can_be_taken and check reporting."""

    def test_pawns_attack_empty_diagonals(self, engine):
        attackers = engine.can_be_taken(BLACK, pos(2, 0))
        assert set(attackers) == {pos(1, 1), pos(0, 1)}
        assert set(engine.can_be_taken(BLACK, pos(2, 0), recurse=True)) == {pos(1, 1), pos(0, 1)}

    def test_check_is_reported(self):
        engine, recorder = create_chess_engine(kings() + [(PieceType.ROOK, WHITE, pos(0, 0))])
        play_chess(engine, [((0, 0), (7, 0))])

        assert engine.is_in_check(BLACK)
        assert engine.get_checkers(BLACK) == [pos(7, 0)]
        checks = recorder.of_type(GameEvent.CHECK)
        assert [event.color for event in checks] == [BLACK]
        assert checks[0].additional_data['king_position'] == pos(7, 4)
        assert recorder.of_type(GameEvent.CHECKMATE) == []
        assert engine.playing_color == BLACK

    def test_king_cannot_step_along_checking_ray(self):
        engine, _ = create_chess_engine(kings() + [(PieceType.ROOK, WHITE, pos(0, 0))])
        play_chess(engine, [((0, 0), (7, 0))])
        assert destinations(engine, 7, 4) == {pos(6, 3), pos(6, 4), pos(6, 5)}


class TestCastling:
    """Test castling rules."""

    def test_king_side_castle(self):
        """Test castling with an empty, unattacked path."""
        engine, _ = create_chess_engine(kings() + [(PieceType.ROOK, WHITE, pos(0, 7))])
        king = engine.state.king(WHITE)
        rook = chess_piece_at(engine, 0, 7)

        assert pos(0, 6) in engine.begin_move(king)

        result = engine.end_move(king, pos(0, 6))
        assert result.success
        assert result.move.move_type == MoveType.KING_SIDE_CASTLE
        assert engine.position_of(king) == pos(0, 6)
        assert engine.position_of(rook) == pos(0, 5)

    def test_no_castle_through_attacked_square(self):
        engine, _ = create_chess_engine(kings() + [
            (PieceType.ROOK, WHITE, pos(0, 7)),
            (PieceType.ROOK, BLACK, pos(7, 5)),
        ])
        assert pos(0, 6) not in destinations(engine, 0, 4)

    def test_no_castle_out_of_check(self):
        engine, _ = create_chess_engine(kings(black_king=(7, 0)) + [
            (PieceType.ROOK, WHITE, pos(0, 7)),
            (PieceType.ROOK, BLACK, pos(5, 4)),
        ])
        assert pos(0, 6) not in destinations(engine, 0, 4)

    def test_queen_side_ignores_attack_next_to_rook(self):
        """Test that only squares the king crosses must be safe."""
        engine, _ = create_chess_engine(kings() + [
            (PieceType.ROOK, WHITE, pos(0, 0)),
            (PieceType.ROOK, BLACK, pos(7, 1)),
        ])
        king = engine.state.king(WHITE)
        rook = chess_piece_at(engine, 0, 0)
        assert pos(0, 2) in engine.begin_move(king)

        result = engine.end_move(king, pos(0, 2))
        assert result.move.move_type == MoveType.QUEEN_SIDE_CASTLE
        assert engine.position_of(rook) == pos(0, 3)

    def test_queen_side_blocked_by_attack_on_king_path(self):
        engine, _ = create_chess_engine(kings() + [
            (PieceType.ROOK, WHITE, pos(0, 0)),
            (PieceType.ROOK, BLACK, pos(7, 3)),
        ])
        assert pos(0, 2) not in destinations(engine, 0, 4)

    def test_queen_side_needs_empty_path(self):
        engine, _ = create_chess_engine(kings() + [
            (PieceType.ROOK, WHITE, pos(0, 0)),
            (PieceType.KNIGHT, WHITE, pos(0, 1)),
        ])
        assert pos(0, 2) not in destinations(engine, 0, 4)

    def test_moving_king_disables_castling(self):
        engine, _ = create_chess_engine(kings() + [(PieceType.ROOK, WHITE, pos(0, 7))])
        play_chess(engine, [((0, 4), (1, 4)), ((7, 4), (7, 3)), ((1, 4), (0, 4)), ((7, 3), (7, 4))])
        assert pos(0, 6) not in destinations(engine, 0, 4)

    def test_moving_rook_disables_castling(self):
        engine, _ = create_chess_engine(kings() + [(PieceType.ROOK, WHITE, pos(0, 7))])
        play_chess(engine, [((0, 7), (1, 7)), ((7, 4), (7, 3)), ((1, 7), (0, 7)), ((7, 3), (7, 4))])
        assert pos(0, 6) not in destinations(engine, 0, 4)


class TestEnPassant:
    """Test en passant captures."""

    def en_passant_layout(self, black_pawn_file=3):
        return kings() + [
            (PieceType.PAWN, WHITE, pos(4, 4)),
            (PieceType.PAWN, BLACK, pos(6, black_pawn_file)),
        ]

    def test_capture_immediately_after_double_step(self):
        engine, recorder = create_chess_engine(self.en_passant_layout(), playing_color=BLACK)
        black_pawn = chess_piece_at(engine, 6, 3)
        play_chess(engine, [((6, 3), (4, 3))])

        white_pawn = chess_piece_at(engine, 4, 4)
        assert set(engine.begin_move(white_pawn)) == {pos(5, 4), pos(5, 3)}

        result = engine.end_move(white_pawn, pos(5, 3))
        assert result.move.move_type == MoveType.EN_PASSANT
        assert result.captured == [black_pawn]
        assert engine.state.is_captured(black_pawn)
        assert chess_piece_at(engine, 4, 3) is None
        assert recorder.of_type(GameEvent.PIECE_CAPTURED)[0].target is black_pawn

    def test_only_on_the_next_move(self):
        engine, _ = create_chess_engine(self.en_passant_layout(), playing_color=BLACK)
        play_chess(engine, [((6, 3), (4, 3)), ((0, 4), (0, 3)), ((7, 4), (7, 5))])
        assert destinations(engine, 4, 4) == {pos(5, 4)}

    def test_only_from_adjacent_file(self):
        engine, _ = create_chess_engine(self.en_passant_layout(black_pawn_file=2), playing_color=BLACK)
        play_chess(engine, [((6, 2), (4, 2))])
        assert destinations(engine, 4, 4) == {pos(5, 4)}


class TestPromotion:
    """Test pawn promotion."""

    @pytest.fixture
    def promoting(self):
        engine, recorder = create_chess_engine(kings() + [(PieceType.PAWN, WHITE, pos(6, 0))])
        play_chess(engine, [((6, 0), (7, 0))])
        return engine, recorder

    def test_reaching_last_rank_waits_for_choice(self, promoting):
        engine, recorder = promoting
        pawn = chess_piece_at(engine, 7, 0)

        assert engine.promoting_piece is pawn
        assert len(recorder.of_type(GameEvent.PROMOTION_PENDING)) == 1

        black_king = engine.state.king(BLACK)
        assert engine.begin_move(black_king) == {}
        assert not engine.end_move(black_king, pos(6, 4)).success

    def test_promote_to_queen(self, promoting):
        engine, recorder = promoting
        pawn = chess_piece_at(engine, 7, 0)

        assert engine.promote_pawn(PieceType.QUEEN)
        assert pawn.type == PieceType.QUEEN
        assert engine.promoting_piece is None
        assert recorder.of_type(GameEvent.PIECE_PROMOTED)[0].additional_data['piece_type'] == PieceType.QUEEN

        # The new queen checks along the back rank straight away
        assert [event.color for event in recorder.of_type(GameEvent.CHECK)] == [BLACK]
        assert engine.playing_color == BLACK
        assert engine.end_move(engine.state.king(BLACK), pos(6, 3)).success

    def test_invalid_promotion_type(self, promoting):
        engine, _ = promoting
        with pytest.raises(ValueError):
            engine.promote_pawn(PieceType.KING)
        with pytest.raises(ValueError):
            engine.promote_pawn(PieceType.PAWN)
        assert engine.promoting_piece is not None

    def test_promotion_without_pending_pawn(self, engine):
        assert engine.promote_pawn(PieceType.KNIGHT) is False


class TestGameEnd:
    """Test checkmate and king capture."""

    def test_checkmate_keeps_turn_and_king_capture_ends_game(self):
        engine, recorder = create_chess_engine(kings(black_king=(7, 7)) + [
            (PieceType.ROOK, WHITE, pos(0, 0)),
            (PieceType.PAWN, BLACK, pos(6, 6)),
            (PieceType.PAWN, BLACK, pos(6, 7)),
        ])
        play_chess(engine, [((0, 0), (7, 0))])

        assert engine.is_checkmate(BLACK)
        assert [event.color for event in recorder.of_type(GameEvent.CHECKMATE)] == [BLACK]
        assert engine.playing_color == WHITE
        assert recorder.of_type(GameEvent.TURN_CHANGED) == []

        rook = chess_piece_at(engine, 7, 0)
        result = engine.end_move(rook, pos(7, 7))
        assert result.success
        assert result.move.move_type == MoveType.END_GAME
        assert engine.is_game_over
        assert engine.winner == WHITE
        assert recorder.of_type(GameEvent.GAME_OVER)[0].winner == WHITE

        # Nothing moves once the game is over
        assert engine.begin_move(engine.state.king(WHITE)) == {}
        assert not engine.end_move(engine.state.king(WHITE), pos(1, 4)).success

    def test_new_game_resets(self, engine):
        recorder_events = []
        engine.event_manager.register_listener(GameEvent.NEW_GAME, recorder_events.append)
        pieces = list(engine.state.pieces)
        pawn = chess_piece_at(engine, 1, 4)
        play_chess(engine, [((1, 4), (3, 4))])

        engine.new_game()

        assert engine.state.pieces == pieces
        assert engine.position_of(pawn) == pos(1, 4)
        assert engine.history == ()
        assert engine.playing_color == WHITE
        assert engine.winner is None
        assert len(list(engine.get_movables())) == 32
        assert len(recorder_events) == 1

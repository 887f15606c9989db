from __future__ import annotations

import pytest

from src.engine.board import Board
from src.engine.errors import IllegalMoveError
from src.engine.move import Square
from src.engine.piece import Color, Piece, PieceType
from src.engine.rules import RuleEngine


WHITE_PAWN = Piece(PieceType.PAWN, Color.WHITE)
BLACK_PAWN = Piece(PieceType.PAWN, Color.BLACK)


def _play(eng: RuleEngine, fr: tuple[int, int], to: tuple[int, int]) -> None:
    a, b = Square(*fr), Square(*to)
    assert eng.is_legal_move(a, b), f"{fr}->{to} should be legal"
    eng.apply_move(a, b)


def test_apply_moves_piece_and_clears_origin() -> None:
    eng = RuleEngine()
    _play(eng, (7, 6), (5, 5))
    assert eng.board[Square(5, 5)] == Piece(PieceType.KNIGHT, Color.WHITE)
    assert eng.board.is_empty(Square(7, 6))


def test_double_step_sets_en_passant_target_to_landing_square() -> None:
    eng = RuleEngine.from_board(Board.from_layout("\n".join(["........"] * 6 + ["....P...", "........"])))
    _play(eng, (6, 4), (4, 4))
    assert eng.en_passant_target == Square(4, 4)


def test_single_step_and_other_pieces_clear_target() -> None:
    eng = RuleEngine()
    _play(eng, (6, 4), (4, 4))
    assert eng.en_passant_target == Square(4, 4)
    _play(eng, (1, 0), (2, 0))
    assert eng.en_passant_target is None

    _play(eng, (6, 3), (4, 3))
    assert eng.en_passant_target == Square(4, 3)
    _play(eng, (0, 1), (2, 2))
    assert eng.en_passant_target is None


def test_en_passant_capture_sequence() -> None:
    eng = RuleEngine()
    _play(eng, (6, 4), (4, 4))
    _play(eng, (1, 3), (3, 3))
    assert eng.en_passant_target == Square(3, 3)

    _play(eng, (4, 4), (3, 3))
    assert eng.board[Square(3, 3)] == WHITE_PAWN
    assert eng.board.is_empty(Square(4, 4))
    assert eng.en_passant_target is None
    assert len([sq for sq in eng.board.squares() if eng.board[sq] == BLACK_PAWN]) == 7


def test_en_passant_removes_enemy_pawn_behind_destination() -> None:
    # black pawn just double-stepped to (3,3); a second black pawn sits behind it
    # relative to white's direction, on (4,3)
    eng = RuleEngine.from_board(Board.empty(), en_passant_target=Square(3, 3))
    eng.board[Square(3, 3)] = BLACK_PAWN
    eng.board[Square(4, 3)] = BLACK_PAWN
    eng.board[Square(4, 2)] = WHITE_PAWN

    _play(eng, (4, 2), (3, 3))
    assert eng.board[Square(3, 3)] == WHITE_PAWN
    assert eng.board.is_empty(Square(4, 3))
    assert eng.board.is_empty(Square(4, 2))
    assert eng.en_passant_target is None


def test_en_passant_uses_target_from_before_the_move() -> None:
    # The capturing move itself is not a double step, so the target is
    # cleared; the removal must still see the prior target.
    eng = RuleEngine.from_board(Board.empty(), en_passant_target=Square(4, 5))
    eng.board[Square(4, 5)] = WHITE_PAWN
    eng.board[Square(3, 5)] = WHITE_PAWN
    eng.board[Square(3, 4)] = BLACK_PAWN

    _play(eng, (3, 4), (4, 5))
    assert eng.board[Square(4, 5)] == BLACK_PAWN
    assert eng.board.is_empty(Square(3, 5))


def test_no_removal_without_prior_target() -> None:
    eng = RuleEngine.from_board(Board.empty())
    eng.board[Square(3, 3)] = BLACK_PAWN
    eng.board[Square(4, 3)] = BLACK_PAWN
    eng.board[Square(4, 2)] = WHITE_PAWN

    _play(eng, (4, 2), (3, 3))
    assert eng.board[Square(4, 3)] == BLACK_PAWN


def test_no_removal_of_friendly_or_non_pawn_piece_behind() -> None:
    eng = RuleEngine.from_board(Board.empty(), en_passant_target=Square(3, 3))
    eng.board[Square(3, 3)] = BLACK_PAWN
    eng.board[Square(4, 3)] = Piece(PieceType.KNIGHT, Color.BLACK)
    eng.board[Square(4, 2)] = WHITE_PAWN
    _play(eng, (4, 2), (3, 3))
    assert eng.board[Square(4, 3)] == Piece(PieceType.KNIGHT, Color.BLACK)

    eng = RuleEngine.from_board(Board.empty(), en_passant_target=Square(3, 3))
    eng.board[Square(3, 3)] = BLACK_PAWN
    eng.board[Square(4, 3)] = WHITE_PAWN
    eng.board[Square(4, 2)] = WHITE_PAWN
    _play(eng, (4, 2), (3, 3))
    assert eng.board[Square(4, 3)] == WHITE_PAWN


def test_pawn_reaching_last_row_is_not_promoted() -> None:
    eng = RuleEngine.from_board(Board.empty())
    eng.board[Square(1, 0)] = WHITE_PAWN
    _play(eng, (1, 0), (0, 0))
    assert eng.board[Square(0, 0)] == WHITE_PAWN


def test_apply_and_is_legal_do_not_touch_turn() -> None:
    eng = RuleEngine()
    _play(eng, (6, 4), (4, 4))
    assert eng.turn is Color.WHITE
    # white again: the engine leaves turn enforcement to its caller
    _play(eng, (6, 3), (4, 3))
    assert eng.turn is Color.WHITE
    assert eng.board[Square(4, 3)] == WHITE_PAWN
    # black pieces are also movable while it is white's turn
    assert eng.is_legal_move(Square(1, 0), Square(2, 0))


def test_end_turn_flips_side_to_move() -> None:
    eng = RuleEngine()
    assert eng.end_turn() is Color.BLACK
    assert eng.turn is Color.BLACK
    assert eng.end_turn() is Color.WHITE


def test_king_capture_is_allowed() -> None:
    eng = RuleEngine.from_board(Board.empty())
    eng.board[Square(0, 4)] = Piece(PieceType.KING, Color.BLACK)
    eng.board[Square(5, 4)] = Piece(PieceType.ROOK, Color.WHITE)
    _play(eng, (5, 4), (0, 4))
    assert eng.board[Square(0, 4)] == Piece(PieceType.ROOK, Color.WHITE)


def test_apply_from_empty_square_fails_fast() -> None:
    eng = RuleEngine()
    with pytest.raises(IllegalMoveError):
        eng.apply_move(Square(4, 4), Square(3, 4))

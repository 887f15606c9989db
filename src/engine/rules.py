from __future__ import annotations

import logging
from typing import List, Optional

from .board import Board
from .errors import IllegalMoveError
from .move import Square, on_board
from .piece import Color, Piece, PieceType


logger = logging.getLogger(__name__)

KING_COL = 4
KINGSIDE_KING_COL = 6
QUEENSIDE_KING_COL = 2
# king destination column -> (rook origin column, rook destination column)
CASTLE_ROOK_COLS = {
    KINGSIDE_KING_COL: (7, 5),
    QUEENSIDE_KING_COL: (0, 3),
}


class RuleEngine:
    """Board state plus the rules for validating and applying moves.

    Responsibility: own the board, side to move and en-passant target;
    answer legality queries; apply moves in place.

    Notes:
    - Neither :meth:`is_legal_move` nor :meth:`apply_move` looks at
      :attr:`turn`. Checking that the mover owns the piece and flipping the
      turn with :meth:`end_turn` is up to the caller.
    - There is no check, checkmate or stalemate detection; a king may be
      captured or moved into check.
    """

    def __init__(self) -> None:
        self.board: Board = Board()
        self.turn: Color = Color.WHITE
        self.en_passant_target: Optional[Square] = None
        self.initialize()

    @classmethod
    def from_board(
        cls,
        board: Board,
        turn: Color = Color.WHITE,
        en_passant_target: Optional[Square] = None,
    ) -> "RuleEngine":
        eng = cls()
        eng.board = board
        eng.turn = turn
        eng.en_passant_target = en_passant_target
        return eng

    def initialize(self) -> None:
        """Reset to the starting position with white to move."""
        self.board.reset()
        self.turn = Color.WHITE
        self.en_passant_target = None

    def end_turn(self) -> Color:
        """Pass the move to the other side and return the new side to move."""
        self.turn = self.turn.opposite
        return self.turn

    # ---- Legality ----
    def is_legal_move(self, from_sq: Square, to_sq: Square) -> bool:
        """Check a move against the per-piece geometry.

        Args:
            from_sq (Square): Square of the piece to move.
            to_sq (Square): Destination square.

        Returns:
            bool: ``False`` for an empty origin, a null move, a friendly
            capture or any pattern the piece cannot make.
        """
        piece = self.board[from_sq]
        if piece is None or from_sq == to_sq:
            return False
        target = self.board[to_sq]
        if target is not None and target.color is piece.color:
            return False

        ptype = piece.piece_type
        if ptype is PieceType.PAWN:
            return self._pawn_ok(piece, from_sq, to_sq)
        if ptype is PieceType.KNIGHT:
            return _knight_ok(from_sq, to_sq)
        if ptype is PieceType.BISHOP:
            return _diagonal(from_sq, to_sq) and self.board.is_path_clear(from_sq, to_sq)
        if ptype is PieceType.ROOK:
            return _straight(from_sq, to_sq) and self.board.is_path_clear(from_sq, to_sq)
        if ptype is PieceType.QUEEN:
            line = _straight(from_sq, to_sq) or _diagonal(from_sq, to_sq)
            return line and self.board.is_path_clear(from_sq, to_sq)
        if ptype is PieceType.KING:
            return self._king_ok(piece, from_sq, to_sq)
        return False

    def legal_destinations(self, from_sq: Square) -> List[Square]:
        """All squares the piece on ``from_sq`` may move to, row-major."""
        if self.board[from_sq] is None:
            return []
        return [sq for sq in self.board.squares() if self.is_legal_move(from_sq, sq)]

    def _pawn_ok(self, pawn: Piece, from_sq: Square, to_sq: Square) -> bool:
        fwd = pawn.color.forward
        dr = to_sq.row - from_sq.row
        dc = to_sq.col - from_sq.col
        if dc == 0:
            if dr == fwd:
                return self.board.is_empty(to_sq)
            if dr == 2 * fwd and from_sq.row == pawn.color.pawn_row:
                return self.board.is_empty(to_sq) and self.board.is_empty(from_sq.offset(fwd, 0))
            return False
        if dr == fwd and abs(dc) == 1:
            return self.board.is_enemy(to_sq, pawn.color) or to_sq == self.en_passant_target
        return False

    def _king_ok(self, king: Piece, from_sq: Square, to_sq: Square) -> bool:
        dr = to_sq.row - from_sq.row
        dc = to_sq.col - from_sq.col
        if abs(dr) <= 1 and abs(dc) <= 1:
            return True
        home = king.color.home_row
        return (
            from_sq == Square(home, KING_COL)
            and to_sq.row == home
            and to_sq.col in CASTLE_ROOK_COLS
            and self.board.is_path_clear(from_sq, to_sq)
        )

    # ---- Application ----
    def apply_move(self, from_sq: Square, to_sq: Square) -> None:
        """Apply a move already accepted by :meth:`is_legal_move`.

        Moves the piece, updates the en-passant target, removes a pawn taken
        en passant and relocates the rook when the king castles. The turn is
        left unchanged.

        Raises:
            IllegalMoveError: If ``from_sq`` is empty.
        """
        piece = self.board[from_sq]
        if piece is None:
            raise IllegalMoveError(f"no piece on {from_sq}")
        prior_target = self.en_passant_target

        self.board[to_sq] = piece
        self.board[from_sq] = None
        logger.debug("moved %s %s->%s", piece, from_sq, to_sq)

        if piece.piece_type is PieceType.PAWN:
            self.en_passant_target = to_sq if abs(to_sq.row - from_sq.row) == 2 else None
            if to_sq == prior_target:
                self._take_en_passant(piece, to_sq)
        else:
            self.en_passant_target = None

        if piece.piece_type is PieceType.KING and abs(to_sq.col - from_sq.col) == 2:
            self._castle_rook(to_sq)

    def _take_en_passant(self, pawn: Piece, to_sq: Square) -> None:
        behind_row = to_sq.row - pawn.color.forward
        if not on_board(behind_row, to_sq.col):
            return
        behind = Square(behind_row, to_sq.col)
        victim = self.board[behind]
        if (
            victim is not None
            and victim.piece_type is PieceType.PAWN
            and victim.color is pawn.color.opposite
        ):
            self.board[behind] = None
            logger.debug("en passant removed %s on %s", victim, behind)

    def _castle_rook(self, king_to: Square) -> None:
        rook_from_col, rook_to_col = CASTLE_ROOK_COLS[king_to.col]
        rook_from = Square(king_to.row, rook_from_col)
        rook_to = Square(king_to.row, rook_to_col)
        self.board[rook_to] = self.board[rook_from]
        self.board[rook_from] = None
        logger.debug("castled: rook %s->%s", rook_from, rook_to)


def _straight(from_sq: Square, to_sq: Square) -> bool:
    return from_sq.row == to_sq.row or from_sq.col == to_sq.col


def _diagonal(from_sq: Square, to_sq: Square) -> bool:
    return abs(to_sq.row - from_sq.row) == abs(to_sq.col - from_sq.col)


def _knight_ok(from_sq: Square, to_sq: Square) -> bool:
    return {abs(to_sq.row - from_sq.row), abs(to_sq.col - from_sq.col)} == {1, 2}

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import LayoutError


class Color(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta of a one-step pawn advance (white moves toward row 0)."""
        return -1 if self is Color.WHITE else 1

    @property
    def home_row(self) -> int:
        """Row holding this color's king and rooks at the start."""
        return 7 if self is Color.WHITE else 0

    @property
    def pawn_row(self) -> int:
        return 6 if self is Color.WHITE else 1


class PieceType(str, Enum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


_TYPE_TO_CHAR = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_CHAR_TO_TYPE = {v: k for k, v in _TYPE_TO_CHAR.items()}


@dataclass(frozen=True)
class Piece:
    """Immutable piece value: a type tagged with its color.

    The single-character form is only used for layout text; rule code
    dispatches on ``piece_type`` and ``color``.
    """

    piece_type: PieceType
    color: Color

    def to_char(self) -> str:
        """Layout character, uppercase for white (e.g. ``"N"``, ``"p"``)."""
        ch = _TYPE_TO_CHAR[self.piece_type]
        return ch.upper() if self.color is Color.WHITE else ch

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Parse a layout character.

        Raises:
            LayoutError: If ``ch`` is not one of ``PNBRQKpnbrqk``.
        """
        ptype = _CHAR_TO_TYPE.get(ch.lower()) if len(ch) == 1 else None
        if ptype is None:
            raise LayoutError(f"invalid piece character: {ch!r}")
        return cls(ptype, Color.WHITE if ch.isupper() else Color.BLACK)

    def __str__(self) -> str:
        return f"{self.color.value} {self.piece_type.value}"

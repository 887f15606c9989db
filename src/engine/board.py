from __future__ import annotations

from typing import Iterator, List, Optional

from .errors import LayoutError
from .move import BOARD_SIZE, Square
from .piece import Color, Piece, PieceType


BACK_RANK = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]

STARTPOS_LAYOUT = "\n".join(
    [
        "rnbqkbnr",
        "pppppppp",
        "........",
        "........",
        "........",
        "........",
        "PPPPPPPP",
        "RNBQKBNR",
    ]
)

EMPTY_CHAR = "."


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


class Board:
    """8x8 grid of optional pieces addressed by :class:`Square`.

    Notes:
    - Row 0 is drawn at the top (black's home rank), row 7 at the bottom.
    - The grid is mutable; callers that need a snapshot use :meth:`copy`
      or :meth:`rows`.
    """

    __slots__ = ("_grid",)

    def __init__(self) -> None:
        self._grid: List[List[Optional[Piece]]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board set up in the standard starting position.

        Returns:
            Board: White on rows 6-7, black on rows 0-1.
        """
        b = cls()
        b.reset()
        return b

    def reset(self) -> None:
        self.clear()
        for col, ptype in enumerate(BACK_RANK):
            self._grid[0][col] = Piece(ptype, Color.BLACK)
            self._grid[7][col] = Piece(ptype, Color.WHITE)
            self._grid[1][col] = Piece(PieceType.PAWN, Color.BLACK)
            self._grid[6][col] = Piece(PieceType.PAWN, Color.WHITE)

    def clear(self) -> None:
        for row in self._grid:
            for col in range(BOARD_SIZE):
                row[col] = None

    @classmethod
    def from_layout(cls, layout: str) -> "Board":
        """Build a board from layout text.

        Args:
            layout (str): Eight non-blank lines of eight characters, row 0
                first. ``.`` marks an empty square, letters ``PNBRQK`` white
                pieces and ``pnbrqk`` black pieces. Surrounding whitespace on
                each line is ignored.

        Returns:
            Board: Board holding the described pieces.

        Raises:
            LayoutError: If the text does not describe exactly 8x8 squares or
                contains an unknown character.
        """
        if not isinstance(layout, str):
            raise LayoutError("layout must be a string")
        lines = [ln.strip() for ln in layout.strip().splitlines() if ln.strip()]
        if len(lines) != BOARD_SIZE:
            raise LayoutError(f"layout must have {BOARD_SIZE} rows, got {len(lines)}")
        b = cls()
        for row, line in enumerate(lines):
            if len(line) != BOARD_SIZE:
                raise LayoutError(f"layout row {row} must have {BOARD_SIZE} squares")
            for col, ch in enumerate(line):
                if ch != EMPTY_CHAR:
                    b._grid[row][col] = Piece.from_char(ch)
        return b

    def to_layout(self) -> str:
        """Serialize the grid into layout text (see :meth:`from_layout`)."""
        return "\n".join(
            "".join(p.to_char() if p else EMPTY_CHAR for p in row) for row in self._grid
        )

    # --- Element access ---
    def __getitem__(self, sq: Square) -> Optional[Piece]:
        return self._grid[sq.row][sq.col]

    def __setitem__(self, sq: Square, piece: Optional[Piece]) -> None:
        self._grid[sq.row][sq.col] = piece

    def squares(self) -> Iterator[Square]:
        """All 64 squares in row-major order."""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                yield Square(row, col)

    def rows(self) -> List[List[Optional[Piece]]]:
        """Row-major snapshot of the grid for rendering."""
        return [list(row) for row in self._grid]

    def copy(self) -> "Board":
        b = Board()
        b._grid = self.rows()
        return b

    # --- Geometry helpers ---
    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    def is_enemy(self, sq: Square, color: Color) -> bool:
        """Whether ``sq`` holds a piece of the color opposing ``color``."""
        piece = self[sq]
        return piece is not None and piece.color is not color

    def is_path_clear(self, from_sq: Square, to_sq: Square) -> bool:
        """Whether every square strictly between the endpoints is empty.

        Only straight (horizontal/vertical) or diagonal lines are meaningful;
        callers check the geometry before asking.
        """
        row_step = _sign(to_sq.row - from_sq.row)
        col_step = _sign(to_sq.col - from_sq.col)
        row, col = from_sq.row + row_step, from_sq.col + col_step
        while (row, col) != (to_sq.row, to_sq.col):
            if self._grid[row][col] is not None:
                return False
            row += row_step
            col += col_step
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        return self.to_layout()

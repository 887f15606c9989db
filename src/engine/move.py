from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidSquareError


BOARD_SIZE = 8


def on_board(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


@dataclass(frozen=True, order=True)
class Square:
    """Board coordinate.

    Attributes:
        row (int): 0 is black's home rank, 7 is white's home rank.
        col (int): 0..7, files a..h from left to right.

    Raises:
        InvalidSquareError: If either coordinate is outside ``0..7``.
    """

    row: int
    col: int

    def __post_init__(self) -> None:
        if not (isinstance(self.row, int) and isinstance(self.col, int)):
            raise InvalidSquareError(f"square coordinates must be ints: {self.row!r}, {self.col!r}")
        if not on_board(self.row, self.col):
            raise InvalidSquareError(f"invalid coordinate: ({self.row}, {self.col})")

    def offset(self, drow: int, dcol: int) -> "Square":
        return Square(self.row + drow, self.col + dcol)

    def __str__(self) -> str:
        return f"({self.row},{self.col})"


@dataclass(frozen=True)
class Move:
    """A (from, to) request as forwarded by a View.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
    """

    from_sq: Square
    to_sq: Square

    @property
    def row_delta(self) -> int:
        return self.to_sq.row - self.from_sq.row

    @property
    def col_delta(self) -> int:
        return self.to_sq.col - self.from_sq.col

    def __str__(self) -> str:
        return f"{self.from_sq}->{self.to_sq}"


def parse_coords(tokens: list[str]) -> list[Square]:
    """Parse pairs of integer tokens into squares.

    Args:
        tokens (list[str]): An even number of tokens, e.g. ``["6", "4", "4", "4"]``.

    Returns:
        list[Square]: One square per (row, col) pair.

    Raises:
        ValueError: If the count is odd or a token is not an integer.
        InvalidSquareError: If a coordinate is off the board.
    """
    if len(tokens) % 2 != 0:
        raise ValueError("coordinates must come in row/col pairs")
    try:
        values = [int(t) for t in tokens]
    except ValueError as e:
        raise ValueError(f"invalid coordinate in {' '.join(tokens)!r}") from e
    return [Square(values[i], values[i + 1]) for i in range(0, len(values), 2)]

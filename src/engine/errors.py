from __future__ import annotations


class ChessError(Exception):
    """Base class for rule-engine errors."""


class InvalidSquareError(ChessError, ValueError):
    """A coordinate fell outside the 0..7 board range."""


class IllegalMoveError(ChessError, ValueError):
    """A move was rejected by the rules or could not be applied."""


class NotYourTurnError(IllegalMoveError):
    """The selected piece does not belong to the side to move."""


class LayoutError(ChessError, ValueError):
    """Board layout text could not be parsed."""

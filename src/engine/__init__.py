from .board import Board, STARTPOS_LAYOUT
from .errors import ChessError, IllegalMoveError, InvalidSquareError, LayoutError, NotYourTurnError
from .game import Game
from .move import Move, Square
from .piece import Color, Piece, PieceType
from .rules import RuleEngine

__all__ = [
    "Board",
    "STARTPOS_LAYOUT",
    "ChessError",
    "IllegalMoveError",
    "InvalidSquareError",
    "LayoutError",
    "NotYourTurnError",
    "Game",
    "Move",
    "Square",
    "Color",
    "Piece",
    "PieceType",
    "RuleEngine",
]

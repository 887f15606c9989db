from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .board import Board
from .errors import IllegalMoveError, NotYourTurnError
from .move import Move, Square
from .piece import Color
from .rules import RuleEngine


logger = logging.getLogger(__name__)


@dataclass
class Game:
    """Caller-side wrapper around a :class:`RuleEngine`.

    Responsibility: check that the selected piece belongs to the side to
    move, gate application behind the legality check, flip the turn after
    each applied move.
    """

    engine: RuleEngine = field(default_factory=RuleEngine)
    last_move: Optional[Move] = None
    move_count: int = 0

    @classmethod
    def new(cls) -> "Game":
        return cls()

    @classmethod
    def from_layout(cls, layout: str, turn: Color = Color.WHITE) -> "Game":
        return cls(engine=RuleEngine.from_board(Board.from_layout(layout), turn=turn))

    @property
    def board(self) -> Board:
        return self.engine.board

    @property
    def turn(self) -> Color:
        return self.engine.turn

    @property
    def en_passant_target(self) -> Optional[Square]:
        return self.engine.en_passant_target

    def reset(self) -> None:
        self.engine.initialize()
        self.last_move = None
        self.move_count = 0
        logger.info("game reset to start position")

    def can_select(self, sq: Square) -> bool:
        """Whether the side to move owns the piece on ``sq``."""
        piece = self.engine.board[sq]
        return piece is not None and piece.color is self.engine.turn

    def is_legal(self, move: Move) -> bool:
        return self.engine.is_legal_move(move.from_sq, move.to_sq)

    def destinations(self, sq: Square) -> List[Square]:
        if not self.can_select(sq):
            return []
        return self.engine.legal_destinations(sq)

    def play(self, move: Move) -> None:
        """Validate and apply ``move`` for the side to move, then flip the turn.

        Raises:
            NotYourTurnError: If the origin does not hold a piece of the side
                to move.
            IllegalMoveError: If the rules reject the move.
        """
        if not self.can_select(move.from_sq):
            logger.debug("rejected %s: not %s's piece", move, self.turn.value)
            raise NotYourTurnError(f"no {self.turn.value} piece on {move.from_sq}")
        if not self.is_legal(move):
            logger.debug("rejected %s: illegal", move)
            raise IllegalMoveError("illegal move")
        self.engine.apply_move(move.from_sq, move.to_sq)
        self.engine.end_turn()
        self.last_move = move
        self.move_count += 1

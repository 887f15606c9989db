from __future__ import annotations

import logging
import sys
from typing import Callable, List, TextIO

from ...engine.errors import ChessError
from ...engine.game import Game
from ...engine.move import Move, parse_coords


logger = logging.getLogger(__name__)

Writer = Callable[[str], None]

HELP = [
    "commands:",
    "  new                  reset to the start position",
    "  show                 print the board",
    "  turn                 print the side to move",
    "  legal r1 c1 r2 c2    check a move without playing it",
    "  moves r c            list destinations of the piece on (r, c)",
    "  move r1 c1 r2 c2     play a move for the side to move",
    "  quit",
]


class ConsoleSession:
    """Line-oriented text view around a :class:`Game`.

    Notes:
    - Rendering and parsing live here; the engine stays free of I/O.
    - Errors are reported as ``error <message>`` lines and never end the
      session.
    """

    def __init__(self) -> None:
        self.game: Game = Game.new()

    # ---- Command handlers ----
    def cmd_new(self, write: Writer) -> None:
        self.game.reset()
        self.cmd_show(write)

    def cmd_show(self, write: Writer) -> None:
        write("   " + " ".join(str(c) for c in range(8)))
        for row, line in enumerate(self.game.board.to_layout().splitlines()):
            write(f"{row}  " + " ".join(line))
        self.cmd_turn(write)

    def cmd_turn(self, write: Writer) -> None:
        write(f"turn {self.game.turn.value}")

    def cmd_legal(self, args: List[str], write: Writer) -> None:
        move = self._parse_move(args)
        write("legal" if self.game.is_legal(move) else "illegal")

    def cmd_moves(self, args: List[str], write: Writer) -> None:
        squares = parse_coords(args)
        if len(squares) != 1:
            raise ValueError("expected: moves <row> <col>")
        dests = self.game.destinations(squares[0])
        write("moves " + " ".join(f"{d.row},{d.col}" for d in dests) if dests else "moves (none)")

    def cmd_move(self, args: List[str], write: Writer) -> None:
        move = self._parse_move(args)
        self.game.play(move)
        write(f"ok {move}")
        self.cmd_show(write)

    def handle(self, line: str, write: Writer) -> bool:
        """Dispatch one input line. Returns ``False`` when the session should end."""
        parts = line.strip().split()
        if not parts:
            return True
        cmd, args = parts[0].lower(), parts[1:]
        try:
            if cmd == "quit":
                return False
            if cmd == "new":
                self.cmd_new(write)
            elif cmd == "show":
                self.cmd_show(write)
            elif cmd == "turn":
                self.cmd_turn(write)
            elif cmd == "legal":
                self.cmd_legal(args, write)
            elif cmd == "moves":
                self.cmd_moves(args, write)
            elif cmd == "move":
                self.cmd_move(args, write)
            elif cmd == "help":
                for ln in HELP:
                    write(ln)
            else:
                write(f"error unknown command: {cmd}")
        except (ChessError, ValueError) as e:
            logger.debug("command %r failed: %s", line, e)
            write(f"error {e}")
        return True

    # ---- Utilities ----
    @staticmethod
    def _parse_move(args: List[str]) -> Move:
        squares = parse_coords(args)
        if len(squares) != 2:
            raise ValueError("expected: <row> <col> <row> <col>")
        return Move(squares[0], squares[1])


def _default_writer(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def run_console(stream: TextIO = sys.stdin, write: Writer = _default_writer) -> None:
    session = ConsoleSession()
    session.cmd_show(write)
    for raw in stream:
        if not session.handle(raw, write):
            break

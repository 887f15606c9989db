from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Callable, Optional, TypeVar

from ...engine.game import Game


logger = logging.getLogger(__name__)

T = TypeVar("T")


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    Responsibilities:
    - Create new sessions with unique `game_id`s, evicting the oldest once
      `max_games` is reached
    - Retrieve, replace and delete sessions
    - Run a callback against one game while holding the store lock, so a
      rules engine is never mutated by two requests at once
    """

    def __init__(self, max_games: int = 1000) -> None:
        self._lock = threading.RLock()
        self._games: "OrderedDict[str, Game]" = OrderedDict()
        self.max_games = max_games

    def create(self, game: Optional[Game] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        if game is None:
            game = Game.new()
        with self._lock:
            while len(self._games) >= self.max_games:
                evicted, _ = self._games.popitem(last=False)
                logger.info("evicted game session", extra={"game_id": evicted})
            self._games[gid] = game
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def set(self, game_id: str, game: Game) -> None:
        with self._lock:
            if game_id not in self._games:
                raise KeyError(game_id)
            self._games[game_id] = game

    def with_game(self, game_id: str, fn: Callable[[Game], T]) -> T:
        """Call ``fn(game)`` under the store lock.

        Raises:
            KeyError: If ``game_id`` is unknown.
        """
        with self._lock:
            game = self._games.get(game_id)
            if game is None:
                raise KeyError(game_id)
            return fn(game)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)

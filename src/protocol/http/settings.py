from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional


ENV_PREFIX = "CHESS_"


@dataclass
class ServerSettings:
    """Runtime settings for the HTTP view.

    Values come from ``CHESS_*`` environment variables; CLI flags override
    them (see ``src.cli.main``).
    """

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    max_games: int = 1000

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log level: {self.log_level!r}")
        if not (0 < self.port < 65536):
            raise ValueError(f"port out of range: {self.port}")
        if self.max_games < 1:
            raise ValueError("max_games must be >= 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if f"{ENV_PREFIX}HOST" in env:
            kwargs["host"] = env[f"{ENV_PREFIX}HOST"]
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            kwargs["log_level"] = env[f"{ENV_PREFIX}LOG_LEVEL"]
        for key, name in (("port", "PORT"), ("max_games", "MAX_GAMES")):
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw is None:
                continue
            try:
                kwargs[key] = int(raw)
            except ValueError as e:
                raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
        return cls(**kwargs)

"""API settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(slots=True)
class ApiSettings:
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    max_games: int = 1000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ApiSettings:
        max_games = int(os.getenv("CHESS_API_MAX_GAMES", "1000"))
        if max_games < 1:
            raise ValueError("CHESS_API_MAX_GAMES must be >= 1")
        return cls(
            cors_origins=_split_origins(os.getenv("CHESS_API_CORS_ORIGINS", "*")),
            max_games=max_games,
            log_level=os.getenv("CHESS_API_LOG_LEVEL", "INFO").upper(),
        )

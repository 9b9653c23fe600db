"""FastAPI server exposing rules-engine games to a presentation client."""

from __future__ import annotations

import logging
import threading
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from chessrules.board import Board, Position
from chessrules.constants import PROMOTION_KINDS, SYMBOL_TO_KIND
from chessrules.errors import ChessRulesError, GameOverError, PromotionRequiredError
from chessrules.game import Game

from .config import ApiSettings

logger = logging.getLogger(__name__)


class UnknownGameError(LookupError):
    """No game is stored under the requested id."""


class StoreFullError(RuntimeError):
    """The store already holds its maximum number of games."""


class SquareRequest(BaseModel):
    square: str = Field(min_length=2, max_length=2)


class MoveRequest(BaseModel):
    from_square: str = Field(min_length=2, max_length=2)
    to_square: str = Field(min_length=2, max_length=2)
    promotion: str | None = Field(default=None)


class GameStore:
    """In-memory games keyed by id.

    Sync endpoints run in a worker pool, so the registry has its own lock and
    every game carries a lock held while it is read or played.
    """

    def __init__(self, max_games: int):
        self.max_games = max_games
        self._games: dict[str, tuple[Game, threading.Lock]] = {}
        self._lock = threading.Lock()

    def create(self) -> tuple[str, Game]:
        with self._lock:
            if len(self._games) >= self.max_games:
                raise StoreFullError("Too many active games")
            game_id = uuid.uuid4().hex
            game = Game()
            self._games[game_id] = (game, threading.Lock())
        logger.info("Created game %s", game_id)
        return game_id, game

    def entry(self, game_id: str) -> tuple[Game, threading.Lock]:
        with self._lock:
            entry = self._games.get(game_id)
        if entry is None:
            raise UnknownGameError(f"Unknown game: {game_id}")
        return entry

    def get(self, game_id: str) -> Game:
        return self.entry(game_id)[0]

    def delete(self, game_id: str) -> None:
        with self._lock:
            if self._games.pop(game_id, None) is None:
                raise UnknownGameError(f"Unknown game: {game_id}")
        logger.info("Deleted game %s", game_id)


settings = ApiSettings.from_env()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    logger.info("Chess Rules API started (max_games=%d)", settings.max_games)
    yield


app = FastAPI(title="Chess Rules API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

store = GameStore(settings.max_games)


def _lookup(game_id: str) -> tuple[Game, threading.Lock]:
    try:
        return store.entry(game_id)
    except UnknownGameError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _parse_square(square: str) -> Position:
    try:
        return Position.from_name(square)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _parse_promotion(raw: str | None) -> str | None:
    if raw is None:
        return None
    value = raw.strip().lower()
    kind = SYMBOL_TO_KIND.get(value, value)
    if kind not in PROMOTION_KINDS:
        raise HTTPException(status_code=400, detail=f"Invalid promotion piece: {raw}")
    return kind


def _board_payload(board: Board) -> list[list[dict | None]]:
    grid: list[list[dict | None]] = [[None] * 8 for _ in range(8)]
    for pos, piece in board.squares():
        grid[pos.row][pos.col] = {
            "kind": piece.kind,
            "color": piece.color,
            "has_moved": piece.has_moved,
            "symbol": piece.symbol,
        }
    return grid


def _game_payload(game_id: str, game: Game) -> dict:
    last_move = game.last_move
    return {
        "id": game_id,
        "board": _board_payload(game.board),
        "turn": game.turn,
        "status": game.status.label,
        "is_check": game.is_check,
        "is_checkmate": game.is_checkmate,
        "is_draw": game.is_draw,
        "last_move": last_move.uci() if last_move else None,
        "history": [move.uci() for move in game.history],
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/games")
def create_game() -> dict:
    try:
        game_id, game = store.create()
    except StoreFullError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return _game_payload(game_id, game)


@app.get("/games/{game_id}")
def get_game(game_id: str) -> dict:
    game, lock = _lookup(game_id)
    with lock:
        return _game_payload(game_id, game)


@app.delete("/games/{game_id}")
def delete_game(game_id: str) -> dict[str, str]:
    try:
        store.delete(game_id)
    except UnknownGameError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "deleted"}


@app.post("/games/{game_id}/reset")
def reset_game(game_id: str) -> dict:
    game, lock = _lookup(game_id)
    with lock:
        game.reset()
        logger.info("Reset game %s", game_id)
        return _game_payload(game_id, game)


@app.post("/games/{game_id}/legal-moves")
def game_legal_moves(game_id: str, payload: SquareRequest) -> dict:
    game, lock = _lookup(game_id)
    pos = _parse_square(payload.square)
    with lock:
        moves = game.legal_moves(pos)
    return {"square": pos.name, "moves": [target.name for target in moves]}


@app.post("/games/{game_id}/move")
def play_move(game_id: str, payload: MoveRequest) -> dict:
    game, lock = _lookup(game_id)
    from_pos = _parse_square(payload.from_square)
    to_pos = _parse_square(payload.to_square)
    promotion = _parse_promotion(payload.promotion)

    with lock:
        try:
            result = game.play(from_pos, to_pos, promotion)
        except GameOverError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except PromotionRequiredError as exc:
            raise HTTPException(
                status_code=400,
                detail={"message": str(exc), "promotion_required": True},
            ) from exc
        except ChessRulesError as exc:
            logger.warning("Rejected move %s%s in game %s: %s", from_pos, to_pos, game_id, exc)
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        response = _game_payload(game_id, game)
    response["move"] = result.move.uci()
    return response

"""API tests for the game endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import api.server
from api.server import GameStore, StoreFullError, UnknownGameError, app, store
from chessrules.board import Board


client = TestClient(app)


def _new_game() -> dict:
    response = client.post("/games")
    assert response.status_code == 200
    return response.json()


def _move(game_id: str, from_square: str, to_square: str, promotion: str | None = None):
    payload = {"from_square": from_square, "to_square": to_square}
    if promotion is not None:
        payload["promotion"] = promotion
    return client.post(f"/games/{game_id}/move", json=payload)


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_new_game_payload() -> None:
    body = _new_game()
    assert body["turn"] == "white"
    assert body["status"] == "ongoing"
    assert body["history"] == []
    assert body["last_move"] is None
    assert body["board"][7][4] == {"kind": "king", "color": "white", "has_moved": False, "symbol": "K"}
    assert body["board"][4][4] is None

    fetched = client.get(f"/games/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == body


def test_legal_moves_for_square() -> None:
    game_id = _new_game()["id"]

    response = client.post(f"/games/{game_id}/legal-moves", json={"square": "e2"})
    assert response.status_code == 200
    assert response.json() == {"square": "e2", "moves": ["e3", "e4"]}

    response = client.post(f"/games/{game_id}/legal-moves", json={"square": "e7"})
    assert response.json()["moves"] == []


def test_play_move_updates_game() -> None:
    game_id = _new_game()["id"]

    response = _move(game_id, "e2", "e4")
    assert response.status_code == 200
    body = response.json()
    assert body["move"] == "e2e4"
    assert body["turn"] == "black"
    assert body["history"] == ["e2e4"]
    assert body["last_move"] == "e2e4"
    assert body["board"][4][4]["has_moved"] is True


def test_illegal_move_rejected() -> None:
    game_id = _new_game()["id"]
    assert _move(game_id, "e2", "e5").status_code == 400
    assert _move(game_id, "z9", "e4").status_code == 400
    assert client.get(f"/games/{game_id}").json()["history"] == []


def test_promotion_flow() -> None:
    game_id = _new_game()["id"]
    store.get(game_id).reset(
        Board.from_diagram(
            [
                "k.......",
                "....P...",
                "........",
                "........",
                "........",
                "........",
                "........",
                "....K...",
            ]
        )
    )

    response = _move(game_id, "e7", "e8")
    assert response.status_code == 400
    assert response.json()["detail"]["promotion_required"] is True

    assert _move(game_id, "e7", "e8", "x").status_code == 400

    response = _move(game_id, "e7", "e8", "q")
    assert response.status_code == 200
    body = response.json()
    assert body["move"] == "e7e8q"
    assert body["board"][0][4]["kind"] == "queen"
    assert body["status"] == "check"


def test_checkmate_then_move_conflicts() -> None:
    game_id = _new_game()["id"]
    for from_square, to_square in (("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")):
        assert _move(game_id, from_square, to_square).status_code == 200

    body = client.get(f"/games/{game_id}").json()
    assert body["status"] == "checkmate"
    assert body["is_checkmate"] is True

    assert _move(game_id, "e2", "e4").status_code == 409

    reset = client.post(f"/games/{game_id}/reset")
    assert reset.status_code == 200
    assert reset.json()["status"] == "ongoing"
    assert reset.json()["history"] == []


def test_unknown_and_deleted_games() -> None:
    assert client.get("/games/missing").status_code == 404

    game_id = _new_game()["id"]
    assert client.delete(f"/games/{game_id}").status_code == 200
    assert client.get(f"/games/{game_id}").status_code == 404
    assert client.delete(f"/games/{game_id}").status_code == 404


def test_store_limit() -> None:
    limited = GameStore(max_games=1)
    limited.create()
    with pytest.raises(StoreFullError):
        limited.create()


def test_store_reports_unknown_games() -> None:
    games = GameStore(max_games=2)
    game_id, game = games.create()
    assert games.get(game_id) is game

    games.delete(game_id)
    with pytest.raises(UnknownGameError):
        games.get(game_id)
    with pytest.raises(UnknownGameError):
        games.delete(game_id)


def test_full_store_answers_503(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(api.server, "store", GameStore(max_games=0))
    response = client.post("/games")
    assert response.status_code == 503
    assert response.json()["detail"] == "Too many active games"


def test_logging_configured_on_startup_only(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(api.server.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    TestClient(app).get("/health")
    assert calls == []

    with TestClient(app) as started:
        assert started.get("/health").status_code == 200
    assert calls == [{"level": api.server.settings.log_level}]

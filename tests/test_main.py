import sys

import pytest

import main


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> int:
    monkeypatch.setattr(sys, "argv", ["main.py", *argv])
    return main.run()


def test_perft_prints_node_count(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "perft", "2") == 0
    assert capsys.readouterr().out.strip() == "400"


def test_perft_bad_depth_reports_error(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "perft", "0", "--divide") == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error:")


def test_play_reports_status(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "play", "f2f3", "e7e5", "g2g4", "d8h4") == 0
    assert "turn=white status=checkmate" in capsys.readouterr().out


def test_illegal_move_exits_with_rules_error(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(monkeypatch, "play", "e2e5") == 1
    assert capsys.readouterr().err.startswith("error:")


def test_moves_lists_destinations(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "moves", "e5", "--after", "e2e4", "a7a6", "e4e5", "d7d5") == 0
    assert set(capsys.readouterr().out.split()) == {"e6", "d6"}

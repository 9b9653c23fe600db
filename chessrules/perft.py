"""Perft utilities for move generation correctness checks."""

from __future__ import annotations

from .board import Board
from .constants import opposite
from .move import Move
from .movegen import generate_legal_moves


def _play(board: Board, move: Move) -> Board:
    child = board.simulate_move(move.from_square, move.to_square)
    if move.promotion is not None:
        child = child.promote(move.to_square, move.promotion)
    return child


def perft(board: Board, color: str, depth: int, last_move: Move | None = None) -> int:
    if depth < 0:
        raise ValueError("Depth must be >= 0")
    if depth == 0:
        return 1

    moves = generate_legal_moves(board, color, last_move)
    if depth == 1:
        return len(moves)

    nodes = 0
    for move in moves:
        nodes += perft(_play(board, move), opposite(color), depth - 1, move)
    return nodes


def perft_divide(board: Board, color: str, depth: int, last_move: Move | None = None) -> dict[str, int]:
    if depth < 1:
        raise ValueError("Depth must be >= 1 for perft divide")

    result: dict[str, int] = {}
    for move in generate_legal_moves(board, color, last_move):
        result[move.uci()] = perft(_play(board, move), opposite(color), depth - 1, move)
    return dict(sorted(result.items()))

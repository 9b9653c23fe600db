"""Chess rules engine: legal moves, check, checkmate and stalemate."""

from .board import Board, Piece, Position, initial_board, is_on_board, piece_at, positions_equal
from .game import Game, GameStatus, MoveResult, apply_move, can_move, evaluate, is_in_check
from .move import Move
from .movegen import legal_moves

__all__ = [
    "Board",
    "Game",
    "GameStatus",
    "Move",
    "MoveResult",
    "Piece",
    "Position",
    "apply_move",
    "can_move",
    "evaluate",
    "initial_board",
    "is_in_check",
    "is_on_board",
    "legal_moves",
    "piece_at",
    "positions_equal",
]

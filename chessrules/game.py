"""Game-state evaluation and move application."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .board import Board, Position, as_position
from .constants import PAWN, PROMOTION_KINDS, PROMOTION_ROW, WHITE, opposite
from .errors import (
    EmptySquareError,
    GameOverError,
    IllegalMoveError,
    InvalidPromotionError,
    PromotionRequiredError,
)
from .move import Move
from .movegen import build_move, is_king_in_check, legal_moves

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GameStatus:
    is_check: bool
    is_checkmate: bool
    is_draw: bool

    @property
    def label(self) -> str:
        if self.is_checkmate:
            return "checkmate"
        if self.is_draw:
            return "stalemate"
        if self.is_check:
            return "check"
        return "ongoing"


@dataclass(frozen=True, slots=True)
class MoveResult:
    board: Board
    move: Move
    is_check: bool
    is_checkmate: bool
    is_draw: bool


def is_in_check(board: Board, color: str, last_move: Move | None = None) -> bool:
    return is_king_in_check(board, color, last_move)


def can_move(board: Board, color: str, last_move: Move | None = None) -> bool:
    for pos, _piece in list(board.occupied(color)):
        if legal_moves(board, pos, last_move):
            return True
    return False


def evaluate(board: Board, color: str, last_move: Move | None = None) -> GameStatus:
    """Status of ``color`` as the side to move. Recomputed from scratch."""
    check = is_in_check(board, color, last_move)
    has_moves = can_move(board, color, last_move)
    return GameStatus(
        is_check=check,
        is_checkmate=check and not has_moves,
        is_draw=not check and not has_moves,
    )


def apply_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    promotion: str | None = None,
    last_move: Move | None = None,
) -> MoveResult:
    """Play a legal move and report the opponent's resulting status.

    A pawn reaching its last row needs ``promotion``; without it
    :class:`PromotionRequiredError` is raised so the caller can ask the
    player and call again.
    """
    piece = board.piece_at(from_pos)
    if piece is None:
        raise EmptySquareError(f"No piece on {from_pos}")
    if to_pos not in legal_moves(board, from_pos, last_move):
        raise IllegalMoveError(f"Illegal move: {from_pos}{to_pos}")

    promotes = piece.kind == PAWN and to_pos.row == PROMOTION_ROW[piece.color]
    if promotes and promotion is None:
        raise PromotionRequiredError(f"Promotion piece required for {from_pos}{to_pos}")
    if promotion is not None:
        if not promotes:
            raise InvalidPromotionError(f"Move {from_pos}{to_pos} does not promote")
        if promotion not in PROMOTION_KINDS:
            raise InvalidPromotionError(f"Cannot promote to {promotion}")

    move = build_move(board, from_pos, to_pos, promotion)
    new_board = board.simulate_move(from_pos, to_pos)
    if promotion is not None:
        new_board = new_board.promote(to_pos, promotion)

    status = evaluate(new_board, opposite(piece.color), move)
    return MoveResult(
        board=new_board,
        move=move,
        is_check=status.is_check,
        is_checkmate=status.is_checkmate,
        is_draw=status.is_draw,
    )


class Game:
    """A single game: current board, side to move, history and verdicts."""

    def __init__(self, board: Board | None = None, turn: str = WHITE):
        self.history: list[Move] = []
        self.reset(board, turn)

    def reset(self, board: Board | None = None, turn: str = WHITE) -> None:
        self.board = Board.initial() if board is None else board
        self.turn = turn
        self.history = []
        self.status = evaluate(self.board, self.turn, None)

    @property
    def last_move(self) -> Move | None:
        return self.history[-1] if self.history else None

    @property
    def is_check(self) -> bool:
        return self.status.is_check

    @property
    def is_checkmate(self) -> bool:
        return self.status.is_checkmate

    @property
    def is_draw(self) -> bool:
        return self.status.is_draw

    @property
    def is_over(self) -> bool:
        return self.status.is_checkmate or self.status.is_draw

    def legal_moves(self, square: Position | str) -> list[Position]:
        pos = as_position(square)
        piece = self.board.piece_at(pos)
        if self.is_over or piece is None or piece.color != self.turn:
            return []
        return legal_moves(self.board, pos, self.last_move)

    def play(
        self,
        from_square: Position | str,
        to_square: Position | str,
        promotion: str | None = None,
    ) -> MoveResult:
        if self.is_over:
            raise GameOverError(f"Game is over ({self.status.label})")

        from_pos = as_position(from_square)
        to_pos = as_position(to_square)
        piece = self.board.piece_at(from_pos)
        if piece is None:
            raise EmptySquareError(f"No piece on {from_pos}")
        if piece.color != self.turn:
            raise IllegalMoveError(f"It is {self.turn}'s turn, {from_pos} holds a {piece.color} piece")

        result = apply_move(self.board, from_pos, to_pos, promotion, self.last_move)

        self.board = result.board
        self.history.append(result.move)
        self.turn = opposite(self.turn)
        self.status = GameStatus(
            is_check=result.is_check,
            is_checkmate=result.is_checkmate,
            is_draw=result.is_draw,
        )

        logger.debug("%s played %s, %s to move", piece.color, result.move.uci(), self.turn)
        if self.is_checkmate:
            logger.info("Checkmate after %d moves, %s wins", len(self.history), piece.color)
        elif self.is_draw:
            logger.info("Stalemate after %d moves", len(self.history))
        return result

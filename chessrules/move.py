"""Move record appended to a game's history."""

from __future__ import annotations

from dataclasses import dataclass

from .board import Piece, Position
from .constants import KIND_SYMBOLS, PAWN


@dataclass(frozen=True, slots=True)
class Move:
    from_square: Position
    to_square: Position
    piece: Piece
    captured: Piece | None = None
    promotion: str | None = None
    is_castling: bool = False
    is_en_passant: bool = False

    @property
    def is_double_step(self) -> bool:
        return self.piece.kind == PAWN and abs(self.from_square.row - self.to_square.row) == 2

    def uci(self) -> str:
        promo = "" if self.promotion is None else KIND_SYMBOLS[self.promotion]
        return f"{self.from_square.name}{self.to_square.name}{promo}"

    def __str__(self) -> str:
        return self.uci()

"""Engine-wide constants and square helpers."""

from __future__ import annotations

WHITE = "white"
BLACK = "black"
COLORS = (WHITE, BLACK)

PAWN = "pawn"
KNIGHT = "knight"
BISHOP = "bishop"
ROOK = "rook"
QUEEN = "queen"
KING = "king"

PIECE_KINDS = (PAWN, KNIGHT, BISHOP, ROOK, QUEEN, KING)
PROMOTION_KINDS = (QUEEN, ROOK, BISHOP, KNIGHT)

BOARD_SIZE = 8

# Row 0 is black's back rank, row 7 is white's.
BACK_ROW = {WHITE: 7, BLACK: 0}
PAWN_START_ROW = {WHITE: 6, BLACK: 1}
PAWN_DIRECTION = {WHITE: -1, BLACK: 1}
PROMOTION_ROW = {WHITE: 0, BLACK: 7}

BACK_RANK_ORDER = (ROOK, KNIGHT, BISHOP, QUEEN, KING, BISHOP, KNIGHT, ROOK)

KING_START_COL = 4
KINGSIDE_ROOK_COL = 7
QUEENSIDE_ROOK_COL = 0
KINGSIDE_KING_COL = 6
QUEENSIDE_KING_COL = 2
KINGSIDE_ROOK_TARGET_COL = 5
QUEENSIDE_ROOK_TARGET_COL = 3

KIND_SYMBOLS = {
    PAWN: "p",
    KNIGHT: "n",
    BISHOP: "b",
    ROOK: "r",
    QUEEN: "q",
    KING: "k",
}

SYMBOL_TO_KIND = {v: k for k, v in KIND_SYMBOLS.items()}

FILES = "abcdefgh"
RANKS = "87654321"


def opposite(color: str) -> str:
    return BLACK if color == WHITE else WHITE


def piece_symbol(kind: str, color: str) -> str:
    symbol = KIND_SYMBOLS[kind]
    return symbol.upper() if color == WHITE else symbol


def square_name(row: int, col: int) -> str:
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise ValueError(f"Square out of range: ({row}, {col})")
    return f"{FILES[col]}{RANKS[row]}"


def square_coords(square: str) -> tuple[int, int]:
    square = square.strip().lower()
    if len(square) != 2 or square[0] not in FILES or square[1] not in RANKS:
        raise ValueError(f"Invalid square: {square}")
    return RANKS.index(square[1]), FILES.index(square[0])

"""Board representation with copy-on-write move simulation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace

from .constants import (
    BACK_RANK_ORDER,
    BACK_ROW,
    BLACK,
    BOARD_SIZE,
    COLORS,
    KING,
    KINGSIDE_KING_COL,
    KINGSIDE_ROOK_COL,
    KINGSIDE_ROOK_TARGET_COL,
    PAWN,
    PAWN_START_ROW,
    PIECE_KINDS,
    QUEENSIDE_ROOK_COL,
    QUEENSIDE_ROOK_TARGET_COL,
    SYMBOL_TO_KIND,
    WHITE,
    piece_symbol,
    square_coords,
    square_name,
)
from .errors import EmptySquareError


@dataclass(frozen=True, slots=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_name(cls, square: str) -> Position:
        row, col = square_coords(square)
        return cls(row, col)

    @property
    def name(self) -> str:
        return square_name(self.row, self.col)

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Piece:
    """A piece value.

    Pieces are immutable so that boards produced by simulation can share
    them. Relocation and promotion replace the piece in its new cell.
    """

    kind: str
    color: str
    has_moved: bool = False

    def __post_init__(self) -> None:
        if self.kind not in PIECE_KINDS:
            raise ValueError(f"Invalid piece kind: {self.kind}")
        if self.color not in COLORS:
            raise ValueError(f"Invalid piece color: {self.color}")

    @property
    def symbol(self) -> str:
        return piece_symbol(self.kind, self.color)


def is_on_board(pos: Position) -> bool:
    return 0 <= pos.row < BOARD_SIZE and 0 <= pos.col < BOARD_SIZE


def positions_equal(a: Position | None, b: Position | None) -> bool:
    if a is None or b is None:
        return False
    return a.row == b.row and a.col == b.col


def as_position(square: Position | str) -> Position:
    if isinstance(square, Position):
        return square
    return Position.from_name(square)


class Board:
    __slots__ = ("_grid",)

    def __init__(self, grid: list[list[Piece | None]] | None = None):
        if grid is None:
            grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
            raise ValueError("Board grid must be 8x8")
        self._grid = [row[:] for row in grid]

    @classmethod
    def _adopt(cls, grid: list[list[Piece | None]]) -> Board:
        # Takes ownership of a grid built by this module; no copy.
        board = cls.__new__(cls)
        board._grid = grid
        return board

    @classmethod
    def initial(cls) -> Board:
        board = cls()
        for color in COLORS:
            back_row = BACK_ROW[color]
            pawn_row = PAWN_START_ROW[color]
            for col, kind in enumerate(BACK_RANK_ORDER):
                board._grid[back_row][col] = Piece(kind, color)
                board._grid[pawn_row][col] = Piece(PAWN, color)
        return board

    @classmethod
    def from_diagram(
        cls,
        rows: Iterable[str],
        moved: Iterable[Position | str] = (),
    ) -> Board:
        """Build a board from eight rows of piece letters, row 0 first.

        Uppercase letters are white, lowercase black, ``.`` is an empty
        square; spaces are ignored. Pieces on the squares listed in
        ``moved`` are marked as having moved.
        """
        lines = [row.replace(" ", "") for row in rows]
        if len(lines) != BOARD_SIZE:
            raise ValueError(f"Diagram must have 8 rows, got {len(lines)}")

        moved_set = {as_position(sq) for sq in moved}
        board = cls()
        for row_idx, line in enumerate(lines):
            if len(line) != BOARD_SIZE:
                raise ValueError(f"Invalid diagram row: {line!r}")
            for col_idx, ch in enumerate(line):
                if ch == ".":
                    continue
                kind = SYMBOL_TO_KIND.get(ch.lower())
                if kind is None:
                    raise ValueError(f"Invalid piece symbol in diagram: {ch}")
                color = WHITE if ch.isupper() else BLACK
                pos = Position(row_idx, col_idx)
                board._grid[row_idx][col_idx] = Piece(kind, color, has_moved=pos in moved_set)

        for pos in moved_set:
            if board.piece_at(pos) is None:
                raise ValueError(f"No piece to mark as moved on {pos}")
        return board

    def piece_at(self, pos: Position) -> Piece | None:
        return self._grid[pos.row][pos.col]

    def copy(self) -> Board:
        return Board._adopt([row[:] for row in self._grid])

    def squares(self) -> Iterator[tuple[Position, Piece]]:
        for row_idx, row in enumerate(self._grid):
            for col_idx, piece in enumerate(row):
                if piece is not None:
                    yield Position(row_idx, col_idx), piece

    def occupied(self, color: str) -> Iterator[tuple[Position, Piece]]:
        for pos, piece in self.squares():
            if piece.color == color:
                yield pos, piece

    def find_king(self, color: str) -> Position | None:
        for pos, piece in self.occupied(color):
            if piece.kind == KING:
                return pos
        return None

    def simulate_move(self, from_pos: Position, to_pos: Position) -> Board:
        """Return a new board with the piece on ``from_pos`` moved to ``to_pos``.

        Castling relocates the rook and en passant removes the passed pawn.
        Promotion is not applied; see :meth:`promote`. The receiver is left
        untouched.
        """
        piece = self.piece_at(from_pos)
        if piece is None:
            raise EmptySquareError(f"No piece on {from_pos}")

        grid = [row[:] for row in self._grid]

        if piece.kind == KING and abs(from_pos.col - to_pos.col) == 2:
            if to_pos.col == KINGSIDE_KING_COL:
                rook_from, rook_to = KINGSIDE_ROOK_COL, KINGSIDE_ROOK_TARGET_COL
            else:
                rook_from, rook_to = QUEENSIDE_ROOK_COL, QUEENSIDE_ROOK_TARGET_COL
            rook = grid[from_pos.row][rook_from]
            if rook is not None:
                rook = replace(rook, has_moved=True)
            grid[from_pos.row][rook_to] = rook
            grid[from_pos.row][rook_from] = None

        if (
            piece.kind == PAWN
            and from_pos.col != to_pos.col
            and grid[to_pos.row][to_pos.col] is None
        ):
            grid[from_pos.row][to_pos.col] = None

        grid[to_pos.row][to_pos.col] = piece if piece.has_moved else replace(piece, has_moved=True)
        grid[from_pos.row][from_pos.col] = None
        return Board._adopt(grid)

    def promote(self, pos: Position, kind: str) -> Board:
        piece = self.piece_at(pos)
        if piece is None:
            raise EmptySquareError(f"No piece to promote on {pos}")
        board = self.copy()
        board._grid[pos.row][pos.col] = replace(piece, kind=kind)
        return board

    def debug_state(self) -> tuple:
        return tuple(tuple(row) for row in self._grid)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    __hash__ = None

    def __str__(self) -> str:
        rows = []
        for row in self._grid:
            rows.append(" ".join("." if piece is None else piece.symbol for piece in row))
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"Board({str(self)!r})"


def initial_board() -> Board:
    return Board.initial()


def piece_at(board: Board, pos: Position) -> Piece | None:
    return board.piece_at(pos)

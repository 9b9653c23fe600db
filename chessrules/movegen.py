"""Move generation and check detection.

Generation and check detection refer to each other: a move is legal only if
the mover's king is not attacked afterwards, and a king is attacked if some
enemy piece can move onto its square. The cycle is broken by the
``filter_checks`` flag. Check detection always asks for unfiltered moves, and
unfiltered generation never asks about check.
"""

from __future__ import annotations

from .board import Board, Piece, Position, is_on_board
from .constants import (
    BACK_ROW,
    BISHOP,
    KING,
    KING_START_COL,
    KINGSIDE_KING_COL,
    KINGSIDE_ROOK_COL,
    KINGSIDE_ROOK_TARGET_COL,
    KNIGHT,
    PAWN,
    PAWN_DIRECTION,
    PAWN_START_ROW,
    PROMOTION_KINDS,
    PROMOTION_ROW,
    QUEEN,
    QUEENSIDE_KING_COL,
    QUEENSIDE_ROOK_COL,
    QUEENSIDE_ROOK_TARGET_COL,
    ROOK,
    opposite,
)
from .errors import EmptySquareError
from .move import Move


KNIGHT_DELTAS = ((1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2))
KING_DELTAS = ((1, 1), (1, 0), (1, -1), (0, 1), (0, -1), (-1, 1), (-1, 0), (-1, -1))
BISHOP_DIRS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))
QUEEN_DIRS = BISHOP_DIRS + ROOK_DIRS

SLIDER_DIRS = {
    BISHOP: BISHOP_DIRS,
    ROOK: ROOK_DIRS,
    QUEEN: QUEEN_DIRS,
}

# (rook column, king destination, squares that must be empty, square the king crosses)
CASTLING_SIDES = (
    (KINGSIDE_ROOK_COL, KINGSIDE_KING_COL, (5, 6), KINGSIDE_ROOK_TARGET_COL),
    (QUEENSIDE_ROOK_COL, QUEENSIDE_KING_COL, (1, 2, 3), QUEENSIDE_ROOK_TARGET_COL),
)


def _allows_en_passant(pos: Position, target: Position, pawn: Piece, last_move: Move | None) -> bool:
    if last_move is None or not last_move.is_double_step:
        return False
    if last_move.piece.color == pawn.color:
        return False
    return last_move.to_square.row == pos.row and last_move.to_square.col == target.col


def _generate_pawn_moves(
    board: Board,
    pos: Position,
    piece: Piece,
    last_move: Move | None,
    moves: list[Position],
) -> None:
    direction = PAWN_DIRECTION[piece.color]

    one_step = pos.offset(direction, 0)
    if is_on_board(one_step) and board.piece_at(one_step) is None:
        moves.append(one_step)
        if pos.row == PAWN_START_ROW[piece.color]:
            two_step = pos.offset(2 * direction, 0)
            if board.piece_at(two_step) is None:
                moves.append(two_step)

    for d_col in (-1, 1):
        target = pos.offset(direction, d_col)
        if not is_on_board(target):
            continue
        occupant = board.piece_at(target)
        if occupant is not None:
            if occupant.color != piece.color:
                moves.append(target)
        elif _allows_en_passant(pos, target, piece, last_move):
            moves.append(target)


def _generate_leaper_moves(
    board: Board,
    pos: Position,
    piece: Piece,
    deltas: tuple[tuple[int, int], ...],
    moves: list[Position],
) -> None:
    for d_row, d_col in deltas:
        target = pos.offset(d_row, d_col)
        if not is_on_board(target):
            continue
        occupant = board.piece_at(target)
        if occupant is None or occupant.color != piece.color:
            moves.append(target)


def _generate_slider_moves(
    board: Board,
    pos: Position,
    piece: Piece,
    directions: tuple[tuple[int, int], ...],
    moves: list[Position],
) -> None:
    for d_row, d_col in directions:
        target = pos.offset(d_row, d_col)
        while is_on_board(target):
            occupant = board.piece_at(target)
            if occupant is None:
                moves.append(target)
            else:
                if occupant.color != piece.color:
                    moves.append(target)
                break
            target = target.offset(d_row, d_col)


def _generate_castling(
    board: Board,
    pos: Position,
    piece: Piece,
    last_move: Move | None,
    moves: list[Position],
) -> None:
    if piece.has_moved:
        return
    if pos.row != BACK_ROW[piece.color] or pos.col != KING_START_COL:
        return
    if is_king_in_check(board, piece.color, last_move):
        return

    for rook_col, king_col, between, crossed_col in CASTLING_SIDES:
        rook = board.piece_at(Position(pos.row, rook_col))
        if rook is None or rook.kind != ROOK or rook.color != piece.color or rook.has_moved:
            continue
        if any(board.piece_at(Position(pos.row, col)) is not None for col in between):
            continue
        crossed = board.simulate_move(pos, Position(pos.row, crossed_col))
        if is_king_in_check(crossed, piece.color, last_move):
            continue
        # The destination itself is checked by the legality filter.
        moves.append(Position(pos.row, king_col))


def valid_moves(
    board: Board,
    pos: Position,
    last_move: Move | None = None,
    filter_checks: bool = True,
) -> list[Position]:
    """Destinations for the piece on ``pos``.

    With ``filter_checks`` disabled the result is the pseudo-legal set used
    for attack detection: no castling, and moves exposing the own king are
    kept.
    """
    piece = board.piece_at(pos)
    if piece is None:
        return []

    moves: list[Position] = []
    if piece.kind == PAWN:
        _generate_pawn_moves(board, pos, piece, last_move, moves)
    elif piece.kind == KNIGHT:
        _generate_leaper_moves(board, pos, piece, KNIGHT_DELTAS, moves)
    elif piece.kind == KING:
        _generate_leaper_moves(board, pos, piece, KING_DELTAS, moves)
        if filter_checks:
            _generate_castling(board, pos, piece, last_move, moves)
    else:
        _generate_slider_moves(board, pos, piece, SLIDER_DIRS[piece.kind], moves)

    if not filter_checks:
        return moves

    return [
        target
        for target in moves
        if not is_king_in_check(board.simulate_move(pos, target), piece.color, last_move)
    ]


def pseudo_legal_moves(board: Board, pos: Position, last_move: Move | None = None) -> list[Position]:
    return valid_moves(board, pos, last_move, filter_checks=False)


def legal_moves(board: Board, pos: Position, last_move: Move | None = None) -> list[Position]:
    return valid_moves(board, pos, last_move, filter_checks=True)


def king_square(board: Board, color: str) -> Position | None:
    return board.find_king(color)


def is_king_in_check(board: Board, color: str, last_move: Move | None = None) -> bool:
    ksq = king_square(board, color)
    if ksq is None:
        return False

    for pos, _piece in board.occupied(opposite(color)):
        if ksq in pseudo_legal_moves(board, pos, last_move):
            return True
    return False


def build_move(
    board: Board,
    from_pos: Position,
    to_pos: Position,
    promotion: str | None = None,
) -> Move:
    """Describe the move ``from_pos -> to_pos`` as it would happen on ``board``."""
    piece = board.piece_at(from_pos)
    if piece is None:
        raise EmptySquareError(f"No piece on {from_pos}")

    captured = board.piece_at(to_pos)
    is_castling = piece.kind == KING and abs(from_pos.col - to_pos.col) == 2
    is_en_passant = piece.kind == PAWN and from_pos.col != to_pos.col and captured is None
    if is_en_passant:
        captured = board.piece_at(Position(from_pos.row, to_pos.col))

    return Move(
        from_square=from_pos,
        to_square=to_pos,
        piece=piece,
        captured=captured,
        promotion=promotion,
        is_castling=is_castling,
        is_en_passant=is_en_passant,
    )


def generate_legal_moves(board: Board, color: str, last_move: Move | None = None) -> list[Move]:
    """Every legal move for ``color``, one record per promotion choice."""
    result: list[Move] = []
    for pos, piece in list(board.occupied(color)):
        for target in legal_moves(board, pos, last_move):
            if piece.kind == PAWN and target.row == PROMOTION_ROW[piece.color]:
                for kind in PROMOTION_KINDS:
                    result.append(build_move(board, pos, target, kind))
            else:
                result.append(build_move(board, pos, target))
    return result

"""Command-line utilities for the chess rules engine."""

from __future__ import annotations

import argparse
import logging
import sys

from chessrules.board import Board, Position
from chessrules.constants import SYMBOL_TO_KIND, WHITE
from chessrules.errors import ChessRulesError
from chessrules.game import Game
from chessrules.perft import perft, perft_divide


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chess rules engine utilities")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=False)

    subparsers.add_parser("show", help="Print the initial board")

    moves_parser = subparsers.add_parser("moves", help="List legal destinations for a square")
    moves_parser.add_argument("square", help="Square of the piece, e.g. e2")
    moves_parser.add_argument("--after", nargs="*", default=[], help="Moves played first, e.g. e2e4 e7e5")

    play_parser = subparsers.add_parser("play", help="Play a sequence of moves")
    play_parser.add_argument("moves", nargs="+", help="Coordinate moves, e.g. e2e4 e7e8q")

    perft_parser = subparsers.add_parser("perft", help="Run perft from the initial board")
    perft_parser.add_argument("depth", type=int, help="Perft depth")
    perft_parser.add_argument("--divide", action="store_true", help="Show per-move split")

    return parser


def parse_move(text: str) -> tuple[Position, Position, str | None]:
    text = text.strip().lower()
    if len(text) not in (4, 5):
        raise ValueError(f"Invalid move: {text}")
    promotion = None
    if len(text) == 5:
        promotion = SYMBOL_TO_KIND.get(text[4])
        if promotion is None:
            raise ValueError(f"Invalid promotion piece in move: {text}")
    return Position.from_name(text[:2]), Position.from_name(text[2:4]), promotion


def play_moves(game: Game, moves: list[str]) -> None:
    for text in moves:
        from_pos, to_pos, promotion = parse_move(text)
        game.play(from_pos, to_pos, promotion)


def run() -> int:
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())

    game = Game()
    try:
        if args.command == "moves":
            play_moves(game, args.after)
            targets = game.legal_moves(args.square)
            print(" ".join(pos.name for pos in targets))
            return 0

        if args.command == "play":
            play_moves(game, args.moves)
            print(game.board)
            print(f"turn={game.turn} status={game.status.label}")
            return 0

        if args.command == "perft":
            board = Board.initial()
            if args.divide:
                for move, count in perft_divide(board, WHITE, args.depth).items():
                    print(f"{move}: {count}")
            else:
                print(perft(board, WHITE, args.depth))
            return 0
    except ChessRulesError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(game.board)
    return 0


if __name__ == "__main__":
    sys.exit(run())

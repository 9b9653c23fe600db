#!/usr/bin/env python3
"""Time perft on reference positions and record the results as CSV."""

from __future__ import annotations

import argparse
import csv
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from time import perf_counter
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chessrules.board import Board
from chessrules.constants import WHITE
from chessrules.perft import perft


KIWIPETE = (
    "r . . . k . . r",
    "p . p p q p b .",
    "b n . . p n p .",
    ". . . P N . . .",
    ". p . . P . . .",
    ". . N . . Q . p",
    "P P P B B P P P",
    "R . . . K . . R",
)


@dataclass(frozen=True)
class PositionCase:
    name: str
    diagram: tuple[str, ...] | None
    # Deeper runs on busy middlegames take minutes with copy-on-write boards.
    depth_cap: int | None = None

    def board(self) -> Board:
        if self.diagram is None:
            return Board.initial()
        return Board.from_diagram(self.diagram)

    def depths(self, max_depth: int) -> range:
        deepest = max_depth if self.depth_cap is None else min(max_depth, self.depth_cap)
        return range(1, deepest + 1)


CASES = (
    PositionCase("start", None),
    PositionCase("kiwipete", KIWIPETE, depth_cap=2),
)


@dataclass(frozen=True)
class BenchRow:
    position: str
    depth: int
    nodes: int
    elapsed_ms: float
    nps: int


def time_perft(case: PositionCase, depth: int) -> BenchRow:
    board = case.board()
    start = perf_counter()
    nodes = perft(board, WHITE, depth)
    elapsed = perf_counter() - start
    return BenchRow(
        position=case.name,
        depth=depth,
        nodes=nodes,
        elapsed_ms=round(elapsed * 1000.0, 3),
        nps=int(nodes / max(elapsed, 1e-9)),
    )


def run_perft_bench(cases: tuple[PositionCase, ...], max_depth: int) -> list[BenchRow]:
    return [time_perft(case, depth) for case in cases for depth in case.depths(max_depth)]


def write_rows(path: Path, rows: list[BenchRow]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=[field.name for field in fields(BenchRow)])
        writer.writeheader()
        writer.writerows(asdict(row) for row in rows)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Perft benchmark")
    parser.add_argument("--max-depth", type=int, default=3, help="Deepest perft to run")
    parser.add_argument(
        "--position",
        choices=[case.name for case in CASES],
        action="append",
        help="Only run the named position (repeatable)",
    )
    parser.add_argument("--out", type=Path, default=ROOT / "benchmarks" / "perft.csv", help="CSV output path")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    cases = tuple(case for case in CASES if not args.position or case.name in args.position)

    rows = run_perft_bench(cases, args.max_depth)
    write_rows(args.out, rows)
    for row in rows:
        print(f"{row.position:<10} depth={row.depth} nodes={row.nodes} nps={row.nps}")
    print(f"wrote {args.out}")


if __name__ == "__main__":
    main()

"""Command line interface for wedding_table_planner."""
from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from .csv_loader import load_guests
from .errors import SeatingError, TimedOut
from .export import write_seating_plan
from .models import KnightConfig, OptimizationConfig
from .solver import compute_table_stats, find_conflicts, grade_tables, optimize_seating

logger = logging.getLogger(__name__)

REPORT_FIELDS = [
    "table", "grade", "knight", "capacity", "occupancy", "free_seats", "fill_ratio",
    "side", "category", "entries", "group_count", "members",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wedding table assignment")
    parser.add_argument("--guests", required=True, type=Path, help="Path to the guest list (.csv or .xlsx)")
    parser.add_argument("--table-capacity", type=int, default=12,
                        help="Seats per standard table.")
    parser.add_argument("--knight-count", type=int, default=0,
                        help="Number of knight (long) tables. Zero disables them.")
    parser.add_argument("--knight-capacity", type=int, default=20,
                        help="Seats per knight table.")
    parser.add_argument("--knight-group", action="append", default=[], metavar="NAME",
                        help="Group to seat at the knight tables. Repeat or separate with commas. "
                             "Without it friend groups are chosen automatically.")
    parser.add_argument("--max-iterations", type=int,
                        help="Stop after seating this many groups on standard tables.")
    parser.add_argument("--timeout", type=float,
                        help="Stop when the standard pass runs longer than this many seconds.")
    parser.add_argument("--out-assignments", type=Path,
                        help="Write assignments CSV: guest,table.")
    parser.add_argument("--out-plan", type=Path,
                        help="Write the seating plan (.xlsx or .csv).")
    parser.add_argument("--out-report", type=Path,
                        help="Write per-table report CSV with fill and grades.")
    parser.add_argument("--verbose", action="store_true", help="Log every phase decision.")
    return parser


def split_names(values: Sequence[str]) -> List[str]:
    return [part.strip() for value in values for part in value.split(",") if part.strip()]


def config_from_args(args: argparse.Namespace) -> OptimizationConfig:
    def progress(percent: int, message: str) -> None:
        logger.info("[%3d%%] %s", percent, message)

    return OptimizationConfig(
        table_capacity=args.table_capacity,
        knight_config=KnightConfig(
            enabled=args.knight_count > 0,
            count=args.knight_count,
            capacity=args.knight_capacity,
        ),
        knight_group_names=split_names(args.knight_group),
        on_progress=progress,
        max_iterations=args.max_iterations,
        timeout_seconds=args.timeout,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by ``python -m wedding_table_planner.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        guests = load_guests(args.guests)
        result = optimize_seating(guests, config_from_args(args))
    except TimedOut as e:
        print(f"error: {e}", file=sys.stderr)
        for guest in e.result.unseated:
            print(f"[UNSEATED] {guest.id},{guest.name}", file=sys.stderr)
        return 2
    except (SeatingError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    names = {g.id: g.name for g in guests}

    # Print simple assignments
    for guest_id, table in result.assignments.items():
        print(f"{names[guest_id]},{table}")

    if args.out_assignments:
        args.out_assignments.parent.mkdir(parents=True, exist_ok=True)
        with args.out_assignments.open("w", newline="") as f:
            w = csv.writer(f)
            w.writerow(["guest", "table"])
            for guest_id, table in result.assignments.items():
                w.writerow([names[guest_id], table])

    if args.out_plan:
        write_seating_plan(result, args.out_plan)

    stats = []
    for table in result.tables:
        s = compute_table_stats(table)
        s["members"] = "|".join(g.name for g in table.guests)
        stats.append(s)
    graded = grade_tables(stats)

    for s in graded:
        kind = "knight" if s["knight"] else "standard"
        print(f"[REPORT] {s['table']} {kind} grade={s['grade']} seats={s['occupancy']}/{s['capacity']} "
              f"side={s['side'] or '-'} groups={s['group_count']}")
    for message in result.warnings:
        print(f"[WARN] {message}")
    for table, a, b in find_conflicts(result):
        print(f"[WARN] {names[a]} and {names[b]} are marked as conflicting but share {table}")

    if args.out_report:
        args.out_report.parent.mkdir(parents=True, exist_ok=True)
        with args.out_report.open("w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=REPORT_FIELDS)
            w.writeheader()
            for s in graded:
                row = {k: s[k] for k in REPORT_FIELDS}
                row["fill_ratio"] = f"{s['fill_ratio']:.4f}"
                w.writerow(row)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())

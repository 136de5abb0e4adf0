"""
Greedy table packing for wedding guests.

Phases, in order:
    1. group guests by relationship key and classify each group
       (dominant side and category, weighted by seats)
    2. knight tables: optional bank of long tables for privileged groups
    3. standard tables: best fit decreasing, splitting groups that do not fit
    4. consolidation: merge sparse standard tables

The optimizer never mutates the guests it is given and keeps no state between
runs. It returns a proposal that the caller applies.
"""
from __future__ import annotations

import dataclasses
import logging
import time
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .errors import InvalidConfiguration, TimedOut, UnassignableRemainder
from .grouping import classify_groups
from .models import (
    Group,
    Guest,
    KnightConfig,
    OptimizationConfig,
    OptimizationResult,
    TableKind,
    WorkingTable,
    normalize_group_name,
    seat_weight,
    total_seats,
)

logger = logging.getLogger(__name__)


# ----------------------------- reporting helpers -----------------------------
def compute_table_stats(table: WorkingTable) -> Dict[str, int | float | str | bool]:
    """Occupancy and composition figures for one proposed table."""
    occupancy = table.occupancy
    groups = {(g.group_id or "").strip() or f"individual-{g.id}" for g in table.guests}
    return {
        "table": table.id,
        "knight": table.is_knight,
        "capacity": table.capacity,
        "occupancy": occupancy,
        "free_seats": table.capacity - occupancy,
        "fill_ratio": occupancy / table.capacity if table.capacity else 0.0,
        "side": table.side,
        "category": table.category,
        "entries": len(table.guests),
        "group_count": len(groups),
    }


def grade_tables(stats: List[Dict[str, int | float | str | bool]]) -> List[Dict[str, int | float | str | bool]]:
    """Assign A to F based on how full each table is."""
    graded = []
    for s in stats:
        r = s["fill_ratio"]
        if r >= 0.9:
            g = "A"
        elif r >= 0.75:
            g = "B"
        elif r >= 0.6:
            g = "C"
        elif r >= 0.4:
            g = "D"
        else:
            g = "F"
        out = dict(s)
        out["grade"] = g
        graded.append(out)
    return graded


def find_conflicts(result: OptimizationResult) -> List[Tuple[str, str, str]]:
    """Return ``(table, guest, other)`` for conflicting guests seated together.

    Advisory only: the optimizer does not avoid these pairs.
    """
    found: List[Tuple[str, str, str]] = []
    for table in result.tables:
        ids = {g.id for g in table.guests}
        seen: Set[frozenset] = set()
        for guest in table.guests:
            for other in guest.conflicts_with:
                pair = frozenset((guest.id, other))
                if other in ids and other != guest.id and pair not in seen:
                    seen.add(pair)
                    found.append((table.id, guest.id, other))
    return found


# ----------------------------- packing helpers -----------------------------
def take_prefix(members: Sequence[Guest], space: int) -> List[Guest]:
    """Longest ordered prefix of ``members`` whose seats fit in ``space``."""
    chunk: List[Guest] = []
    used = 0
    for guest in members:
        weight = seat_weight(guest)
        if used + weight > space:
            break
        chunk.append(guest)
        used += weight
    return chunk


def consolidate(tables: List[WorkingTable]) -> List[WorkingTable]:
    """Merge sparse standard tables pairwise and return the surviving tables.

    Tables are visited from emptiest to fullest. Each anchor absorbs at most
    one later table that fits beside it and becomes a ``both`` table. Knight
    tables and full tables are never touched.
    """
    standard = sorted((t for t in tables if not t.is_knight), key=lambda t: t.occupancy)
    merged: Set[str] = set()
    for i, anchor in enumerate(standard):
        if anchor.id in merged:
            continue
        size = anchor.occupancy
        if size >= anchor.capacity:
            continue
        for other in standard[i + 1:]:
            if other.id in merged:
                continue
            if size + other.occupancy <= anchor.capacity:
                logger.debug("Merging %s (%d) into %s (%d)", other.id, other.occupancy, anchor.id, size)
                anchor.guests.extend(other.guests)
                anchor.side = "both"
                merged.add(other.id)
                break
    return [t for t in tables if t.id not in merged]


def validate_config(config: OptimizationConfig) -> None:
    """Reject unusable options before any seating starts."""
    if config.table_capacity is None or config.table_capacity < 1:
        raise InvalidConfiguration(f"table_capacity must be positive, got {config.table_capacity}")
    knights = config.knight_config
    if knights is not None:
        if knights.count is None or knights.count < 0:
            raise InvalidConfiguration(f"knight table count must not be negative, got {knights.count}")
        if knights.enabled and (knights.capacity is None or knights.capacity < 1):
            raise InvalidConfiguration(f"knight table capacity must be positive, got {knights.capacity}")
    if config.max_iterations is not None and config.max_iterations < 1:
        raise InvalidConfiguration(f"max_iterations must be positive, got {config.max_iterations}")
    if config.timeout_seconds is not None and config.timeout_seconds <= 0:
        raise InvalidConfiguration(f"timeout_seconds must be positive, got {config.timeout_seconds}")


# ----------------------------- model -----------------------------
class SeatingModel:
    """Knight tables first, then best fit decreasing, then consolidation."""

    def __init__(self, config: Optional[OptimizationConfig] = None) -> None:
        self.config = config or OptimizationConfig()
        self.guests: Tuple[Guest, ...] = ()
        # Working set, rebuilt by every solve()
        self._tables: Dict[str, WorkingTable] = {}
        self._counter = 0
        self._progress = 0
        self._warnings: List[str] = []

    def build(self, guests: Iterable[Guest]) -> None:
        """Validate the configuration and take a snapshot of the guests."""
        validate_config(self.config)
        self.guests = tuple(guests)

    # ----------------------------- internals -----------------------------
    @property
    def _knight_names(self) -> List[str]:
        return [n for n in self.config.knight_group_names or [] if normalize_group_name(n)]

    def _report(self, percent: int, message: str) -> None:
        self._progress = min(100, max(self._progress, percent))
        logger.debug("[%3d%%] %s", self._progress, message)
        if self.config.on_progress is not None:
            self.config.on_progress(self._progress, message)

    def _new_table(self, capacity: int, kind: TableKind = TableKind.STANDARD) -> WorkingTable:
        table = WorkingTable(id=f"table-{self._counter}", capacity=capacity, kind=kind)
        self._counter += 1
        self._tables[table.id] = table
        return table

    @staticmethod
    def _seat(table: WorkingTable, group: Group, members: List[Guest]) -> None:
        if table.is_empty:
            table.side = group.dominant_side
            table.category = group.dominant_category
        table.guests.extend(members)

    def _standard_tables(self) -> List[WorkingTable]:
        return [t for t in self._tables.values() if not t.is_knight]

    def _seat_knight_tables(self, groups: List[Group], knights: KnightConfig) -> List[Group]:
        """Fill the knight bank and return the groups left for standard tables."""
        tables = [self._new_table(knights.capacity, TableKind.KNIGHT) for _ in range(knights.count)]
        strict = bool(self._knight_names)
        if strict:
            candidates = [g for g in groups if g.is_requested_for_knight]
            pool = [g for g in groups if not g.is_requested_for_knight]
        else:
            candidates = [g for g in groups if g.dominant_category == "friend"]
            pool = [g for g in groups if g.dominant_category != "friend"]
        logger.info("Knight tables: %d x %d seats, %d candidate groups (%s mode)",
                    knights.count, knights.capacity, len(candidates), "strict" if strict else "auto")

        for group in sorted(candidates, key=lambda g: g.size, reverse=True):
            remaining = list(group.members)
            while remaining:
                # Roomiest table first, earliest created on ties
                target = None
                for table in tables:
                    if table.remaining > 0 and (target is None or table.remaining > target.remaining):
                        target = table
                chunk = take_prefix(remaining, target.remaining) if target is not None else []
                if not chunk:
                    break
                self._seat(target, group, chunk)
                remaining = remaining[len(chunk):]

            if remaining:
                pool.append(dataclasses.replace(group, members=remaining, size=total_seats(remaining)))
                if strict:
                    message = (f"Group {group.group_id!r} only partly fits the knight tables; "
                               f"{total_seats(remaining)} seats moved to standard tables")
                    logger.warning(message)
                    self._warnings.append(message)
                    self._report(self._progress, message)
        return pool

    def _seat_group(self, group: Group) -> None:
        """Seat every member of ``group`` on standard tables."""
        capacity = self.config.table_capacity
        side = group.dominant_side
        remaining = list(group.members)
        while remaining:
            size = total_seats(remaining)
            standard = self._standard_tables()

            # Whole group into the tightest compatible gap
            best = None
            for table in standard:
                if table.remaining >= size and table.accepts_side(side):
                    if best is None or table.remaining < best.remaining:
                        best = table
            if best is not None:
                self._seat(best, group, remaining)
                return

            if size <= capacity:
                self._seat(self._new_table(capacity), group, remaining)
                return

            # Split: top off the fullest compatible table
            target, chunk = None, []
            for table in standard:
                if table.remaining > 0 and table.accepts_side(side):
                    if target is None or table.occupancy > target.occupancy:
                        target = table
            if target is not None:
                chunk = take_prefix(remaining, target.remaining)

            if not chunk:
                first = seat_weight(remaining[0])
                if first > capacity:
                    # Oversized party: the new table is widened to fit it alone
                    chunk, width = remaining[:1], first
                else:
                    chunk, width = take_prefix(remaining, capacity), capacity
                if not chunk:
                    raise UnassignableRemainder([g.id for g in remaining], group.group_id, list(self._tables.values()))
                target = self._new_table(width)
                if width > capacity:
                    logger.info("Widened %s to %d seats for %s", target.id, width, remaining[0].id)

            self._seat(target, group, chunk)
            remaining = remaining[len(chunk):]

    def _check_budget(self, done: int, pool: List[Group], started: float) -> None:
        reason = None
        if self.config.max_iterations is not None and done >= self.config.max_iterations:
            reason = f"iteration budget of {self.config.max_iterations} groups exhausted"
        elif self.config.timeout_seconds is not None and time.monotonic() - started > self.config.timeout_seconds:
            reason = f"time budget of {self.config.timeout_seconds}s exceeded"
        if reason is None:
            return
        unseated = [guest for group in pool[done:] for guest in group.members]
        logger.warning("Stopping early: %s", reason)
        raise TimedOut(self._assemble(complete=False, unseated=unseated), reason)

    def _assemble(self, complete: bool = True, unseated: Sequence[Guest] = ()) -> OptimizationResult:
        tables = list(self._tables.values())
        assignments: Dict[str, str] = {}
        for table in tables:
            for guest in table.guests:
                assignments[guest.id] = table.id
        return OptimizationResult(
            assignments=assignments,
            tables=tables,
            warnings=list(self._warnings),
            unseated=list(unseated),
            complete=complete,
        )

    # ----------------------------- solve -----------------------------
    def solve(self) -> OptimizationResult:
        """Run every phase and return the proposed tables."""
        started = time.monotonic()
        self._tables, self._counter, self._progress, self._warnings = {}, 0, 0, []
        self._report(0, "Starting optimization")

        self._report(10, "Analysing relationship groups")
        groups = classify_groups(self.guests, self._knight_names)
        logger.info("Seating %d guests (%d seats) in %d groups",
                    len(self.guests), total_seats(self.guests), len(groups))

        knights = self.config.knight_config
        pool = groups
        if knights is not None and knights.active:
            self._report(20, "Seating knight tables")
            pool = self._seat_knight_tables(groups, knights)

        self._report(40, "Seating standard tables")
        pool = sorted(pool, key=lambda g: g.size, reverse=True)
        for done, group in enumerate(pool):
            self._check_budget(done, pool, started)
            self._seat_group(group)
            self._report(40 + (done * 50) // len(pool), "Packing and splitting groups")

        self._report(90, "Merging half empty tables")
        before = len(self._tables)
        self._tables = {t.id: t for t in consolidate(list(self._tables.values()))}
        logger.info("Consolidation removed %d tables", before - len(self._tables))

        result = self._assemble()
        self._report(100, "Seating complete")
        logger.info("Proposed %d tables for %d guests", len(result.tables), len(result.assignments))
        return result


def optimize_seating(
    guests: Iterable[Guest], config: Optional[OptimizationConfig] = None, **options
) -> OptimizationResult:
    """Build a :class:`SeatingModel` for ``guests`` and solve it.

    Keyword ``options`` override fields of ``config``.
    """
    config = config or OptimizationConfig()
    if options:
        config = dataclasses.replace(config, **options)
    model = SeatingModel(config)
    model.build(guests)
    return model.solve()

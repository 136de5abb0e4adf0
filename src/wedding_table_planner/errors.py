"""Exceptions raised by the seating optimizer."""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence, Tuple

if TYPE_CHECKING:
    from .models import OptimizationResult, WorkingTable


class SeatingError(Exception):
    """Base class for optimizer failures."""


class InvalidConfiguration(SeatingError, ValueError):
    """Configuration rejected before any seating begins."""


class UnassignableRemainder(SeatingError):
    """The standard pass could not seat a single further member of a group."""

    def __init__(self, guest_ids: Sequence[str], group_id: str, tables: Sequence["WorkingTable"]) -> None:
        self.guest_ids: List[str] = list(guest_ids)
        self.group_id = group_id
        self.table_states: List[Tuple[str, int, int, str]] = [
            (t.id, t.capacity, t.occupancy, t.side) for t in tables
        ]
        super().__init__(
            f"Could not seat guests {', '.join(self.guest_ids)} of group {group_id!r} "
            f"({len(self.table_states)} tables open)"
        )


class TimedOut(SeatingError):
    """The configured iteration or time budget ran out.

    ``result`` holds the partial proposal with ``complete=False`` and the
    guests that were never placed in ``result.unseated``.
    """

    def __init__(self, result: "OptimizationResult", reason: str) -> None:
        self.result = result
        super().__init__(f"{reason}; {len(result.unseated)} guests left unseated")

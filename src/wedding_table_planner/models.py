"""Data models for wedding_table_planner."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
import math


SIDES = ("groom", "bride", "both")
CATEGORIES = ("family", "friend", "colleague", "other")

ProgressCallback = Callable[[int, str], None]


def clean_text(value: object) -> str:
    """Return ``value`` as a stripped string, mapping ``None`` and NaN to ``""``."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    text = str(value).strip()
    if text.lower() == "nan":
        return ""
    return text


def parse_pipe_list(value: object) -> List[str]:
    """Split a pipe separated string into a list.

    Empty values such as ``""`` or ``None`` return an empty list.
    ``pandas`` often provides ``float('nan')`` for missing values which is
    also treated as empty.
    """
    text = clean_text(value)
    if not text:
        return []
    return [part.strip() for part in text.split("|") if part.strip()]


def parse_category(value: object) -> str:
    """Map free text (English or Hebrew) onto one of ``CATEGORIES``."""
    text = clean_text(value).lower()
    if not text:
        return "other"
    if any(k in text for k in ("משפחה", "family", "קרוב", "משפחתי", "קרובה")):
        return "family"
    if any(k in text for k in ("חבר", "friend", "ידיד", "חברה", "ידידה")):
        return "friend"
    if any(k in text for k in ("עבודה", "colleague", "עמית", "עבודתי", "קולגה")):
        return "colleague"
    return "other"


def parse_side(value: object) -> str:
    """Map free text onto one of ``SIDES``. Unknown values count as ``both``."""
    text = clean_text(value).lower()
    if not text:
        return "both"
    if "חתן" in text or "groom" in text or text == "ח":
        return "groom"
    if "כלה" in text or "bride" in text or text == "כ":
        return "bride"
    return "both"


def parse_amount(value: object) -> int:
    """Parse a seat count. Numbers are taken as the total number of seats.

    Values outside ``0..20`` fall back to reading ``"+1"`` / ``"plus 1"``
    style text; anything unreadable is a single seat.
    """
    text = clean_text(value)
    if not text:
        return 1
    try:
        num = float(text)
    except ValueError:
        num = math.nan
    if math.isnan(num) or num < 0 or num > 20:
        lowered = text.lower()
        if "+1" in lowered or "plus 1" in lowered:
            return 2
        if "+2" in lowered or "plus 2" in lowered:
            return 3
        return 1
    return max(1, int(math.floor(num)))


def parse_age(value: object) -> Optional[int]:
    text = clean_text(value)
    if not text:
        return None
    try:
        num = float(text)
    except ValueError:
        return None
    if math.isnan(num) or num <= 0 or num > 120:
        return None
    return int(math.floor(num))


def normalize_group_name(value: object) -> str:
    """Normalize a group name for case-insensitive comparison."""
    return clean_text(value).casefold()


@dataclass(frozen=True)
class Guest:
    """A guest entry. ``amount`` is the number of seats the entry needs."""

    id: str
    name: str
    category: str = "other"
    side: str = "both"
    group_id: Optional[str] = None
    amount: int = 1
    table_id: Optional[str] = None
    age: Optional[int] = None
    phone_number: str = ""
    notes: str = ""
    conflicts_with: Tuple[str, ...] = ()


def seat_weight(guest: Guest) -> int:
    """Seats taken by ``guest``. Missing or non-positive amounts count as one."""
    return guest.amount if guest.amount and guest.amount > 0 else 1


def total_seats(guests) -> int:
    return sum(seat_weight(g) for g in guests)


@dataclass
class Group:
    """Guests sharing a relationship key, recomputed on every run."""

    group_id: str
    members: List[Guest]
    size: int
    dominant_side: str
    dominant_category: str
    is_requested_for_knight: bool = False


class TableKind(Enum):
    KNIGHT = "knight"
    STANDARD = "standard"


@dataclass
class WorkingTable:
    """Table proposed by the optimizer, not a persisted table record."""

    id: str
    capacity: int
    kind: TableKind = TableKind.STANDARD
    side: str = ""
    category: str = ""
    guests: List[Guest] = field(default_factory=list)

    @property
    def is_knight(self) -> bool:
        return self.kind is TableKind.KNIGHT

    @property
    def occupancy(self) -> int:
        return total_seats(self.guests)

    @property
    def remaining(self) -> int:
        return self.capacity - self.occupancy

    @property
    def is_empty(self) -> bool:
        return not self.guests

    def accepts_side(self, side: str) -> bool:
        """Side compatibility: empty tables and ``both`` tables take anyone."""
        return self.is_empty or self.side == side or self.side == "both"


@dataclass
class KnightConfig:
    """Bank of long tables filled before the standard tables."""

    enabled: bool = False
    count: int = 0
    capacity: int = 20

    @property
    def active(self) -> bool:
        return self.enabled and self.count > 0


@dataclass
class OptimizationConfig:
    """Options for one optimization run."""

    table_capacity: int = 12
    knight_config: Optional[KnightConfig] = None
    knight_group_names: List[str] = field(default_factory=list)
    on_progress: Optional[ProgressCallback] = None
    # Budget checked between group iterations of the standard pass.
    max_iterations: Optional[int] = None
    timeout_seconds: Optional[float] = None


@dataclass
class OptimizationResult:
    """Proposal returned by the optimizer. Callers apply it themselves."""

    assignments: Dict[str, str] = field(default_factory=dict)
    tables: List[WorkingTable] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    unseated: List[Guest] = field(default_factory=list)
    complete: bool = True

    def table(self, table_id: str) -> Optional[WorkingTable]:
        return next((t for t in self.tables if t.id == table_id), None)

"""Relationship grouping and group classification."""
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import CATEGORIES, SIDES, Group, Guest, normalize_group_name, seat_weight, total_seats


def group_guests(guests: Iterable[Guest]) -> Dict[str, List[Guest]]:
    """Partition guests by trimmed ``group_id``.

    Guests without a group id become singleton groups keyed
    ``individual-<id>`` so they can fill any gap. A key already taken by a
    named group gets a ``-2``, ``-3``... suffix. Keyed groups come first in
    order of first appearance, then the singletons in input order.
    """
    groups: Dict[str, List[Guest]] = {}
    ungrouped: List[Guest] = []
    for guest in guests:
        key = (guest.group_id or "").strip()
        if key:
            groups.setdefault(key, []).append(guest)
        else:
            ungrouped.append(guest)
    for guest in ungrouped:
        base = key = f"individual-{guest.id}"
        n = 1
        while key in groups:
            n += 1
            key = f"{base}-{n}"
        groups[key] = [guest]
    return groups


def tally(members: Iterable[Guest], attr: str, keys: Sequence[str]) -> Dict[str, int]:
    """Seat weighted counts of ``attr`` over ``members``."""
    counts = {k: 0 for k in keys}
    for guest in members:
        value = getattr(guest, attr)
        counts[value] = counts.get(value, 0) + seat_weight(guest)
    return counts


def dominant(counts: Dict[str, int], order: Sequence[str]) -> str:
    """Largest tally. On a tie the candidate declared first wins."""
    leader = order[0]
    for key in order[1:]:
        if counts.get(key, 0) > counts.get(leader, 0):
            leader = key
    return leader


def classify_group(group_id: str, members: List[Guest], knight_names: Iterable[str] = ()) -> Group:
    wanted = {normalize_group_name(n) for n in knight_names}
    wanted.discard("")
    return Group(
        group_id=group_id,
        members=list(members),
        size=total_seats(members),
        dominant_side=dominant(tally(members, "side", SIDES), SIDES),
        dominant_category=dominant(tally(members, "category", CATEGORIES), CATEGORIES),
        is_requested_for_knight=normalize_group_name(group_id) in wanted,
    )


def classify_groups(guests: Iterable[Guest], knight_group_names: Iterable[str] = ()) -> List[Group]:
    """Group ``guests`` and classify every group."""
    names = list(knight_group_names)
    return [classify_group(gid, members, names) for gid, members in group_guests(guests).items()]

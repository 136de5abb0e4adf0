"""CSV and Excel loading utilities."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Tuple

import pandas as pd

from .models import Guest, parse_age, parse_amount, parse_category, parse_pipe_list, parse_side, clean_text

logger = logging.getLogger(__name__)

FIELDS = ("name", "category", "side", "group_id", "age", "phone_number", "amount", "notes")
# Read by name, never auto-detected
RESERVED_COLUMNS = ("id", "conflicts_with")

# Header patterns in English and Hebrew. Earlier patterns score higher on partial matches.
COLUMN_PATTERNS: Dict[str, List[str]] = {
    "name": ["שם", "שם מלא", "שם אורח", "שם האורח", "name", "full name", "guest name", "fullname"],
    "category": ["קטגוריה", "סוג", "יחס", "קשר", "category", "type", "relation", "relationship", "group type"],
    "side": ["צד", "משפחת", "חתן/כלה", "חתן או כלה", "חתן כלה", "side", "bride/groom", "bride or groom",
             "groom/bride"],
    "group_id": ["קבוצת קשר", "משפחה", "קבוצה", "מזהה משפחה", "מזהה קבוצה", "קוד משפחה", "group", "family",
                 "family id", "group id", "groupid", "familyid"],
    "age": ["גיל", "age"],
    "phone_number": ["מס' טלפון", "טלפון", "phone", "mobile", "נייד", "סלולרי", "cellphone", "מספר", "number"],
    "amount": ["פלוס כמה", "+כמה", "כמות", "כמה", "מספר אנשים", "amount", "quantity", "count", "guests", "plus",
               "seats"],
    "notes": ["הערות", "מלווים", "נלווים", "notes", "comments", "comment", "הערה", "additional"],
}


def auto_detect_columns(headers: List[str]) -> Tuple[Dict[str, str], Dict[str, int]]:
    """Guess which header holds each guest field.

    Returns ``(mapping, confidence)``. An exact match scores 100, a header
    containing a pattern (or contained in one) scores ``70 - 5 * index``.
    """
    mapping: Dict[str, str] = {}
    confidence = {f: 0 for f in FIELDS}
    for header in headers:
        normalized = clean_text(header).lower()
        if not normalized or normalized in RESERVED_COLUMNS:
            continue
        for field, patterns in COLUMN_PATTERNS.items():
            for index, pattern in enumerate(patterns):
                pattern = pattern.lower()
                if normalized == pattern:
                    mapping[field] = header
                    confidence[field] = 100
                elif pattern in normalized or normalized in pattern:
                    score = 70 - index * 5
                    if score > confidence[field]:
                        mapping[field] = header
                        confidence[field] = score
    return mapping, confidence


def validate_mapping(mapping: Dict[str, str]) -> List[str]:
    """Return mapping errors. Only the name column is required."""
    errors = []
    if not mapping.get("name"):
        errors.append('A "name" column is required')
    if not mapping.get("category"):
        logger.warning('Column "category" not mapped - guests default to "other"')
    if not mapping.get("side"):
        logger.warning('Column "side" not mapped - guests default to "both"')
    return errors


def read_table(path: Path | str | IO[Any], file_name: Optional[str] = None) -> pd.DataFrame:
    """Read a guest sheet into a DataFrame, dropping completely empty rows.

    ``.xlsx`` and ``.xls`` go through ``pd.read_excel``; anything else is
    read as CSV. ``file_name`` names the format of file-like objects.
    """
    name = file_name or getattr(path, "name", None) or str(path)
    suffix = Path(str(name)).suffix.lower()
    try:
        if suffix in (".xlsx", ".xls"):
            df = pd.read_excel(path, dtype=object)
        else:
            df = pd.read_csv(path, dtype=object)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ValueError(f"Could not read {name}: {exc}") from exc
    df = df.dropna(how="all")
    if df.empty:
        raise ValueError(f"No guest rows found in {name}")
    return df


def frame_to_guests(df: pd.DataFrame, mapping: Optional[Dict[str, str]] = None) -> List[Guest]:
    """Turn sheet rows into guests using ``mapping`` (auto-detected if omitted)."""
    headers = [str(c) for c in df.columns]
    df = df.rename(columns=dict(zip(df.columns, headers)))
    if mapping is None:
        mapping, confidence = auto_detect_columns(headers)
        logger.info("Detected columns: %s", {f: (mapping[f], confidence[f]) for f in mapping})
    errors = validate_mapping(mapping)
    if errors:
        raise ValueError("; ".join(errors))

    def cell(row, field: str) -> object:
        column = mapping.get(field)
        return row.get(column) if column else None

    has_ids = "id" in df.columns and mapping.get("name") != "id"
    guests: List[Guest] = []
    for index, (_, row) in enumerate(df.iterrows(), start=1):
        name = clean_text(cell(row, "name"))
        if not name:
            continue
        raw_category = clean_text(cell(row, "category"))
        group_id = clean_text(cell(row, "group_id"))
        # No explicit group: a descriptive category ("army friends") keeps its sub group
        if not group_id and raw_category:
            group_id = raw_category
        guest_id = clean_text(row.get("id")) if has_ids else ""
        guests.append(
            Guest(
                id=guest_id or f"g{index}",
                name=name,
                category=parse_category(raw_category),
                side=parse_side(cell(row, "side")),
                group_id=group_id or None,
                amount=parse_amount(cell(row, "amount")) if mapping.get("amount") else 1,
                age=parse_age(cell(row, "age")),
                phone_number=clean_text(cell(row, "phone_number")),
                notes=clean_text(cell(row, "notes")),
                conflicts_with=tuple(parse_pipe_list(row.get("conflicts_with"))),
            )
        )

    ids = [g.id for g in guests]
    if len(set(ids)) != len(ids):
        raise ValueError("Guest ids must be unique")
    return guests


def load_guests(
    path: Path | str | IO[Any], mapping: Optional[Dict[str, str]] = None, file_name: Optional[str] = None
) -> List[Guest]:
    """Load guests from a CSV or Excel guest list."""
    guests = frame_to_guests(read_table(path, file_name), mapping)
    logger.info("Loaded %d guests from %s", len(guests), file_name or path)
    return guests

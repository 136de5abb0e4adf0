"""Seating plan export."""
from __future__ import annotations

import io
from pathlib import Path

import pandas as pd

from .models import OptimizationResult, seat_weight

PLAN_COLUMNS = ["table", "name", "phone", "category", "side", "group", "count", "notes", "knight"]


def result_to_frame(result: OptimizationResult) -> pd.DataFrame:
    """One row per guest, sorted by table number, then group, then name.

    Table numbers are 1-based in the order the tables were proposed.
    """
    rows = []
    for number, table in enumerate(result.tables, start=1):
        for guest in table.guests:
            rows.append({
                "table": number,
                "name": guest.name,
                "phone": guest.phone_number,
                "category": guest.category,
                "side": guest.side,
                "group": guest.group_id or "",
                "count": seat_weight(guest),
                "notes": guest.notes,
                "knight": table.is_knight,
            })
    df = pd.DataFrame(rows, columns=PLAN_COLUMNS)
    return df.sort_values(["table", "group", "name"], kind="stable").reset_index(drop=True)


def write_seating_plan(result: OptimizationResult, path: Path | str) -> Path:
    """Write the plan as ``.xlsx`` (openpyxl) or, for any other suffix, CSV."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = result_to_frame(result)
    if path.suffix.lower() == ".xlsx":
        df.to_excel(path, index=False, sheet_name="Seating Plan", engine="openpyxl")
    else:
        df.to_csv(path, index=False)
    return path


def guest_template_frame() -> pd.DataFrame:
    """Example guest list accepted by :func:`csv_loader.load_guests`."""
    return pd.DataFrame([
        {"side": "groom", "group": "Army friends", "name": "Dan Levi", "phone": "050-1234567", "amount": 2},
        {"side": "bride", "group": "Uncles", "name": "Moshe Cohen", "phone": "054-9876543", "amount": 1},
    ])


def frame_to_bytes(df: pd.DataFrame, excel: bool = False) -> bytes:
    """Serialize a frame for a download button."""
    if excel:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Seating Plan")
        return buffer.getvalue()
    return df.to_csv(index=False).encode("utf-8")

import pandas as pd

from wedding_table_planner.export import (
    PLAN_COLUMNS,
    frame_to_bytes,
    guest_template_frame,
    result_to_frame,
    write_seating_plan,
)
from wedding_table_planner.models import Guest, OptimizationResult, TableKind, WorkingTable
from wedding_table_planner.csv_loader import frame_to_guests


def sample_result():
    knight = WorkingTable(id="table-0", capacity=10, kind=TableKind.KNIGHT, guests=[
        Guest(id="1", name="Zohar", group_id="Army"),
        Guest(id="2", name="Avi", group_id="Army", amount=2),
    ])
    standard = WorkingTable(id="table-3", capacity=12, guests=[
        Guest(id="3", name="Noa", group_id="Levi"),
        Guest(id="4", name="Ben"),
        Guest(id="5", name="Adi", group_id="Levi"),
    ])
    return OptimizationResult(assignments={}, tables=[knight, standard])


def test_plan_sorted_by_table_group_name():
    df = result_to_frame(sample_result())
    assert list(df.columns) == PLAN_COLUMNS
    assert list(df["name"]) == ["Avi", "Zohar", "Ben", "Adi", "Noa"]
    assert list(df["table"]) == [1, 1, 2, 2, 2]
    assert list(df["count"]) == [2, 1, 1, 1, 1]
    assert list(df["knight"]) == [True, True, False, False, False]


def test_write_csv_plan(tmp_path):
    path = write_seating_plan(sample_result(), tmp_path / "out" / "plan.csv")
    df = pd.read_csv(path)
    assert len(df) == 5


def test_write_excel_plan(tmp_path):
    path = write_seating_plan(sample_result(), tmp_path / "plan.xlsx")
    df = pd.read_excel(path, sheet_name="Seating Plan")
    assert list(df["name"])[:2] == ["Avi", "Zohar"]


def test_template_loads_as_guest_list():
    guests = frame_to_guests(guest_template_frame())
    assert [g.amount for g in guests] == [2, 1]
    assert [g.side for g in guests] == ["groom", "bride"]
    assert frame_to_bytes(guest_template_frame()).startswith(b"side,group,name")

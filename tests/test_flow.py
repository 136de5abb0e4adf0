import pathlib

from wedding_table_planner import csv_loader, solver
from wedding_table_planner.models import KnightConfig, OptimizationConfig


def test_full_flow():
    data_dir = pathlib.Path(__file__).parent / "data"
    guests = csv_loader.load_guests(data_dir / "guests.csv")

    config = OptimizationConfig(table_capacity=10, knight_config=KnightConfig(enabled=True, count=1, capacity=6))
    result = solver.optimize_seating(guests, config)

    # all guests assigned
    assert len(result.assignments) == len(guests) == 16

    # table capacities respected
    for table in result.tables:
        assert table.occupancy <= table.capacity

    # friend groups went to the knight table
    knight = result.tables[0]
    assert knight.is_knight
    assert {g.name for g in knight.guests} == {"Dan Levi", "Yossi Katz", "Avi Mor", "Ron Bar", "Omer Paz"}

    # the party of 14 got a table of its own
    big = result.table(result.assignments["16"])
    assert (big.capacity, len(big.guests)) == (14, 1)

    # groups are never split when they fit a table
    for group in ("Levi family", "Cohen family", "Work"):
        tables = {result.assignments[g.id] for g in guests if g.group_id == group}
        assert len(tables) == 1

    assert len(result.tables) == 4

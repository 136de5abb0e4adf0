"""wedding_table_planner package."""
from .models import (
    Guest,
    Group,
    KnightConfig,
    OptimizationConfig,
    OptimizationResult,
    TableKind,
    WorkingTable,
)
from .errors import InvalidConfiguration, SeatingError, TimedOut, UnassignableRemainder
from .grouping import classify_groups, group_guests
from .csv_loader import auto_detect_columns, load_guests
from .solver import SeatingModel, consolidate, optimize_seating
from .export import result_to_frame, write_seating_plan

__all__ = [
    "Guest",
    "Group",
    "KnightConfig",
    "OptimizationConfig",
    "OptimizationResult",
    "TableKind",
    "WorkingTable",
    "InvalidConfiguration",
    "SeatingError",
    "TimedOut",
    "UnassignableRemainder",
    "classify_groups",
    "group_guests",
    "auto_detect_columns",
    "load_guests",
    "SeatingModel",
    "consolidate",
    "optimize_seating",
    "result_to_frame",
    "write_seating_plan",
]

"""Streamlit UI for wedding_table_planner with guest list preview and column mapping."""
from __future__ import annotations

# Add src to sys.path so wedding_table_planner can be found
import sys
import os
import io
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from wedding_table_planner.csv_loader import FIELDS, auto_detect_columns, frame_to_guests, read_table
from wedding_table_planner.errors import SeatingError, TimedOut
from wedding_table_planner.export import frame_to_bytes, guest_template_frame, result_to_frame
from wedding_table_planner.grouping import group_guests
from wedding_table_planner.models import KnightConfig, OptimizationConfig
from wedding_table_planner.solver import compute_table_stats, find_conflicts, grade_tables, optimize_seating

# -----------------------------
# Helpers
# -----------------------------

def uploadedfile_to_df(uploaded_file) -> pd.DataFrame | None:
    """Read a Streamlit UploadedFile into a DataFrame."""
    if uploaded_file is None:
        return None
    uploaded_file.seek(0)
    return read_table(io.BytesIO(uploaded_file.read()), file_name=uploaded_file.name)


def mapping_widgets(headers: list[str]) -> dict[str, str]:
    """Show the detected column for every field and let the user override it."""
    detected, confidence = auto_detect_columns(headers)
    options = [""] + headers
    mapping = {}
    cols = st.columns(4)
    for i, field in enumerate(FIELDS):
        current = detected.get(field, "")
        label = f"{field} ({confidence[field]}%)" if current else field
        choice = cols[i % 4].selectbox(label, options, index=options.index(current), key=f"map_{field}")
        if choice:
            mapping[field] = choice
    return mapping

# -----------------------------
# Sidebar options
# -----------------------------

st.sidebar.header("Seating Options")
table_capacity = st.sidebar.number_input(
    "Seats per table",
    min_value=1,
    max_value=50,
    value=12,
    help="Capacity of a standard table.",
)
knights_enabled = st.sidebar.checkbox(
    "Use knight tables",
    value=False,
    help="Seat chosen groups at long tables before the standard tables are filled.",
)
knight_count = st.sidebar.number_input("Knight tables", min_value=0, max_value=10, value=1,
                                       disabled=not knights_enabled)
knight_capacity = st.sidebar.number_input("Seats per knight table", min_value=1, max_value=80, value=20,
                                          disabled=not knights_enabled)
st.sidebar.download_button(
    "Download guest list template",
    frame_to_bytes(guest_template_frame(), excel=True),
    file_name="template_guests.xlsx",
)

# -----------------------------
# Main UI and previews
# -----------------------------

st.title("Wedding Table Planner")

_guests_file = st.file_uploader("Guest list", type=["csv", "xlsx", "xls"])

guests_df = None
if _guests_file is not None:
    try:
        guests_df = uploadedfile_to_df(_guests_file)
    except ValueError as e:
        st.error(f"Error in {_guests_file.name}: {e}")
        st.stop()
    st.subheader("Guest list preview")
    st.dataframe(guests_df, use_container_width=True)

    st.subheader("Column mapping")
    mapping = mapping_widgets([str(c) for c in guests_df.columns])

    try:
        guests = frame_to_guests(guests_df, mapping)
    except ValueError as e:
        st.error(f"Input validation error: {e}")
        st.stop()

    knight_group_names: list[str] = []
    if knights_enabled:
        group_names = [k for k in group_guests(guests) if not k.startswith("individual-")]
        knight_group_names = st.multiselect(
            "Groups for the knight tables",
            group_names,
            help="Leave empty to let the planner pick friend groups.",
        )

    run_clicked = st.button("Run planner", key="run_planner_button")

    # -----------------------------
    # Solve
    # -----------------------------

    if run_clicked:
        bar = st.progress(0, text="Starting...")
        config = OptimizationConfig(
            table_capacity=int(table_capacity),
            knight_config=KnightConfig(enabled=knights_enabled, count=int(knight_count),
                                       capacity=int(knight_capacity)),
            knight_group_names=knight_group_names,
            on_progress=lambda percent, message: bar.progress(percent, text=message),
        )
        try:
            result = optimize_seating(guests, config)
        except TimedOut as e:
            st.error(f"Planner stopped early: {e}")
            st.stop()
        except (SeatingError, ValueError) as e:
            st.error(f"Input validation error: {e}")
            st.stop()
        except Exception as e:
            st.exception(e)
            st.stop()

        for message in result.warnings:
            st.warning(message)
        names = {g.id: g.name for g in guests}
        for table, a, b in find_conflicts(result):
            st.warning(f"{names[a]} and {names[b]} are marked as conflicting but share {table}.")

        # Results table
        plan_df = result_to_frame(result)
        st.subheader("Seating plan")
        st.dataframe(plan_df, use_container_width=True)

        # Per table summary
        report_df = pd.DataFrame(grade_tables([compute_table_stats(t) for t in result.tables]))
        st.subheader("Tables")
        st.dataframe(report_df, use_container_width=True)

        st.download_button(
            "Download seating plan",
            frame_to_bytes(plan_df, excel=True),
            file_name="seating_plan.xlsx",
        )

        # Mind map visualization
        st.subheader("Seating Mind Map")
        from generate_seating_mind_map import generate_seating_mind_map
        html = generate_seating_mind_map(result)
        components.html(html, height=600, scrolling=True)

import math
from itertools import combinations
from typing import Dict, List, Tuple

import networkx as nx
from pyvis.network import Network

from wedding_table_planner.models import OptimizationResult, WorkingTable, seat_weight

# ---------------------------
# Public API
# ---------------------------

def build_seating_graph(result: OptimizationResult, canvas_size: Tuple[int, int] = (1600, 1000)) -> nx.Graph:
    """
    Build a graph of the proposed seating.

    Nodes are guests, coloured by table and placed around their table.
    Grey edges join members of the same relationship group, red edges join
    guests marked as conflicting with each other.
    """
    width, height = canvas_size
    centers = _compute_table_centers([t.id for t in result.tables], width, height)

    palette = [
        "#FFB347", "#77DD77", "#AEC6CF", "#C23B22", "#F49AC2", "#B39EB5",
        "#03C03C", "#779ECB", "#966FD6", "#FFD700", "#FF6961", "#CB99C9",
        "#CFCFC4", "#FDFD96", "#84B6F4", "#FDCAE1",
    ]

    G = nx.Graph()
    for i, table in enumerate(result.tables):
        color = palette[i % len(palette)]
        cx, cy = centers[table.id]
        layout = "rectangle" if table.is_knight else "round"
        coords = _seat_positions(cx, cy, len(table.guests), layout)
        for guest, (x, y) in zip(table.guests, coords):
            G.add_node(
                guest.id,
                label=guest.name,
                title=_node_tooltip(guest, table),
                color=color,
                table=table.id,
                x=x,
                y=y,
                physics=False,
                # Parties taking several seats get bigger dots
                size=14 + 4 * min(seat_weight(guest) - 1, 6),
                borderWidth=4 if table.is_knight else 2,
                shape="dot",
            )

    guests = [g for t in result.tables for g in t.guests]
    for a, b in combinations(guests, 2):
        if b.id in a.conflicts_with or a.id in b.conflicts_with:
            G.add_edge(a.id, b.id, color="#FF6B6B", width=3, label="conflict")
        elif a.group_id and a.group_id.strip() == (b.group_id or "").strip():
            G.add_edge(a.id, b.id, color="#A9A9A9", width=1)
    return G


def generate_seating_mind_map(result: OptimizationResult, canvas_size: Tuple[int, int] = (1600, 1000)) -> str:
    """Render :func:`build_seating_graph` as standalone pyvis HTML."""
    net = Network(height="700px", width="100%", bgcolor="#111111", font_color="#EEEEEE")
    net.toggle_physics(False)  # positions are fixed
    net.from_nx(build_seating_graph(result, canvas_size))
    html = net.generate_html()
    # Legend sits on top of the canvas
    return html.replace("</body>", _legend_html() + "</body>", 1)

# ---------------------------
# Internals
# ---------------------------

def _compute_table_centers(tables: List[str], width: int, height: int) -> Dict[str, Tuple[int, int]]:
    """
    Place table centers on a grid inside the canvas area.
    """
    if not tables:
        return {}
    n = len(tables)
    cols = max(1, int(math.ceil(math.sqrt(n))))
    rows = int(math.ceil(n / cols))
    margin = 120
    step_x = max(1, width - 2 * margin) // cols
    step_y = max(1, height - 2 * margin) // rows

    centers: Dict[str, Tuple[int, int]] = {}
    for idx, table in enumerate(tables):
        r, c = divmod(idx, cols)
        centers[table] = (margin + c * step_x + step_x // 2, margin + r * step_y + step_y // 2)
    return centers


def _seat_positions(cx: int, cy: int, n: int, layout: str) -> List[Tuple[int, int]]:
    """
    round: seats on a circle.
    rectangle: two facing rows, the shape of a long knight table.
    """
    if n == 0:
        return []
    if layout == "rectangle":
        per_row = int(math.ceil(n / 2))
        cell = 28
        left = cx - (per_row * cell) // 2
        pts = []
        for i in range(n):
            row, col = divmod(i, per_row)
            pts.append((left + col * cell + cell // 2, cy - 30 if row == 0 else cy + 30))
        return pts
    radius = 60 + 6 * n
    return [
        (int(cx + radius * math.cos(2 * math.pi * i / n)), int(cy + radius * math.sin(2 * math.pi * i / n)))
        for i in range(n)
    ]


def _node_tooltip(guest, table: WorkingTable) -> str:
    kind = "Knight" if table.is_knight else "Standard"
    return (
        f"<b>{guest.name}</b><br>"
        f"Table: {table.id} ({kind})<br>"
        f"Seats: {seat_weight(guest)}<br>"
        f"Side: {guest.side}<br>"
        f"Category: {guest.category}<br>"
        f"Group: {guest.group_id or 'n/a'}"
    )


def _legend_html() -> str:
    css = """
    <style>
    .legend-box{
      position:absolute;right:12px;bottom:12px;
      background:#222;color:#eee;border:1px solid #444;border-radius:8px;
      padding:8px 12px;font-family:system-ui, -apple-system, Segoe UI, Roboto, Arial;font-size:12px;
      z-index:10;
    }
    .legend-swatch{display:inline-block;width:12px;height:12px;margin-right:6px;vertical-align:middle;border:1px solid #444;}
    </style>
    """
    return f"""
    {css}
    <div class="legend-box">
      <div><span class="legend-swatch" style="background:#A9A9A9"></span>same group</div>
      <div><span class="legend-swatch" style="background:#FF6B6B"></span>conflict</div>
      <div style="margin-top:6px;">node color: table</div>
      <div>thick border: knight table</div>
    </div>
    """

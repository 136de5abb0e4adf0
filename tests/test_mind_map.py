import pathlib
import sys

# Ensure the repository root is on sys.path for the visualization module
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from generate_seating_mind_map import build_seating_graph, generate_seating_mind_map
from wedding_table_planner.models import Guest, KnightConfig
from wedding_table_planner.solver import optimize_seating


def sample_result():
    guests = [
        Guest(id="a1", name="Avi", group_id="Army", category="friend"),
        Guest(id="a2", name="Ben", group_id="Army", category="friend", conflicts_with=("a1",)),
        Guest(id="l1", name="Noa", group_id="Levi"),
        Guest(id="l2", name="Eli", group_id="Levi", amount=3),
        Guest(id="s1", name="Solo"),
    ]
    return optimize_seating(guests, knight_config=KnightConfig(enabled=True, count=1, capacity=4))


def test_graph_nodes_follow_tables():
    result = sample_result()
    graph = build_seating_graph(result)
    assert set(graph.nodes) == {"a1", "a2", "l1", "l2", "s1"}
    for table in result.tables:
        for guest in table.guests:
            assert graph.nodes[guest.id]["table"] == table.id
    assert graph.nodes["l2"]["size"] > graph.nodes["l1"]["size"]


def test_graph_edges():
    graph = build_seating_graph(sample_result())
    assert graph.edges["a1", "a2"]["label"] == "conflict"
    assert graph.has_edge("l1", "l2")
    assert not graph.has_edge("l1", "s1")


def test_html_has_legend():
    html = generate_seating_mind_map(sample_result())
    assert "legend-box" in html
    assert "Avi" in html

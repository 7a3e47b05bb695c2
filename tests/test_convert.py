import random

import pytest

from conftest import make_graph
from dotsphere.config import IngestSettings
from dotsphere.dot.convert import convert_graph, edge_weight, node_color, parse_number
from dotsphere.models import GraphData, RawEdge, RawNode


@pytest.mark.parametrize(
    "label,expected",
    [
        ("0.8", 0.8),
        (" 1.0 ", 1.0),
        ("0", 0.0),
        ("-2", 0.0),
        ("heavy", 0.5),
        ("nan", 0.5),
        ("inf", 0.5),
        (None, 0.5),
    ],
)
def test_edge_weight_from_label(label, expected: float) -> None:
    attrs = {"label": label} if label is not None else {}
    assert edge_weight(attrs) == pytest.approx(expected)


def test_parse_number_falls_back_on_garbage() -> None:
    assert parse_number("2.5", 1.0) == 2.5
    assert parse_number("", 1.0) == 1.0
    assert parse_number(None, 1.0) == 1.0


def test_node_color_precedence() -> None:
    assert node_color({"fillcolor": "red", "color": "blue"}) == "red"
    assert node_color({"color": "blue"}) == "blue"
    assert node_color({}) == "#666666"
    assert node_color({"fillcolor": ""}, "black") == "black"


def test_convert_defaults(rng: random.Random) -> None:
    graph = make_graph([("a", "b", None)])
    nodes, links = convert_graph(graph, rng=rng)

    assert [n.id for n in nodes] == ["a", "b"]
    assert [n.index for n in nodes] == [0, 1]
    assert nodes[0].label == "a"
    assert nodes[0].color == "#666666"
    assert nodes[0].cluster is None
    assert links[0].weight == 0.5
    assert links[0].penwidth == 1.0


def test_convert_reads_label_color_and_penwidth(rng: random.Random) -> None:
    graph = GraphData(
        nodes=[
            RawNode("a", {"label": "Alpha", "fillcolor": "#ff0000"}),
            RawNode("b", {"color": "green"}),
        ],
        edges=[RawEdge("a", "b", {"label": "0.9", "penwidth": "2.5"})],
    )
    nodes, links = convert_graph(graph, rng=rng)

    assert nodes[0].label == "Alpha"
    assert nodes[0].color == "#ff0000"
    assert nodes[1].color == "green"
    assert nodes[0].attrs["label"] == "Alpha"
    assert links[0].weight == pytest.approx(0.9)
    assert links[0].penwidth == pytest.approx(2.5)


def test_links_to_undeclared_nodes_are_kept_as_links(rng: random.Random) -> None:
    graph = GraphData(nodes=[RawNode("a")], edges=[RawEdge("a", "ghost")])
    nodes, links = convert_graph(graph, rng=rng)

    assert len(nodes) == 1
    assert (links[0].source, links[0].target) == ("a", "ghost")


def test_initial_scatter_stays_inside_the_cube() -> None:
    graph = make_graph([], extra_nodes=tuple(f"n{i}" for i in range(50)))
    nodes, _ = convert_graph(graph, rng=random.Random(3))

    for n in nodes:
        for coord in (n.x, n.y, n.z):
            assert -50.0 <= coord < 50.0


def test_ingest_settings_override_defaults(rng: random.Random) -> None:
    settings = IngestSettings(default_weight=0.2, default_penwidth=3.0, default_color="#000000", scatter=10.0)
    graph = make_graph([("a", "b", "oops")])
    nodes, links = convert_graph(graph, rng=rng, settings=settings)

    assert links[0].weight == pytest.approx(0.2)
    assert links[0].penwidth == 3.0
    assert nodes[0].color == "#000000"
    assert all(-5.0 <= n.x < 5.0 for n in nodes)


def test_same_seed_same_scatter() -> None:
    graph = make_graph([("a", "b", "1")])
    first, _ = convert_graph(graph, rng=random.Random(9))
    second, _ = convert_graph(graph, rng=random.Random(9))

    assert [n.position for n in first] == [n.position for n in second]

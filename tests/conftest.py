"""Pytest configuration and fixtures."""

import random
from pathlib import Path

import pytest

from dotsphere.models import GraphData, Link, Node, RawEdge, RawNode

TWO_TRIANGLES_DOT = """\
graph triangles {
  node [color="#336699"];
  a; b; c;
  d; e; f;
  a -- b [label="1.0"];
  b -- c [label="1.0"];
  c -- a [label="1.0"];
  d -- e [label="1.0"];
  e -- f [label="1.0"];
  f -- d [label="1.0"];
  c -- d [label="0.1"];
}
"""


def make_nodes(*ids: str) -> list[Node]:
    return [Node(id=nid, label=nid, index=i) for i, nid in enumerate(ids)]


def make_graph(edges: list[tuple[str, str, str | None]], extra_nodes: tuple[str, ...] = ()) -> GraphData:
    """GraphData from (source, target, label) triples; nodes in first-seen order."""
    seen: list[str] = []
    raw_edges = []
    for source, target, label in edges:
        for nid in (source, target):
            if nid not in seen:
                seen.append(nid)
        attrs = {"label": label} if label is not None else {}
        raw_edges.append(RawEdge(source=source, target=target, attrs=attrs))
    for nid in extra_nodes:
        if nid not in seen:
            seen.append(nid)
    return GraphData(nodes=[RawNode(id=nid) for nid in seen], edges=raw_edges)


def random_graph(seed: int, max_nodes: int = 40) -> tuple[list[Node], list[Link]]:
    """Random multigraph with self-loops, zero weights and links to unknown ids."""
    r = random.Random(seed)
    nodes = make_nodes(*[f"n{i}" for i in range(r.randint(0, max_nodes))])
    ids = [n.id for n in nodes] + ["ghost", "phantom"]
    links = [
        Link(r.choice(ids), r.choice(ids), r.choice([0.0, 1.0, round(r.random(), 3)]))
        for _ in range(r.randint(0, 3 * len(nodes) + 2))
    ]
    return nodes, links


@pytest.fixture
def rng() -> random.Random:
    """Seeded randomness so shuffles and scatter are reproducible."""
    return random.Random(42)


@pytest.fixture
def two_triangles() -> tuple[list[Node], list[Link]]:
    """Two dense triangles joined by one weak bridge."""
    nodes = make_nodes("a", "b", "c", "d", "e", "f")
    links = [
        Link("a", "b", 1.0),
        Link("b", "c", 1.0),
        Link("c", "a", 1.0),
        Link("d", "e", 1.0),
        Link("e", "f", 1.0),
        Link("f", "d", 1.0),
        Link("c", "d", 0.1),
    ]
    return nodes, links


@pytest.fixture
def two_triangles_dot(tmp_path: Path) -> Path:
    """The two-triangles graph written as a DOT file."""
    path = tmp_path / "triangles.dot"
    path.write_text(TWO_TRIANGLES_DOT, encoding="utf-8")
    return path

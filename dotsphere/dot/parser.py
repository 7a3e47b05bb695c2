"""DOT parsing into GraphData.

pydot does the tokenizing; this module flattens subgraphs, applies
``node [...]`` / ``edge [...]`` defaults and normalizes identifiers.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pydot

from ..models import GraphData, RawEdge, RawNode

logger = logging.getLogger(__name__)

# Statement keywords pydot reports as nodes.
PSEUDO_NODES = {"node", "edge", "graph"}


class DotParseError(ValueError):
    """Raised when DOT text cannot be parsed."""


def unquote(value: object) -> str:
    """Strip DOT double quotes and unescape embedded quotes."""
    s = str(value).strip()
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        s = s[1:-1].replace('\\"', '"')
    return s


def node_id(raw: object) -> str:
    """Normalize a node reference (quoted, or with a port) to a plain id."""
    s = str(raw).strip()
    if s.startswith('"'):
        end = s.find('"', 1)
        while end > 0 and s[end - 1] == "\\":
            end = s.find('"', end + 1)
        if end > 0:
            return s[1:end].replace('\\"', '"')
        return unquote(s)
    return s.split(":", 1)[0]


def attr_value(value: object) -> str:
    """Attribute value as plain text.

    Quoted strings are unquoted. HTML-like values (`<<b>x</b>>`) lose their
    outer angle brackets and keep the markup inside.
    """
    s = str(value).strip()
    if len(s) >= 2 and s[0] == "<" and s[-1] == ">":
        return s[1:-1]
    return unquote(s)


def _attrs(obj) -> dict[str, str]:
    return {str(k): attr_value(v) for k, v in (obj.get_attributes() or {}).items()}


class _Collector:
    """Accumulates nodes/edges across nested subgraphs in encounter order."""

    def __init__(self) -> None:
        self.nodes: dict[str, RawNode] = {}
        self.edges: list[RawEdge] = []
        self._implicit: list[str] = []

    def add_node(self, nid: str, attrs: dict[str, str]) -> None:
        existing = self.nodes.get(nid)
        if existing is None:
            self.nodes[nid] = RawNode(id=nid, attrs=dict(attrs))
        else:
            existing.attrs.update(attrs)

    def reference(self, nid: str) -> None:
        if nid not in self.nodes and nid not in self._implicit:
            self._implicit.append(nid)

    def walk(self, graph, node_defaults: dict[str, str], edge_defaults: dict[str, str]) -> None:
        node_defaults = dict(node_defaults)
        edge_defaults = dict(edge_defaults)

        declared = []
        for n in graph.get_nodes():
            name = node_id(n.get_name())
            if name == "node":
                node_defaults.update(_attrs(n))
            elif name == "edge":
                edge_defaults.update(_attrs(n))
            elif name and name not in PSEUDO_NODES:
                declared.append((name, _attrs(n)))

        for name, attrs in declared:
            self.add_node(name, {**node_defaults, **attrs})

        for e in graph.get_edges():
            src, dst = e.get_source(), e.get_destination()
            if not isinstance(src, str) or not isinstance(dst, str):
                # Edges to anonymous subgraphs ({a b}) are not expanded.
                logger.debug(f"Skipping edge with subgraph endpoint: {src!r} -> {dst!r}")
                continue
            source, target = node_id(src), node_id(dst)
            self.reference(source)
            self.reference(target)
            self.edges.append(RawEdge(source=source, target=target, attrs={**edge_defaults, **_attrs(e)}))

        for sub in graph.get_subgraphs():
            self.walk(sub, node_defaults, edge_defaults)

    def graph_data(self, *, directed: bool, name: str) -> GraphData:
        nodes = list(self.nodes.values())
        nodes.extend(RawNode(id=nid) for nid in self._implicit if nid not in self.nodes)
        return GraphData(nodes=nodes, edges=self.edges, directed=directed, name=name)


def parse_dot(text: str) -> GraphData:
    """Parse DOT text into GraphData.

    Raises:
        DotParseError: If the text is not valid DOT.
    """
    try:
        graphs = pydot.graph_from_dot_data(text)
    except Exception as e:
        raise DotParseError(f"DOT syntax error: {e}") from e

    if not graphs:
        raise DotParseError("DOT syntax error: no graph found")
    if len(graphs) > 1:
        logger.warning(f"DOT input holds {len(graphs)} graphs; using the first")

    graph = graphs[0]
    collector = _Collector()
    collector.walk(graph, {}, {})

    data = collector.graph_data(
        directed=graph.get_type() == "digraph",
        name=unquote(graph.get_name() or ""),
    )
    logger.debug(f"Parsed DOT graph {data.name!r}: {len(data.nodes)} nodes, {len(data.edges)} edges")
    return data


def read_dot(path: Path) -> GraphData:
    """Read and parse a DOT file."""
    return parse_dot(path.read_text(encoding="utf-8"))

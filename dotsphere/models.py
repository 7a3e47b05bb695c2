"""Data models for parsed graphs, nodes, links and clusters."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Point3:
    """A position in 3D space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: "Point3") -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass
class RawNode:
    """A node as declared in DOT, before normalization."""

    id: str
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass
class RawEdge:
    """An edge as declared in DOT, before normalization."""

    source: str
    target: str
    attrs: dict[str, str] = field(default_factory=dict)


@dataclass
class GraphData:
    """Output of the ingestion adapter: a multigraph with attribute maps."""

    nodes: list[RawNode] = field(default_factory=list)
    edges: list[RawEdge] = field(default_factory=list)
    directed: bool = False
    name: str = ""

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def edge_pairs(self) -> set[tuple[str, str]]:
        return {(e.source, e.target) for e in self.edges}

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "directed": self.directed,
            "nodes": [{"id": n.id, "attrs": dict(n.attrs)} for n in self.nodes],
            "edges": [{"source": e.source, "target": e.target, "attrs": dict(e.attrs)} for e in self.edges],
        }


@dataclass(eq=False)
class Node:
    """A graph node as seen by the clustering and layout engines.

    Compared by identity: the same node object is shared between the node list,
    its cluster's member list and the renderer.
    """

    id: str
    label: str = ""
    color: str = "#666666"
    attrs: dict[str, str] = field(default_factory=dict)
    index: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    cluster: int | None = None
    cluster_center: Point3 | None = None  # shared with the owning Cluster
    cluster_radius: float = 0.0

    @property
    def position(self) -> Point3:
        return Point3(self.x, self.y, self.z)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "color": self.color,
            "cluster": self.cluster,
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "clusterCenter": self.cluster_center.to_dict() if self.cluster_center else None,
            "clusterRadius": self.cluster_radius,
            "attrs": dict(self.attrs),
        }


@dataclass
class Link:
    """A weighted link between two node ids."""

    source: str
    target: str
    weight: float = 0.5
    penwidth: float = 1.0  # cosmetic only


@dataclass(eq=False)
class Cluster:
    """A community of nodes found by the clustering engine."""

    id: int
    nodes: list[Node] = field(default_factory=list)
    center: Point3 | None = None
    radius: float = 0.0

    @property
    def size(self) -> int:
        return len(self.nodes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "size": self.size,
            "nodes": [n.id for n in self.nodes],
            "center": self.center.to_dict() if self.center else None,
            "radius": self.radius,
        }


@dataclass
class GraphDelta:
    """Nodes and edges added/removed between two graph snapshots."""

    added_nodes: list[str] = field(default_factory=list)
    removed_nodes: list[str] = field(default_factory=list)
    added_edges: list[tuple[str, str]] = field(default_factory=list)
    removed_edges: list[tuple[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added_nodes or self.removed_nodes or self.added_edges or self.removed_edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "added_nodes": list(self.added_nodes),
            "removed_nodes": list(self.removed_nodes),
            "added_edges": [list(e) for e in self.added_edges],
            "removed_edges": [list(e) for e in self.removed_edges],
        }


@dataclass
class Scene:
    """Everything built from one ingestion event."""

    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    clusters: list[Cluster] = field(default_factory=list)

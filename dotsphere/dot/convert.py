"""Normalize parsed DOT data into core Node/Link records."""

from __future__ import annotations

import math
import random

from ..config import IngestSettings
from ..models import GraphData, Link, Node


def parse_number(value: str | None, default: float) -> float:
    """Parse a DOT attribute as a finite float, falling back to `default`."""
    if value is None:
        return default
    try:
        number = float(str(value).strip())
    except ValueError:
        return default
    if not math.isfinite(number):
        return default
    return number


def edge_weight(attrs: dict[str, str], default: float = 0.5) -> float:
    """Edge weight from the DOT `label` attribute, clamped to [0, inf)."""
    return max(0.0, parse_number(attrs.get("label"), default))


def node_color(attrs: dict[str, str], default: str = "#666666") -> str:
    return attrs.get("fillcolor") or attrs.get("color") or default


def convert_graph(
    graph: GraphData,
    *,
    rng: random.Random | None = None,
    settings: IngestSettings | None = None,
) -> tuple[list[Node], list[Link]]:
    """Build core nodes (randomly scattered) and weighted links from GraphData."""
    rng = rng or random.Random()
    settings = settings or IngestSettings()
    half = settings.scatter / 2

    nodes: list[Node] = []
    for i, raw in enumerate(graph.nodes):
        nodes.append(
            Node(
                id=raw.id,
                label=raw.attrs.get("label") or raw.id,
                color=node_color(raw.attrs, settings.default_color),
                attrs=dict(raw.attrs),
                index=i,
                x=rng.random() * settings.scatter - half,
                y=rng.random() * settings.scatter - half,
                z=rng.random() * settings.scatter - half,
            )
        )

    links = [
        Link(
            source=e.source,
            target=e.target,
            weight=edge_weight(e.attrs, settings.default_weight),
            penwidth=parse_number(e.attrs.get("penwidth"), settings.default_penwidth),
        )
        for e in graph.edges
    ]
    return nodes, links

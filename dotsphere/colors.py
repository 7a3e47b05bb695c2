"""Node colour schemes."""

from __future__ import annotations

import random
from collections import defaultdict
from enum import Enum

from .dot.convert import node_color
from .models import Link, Node

GOLDEN_RATIO_CONJUGATE = 0.618033988749895


class ColorMode(str, Enum):
    SOURCE = "source"  # fillcolor/color from the DOT file
    CLUSTER = "cluster"
    WEIGHT = "weight"
    DEGREE = "degree"


def cluster_color(cluster_id: int, rng: random.Random | None = None) -> str:
    """Golden-ratio hue per cluster with some random saturation/lightness spread."""
    rng = rng or random.Random()
    hue = (cluster_id * GOLDEN_RATIO_CONJUGATE * 360) % 360
    saturation = 65 + rng.random() * 25
    lightness = 50 + rng.random() * 20
    return f"hsl({hue:.1f}, {saturation:.1f}%, {lightness:.1f}%)"


def weight_color(weight: float) -> str:
    intensity = max(0.0, min(1.0, weight))
    return f"hsl({240 - intensity * 120:.1f}, 80%, {50 + intensity * 30:.1f}%)"


def degree_color(degree: int, max_degree: int) -> str:
    intensity = degree / max(max_degree, 1)
    return f"hsl(120, 80%, {30 + intensity * 50:.1f}%)"


def apply_color_mode(
    nodes: list[Node],
    links: list[Link],
    mode: ColorMode | str,
    *,
    rng: random.Random | None = None,
    default_color: str = "#666666",
) -> None:
    """Set `node.color` for every node according to `mode`."""
    mode = ColorMode(mode)
    rng = rng or random.Random()

    if mode is ColorMode.SOURCE:
        for node in nodes:
            node.color = node_color(node.attrs, default_color)
        return

    if mode is ColorMode.CLUSTER:
        for node in nodes:
            node.color = cluster_color(node.cluster or 0, rng)
        return

    incident: dict[str, list[float]] = defaultdict(list)
    for link in links:
        incident[link.source].append(link.weight)
        if link.target != link.source:
            incident[link.target].append(link.weight)

    if mode is ColorMode.WEIGHT:
        for node in nodes:
            weights = incident.get(node.id, [])
            avg = sum(weights) / max(len(weights), 1)
            node.color = weight_color(avg)
        return

    max_degree = max((len(incident.get(n.id, [])) for n in nodes), default=0)
    for node in nodes:
        node.color = degree_color(len(incident.get(node.id, [])), max_degree)

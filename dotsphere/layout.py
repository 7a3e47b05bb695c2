"""Seed positions: cluster centers on a Fibonacci sphere, members around each center."""

from __future__ import annotations

import logging
import math
import random

from .config import LayoutSettings
from .models import Cluster, Node, Point3

logger = logging.getLogger(__name__)

GOLDEN_RATIO = (1 + math.sqrt(5)) / 2
ANGLE_INCREMENT = math.pi * 2 * GOLDEN_RATIO


def fibonacci_direction(index: int, count: int) -> tuple[float, float, float]:
    """Unit vector for point `index` of `count` on a Fibonacci sphere (y is the polar axis)."""
    t = index / count if count else 0.0
    inclination = math.acos(1 - 2 * t)
    azimuth = ANGLE_INCREMENT * index
    return (
        math.sin(inclination) * math.cos(azimuth),
        math.cos(inclination),
        math.sin(inclination) * math.sin(azimuth),
    )


def fibonacci_point(index: int, count: int, radius: float, origin: Point3 | None = None) -> Point3:
    dx, dy, dz = fibonacci_direction(index, count)
    ox, oy, oz = (origin.x, origin.y, origin.z) if origin else (0.0, 0.0, 0.0)
    return Point3(ox + dx * radius, oy + dy * radius, oz + dz * radius)


def cluster_radius(size: int, settings: LayoutSettings | None = None) -> float:
    """Display radius of a cluster: sqrt(size) * scale, clamped to the configured range."""
    settings = settings or LayoutSettings()
    raw = math.sqrt(size) * settings.radius_scale
    return max(settings.min_cluster_radius, min(settings.max_cluster_radius, raw))


def assign_cluster_positions(
    nodes: list[Node],
    clusters: list[Cluster],
    *,
    rng: random.Random | None = None,
    settings: LayoutSettings | None = None,
) -> None:
    """Place every clustered node near its cluster center; annotate clusters in place.

    Angular placement is deterministic per index; the radial distance of each
    node is drawn uniformly from [0, cluster radius).
    """
    rng = rng or random.Random()
    settings = settings or LayoutSettings()

    count = len(clusters)
    for index, cluster in enumerate(clusters):
        center = fibonacci_point(index, count, settings.sphere_radius)
        radius = cluster_radius(cluster.size, settings)
        cluster.center = center
        cluster.radius = radius

        members = len(cluster.nodes)
        for node_index, node in enumerate(cluster.nodes):
            dx, dy, dz = fibonacci_direction(node_index, members)
            distance = rng.random() * radius
            node.x = center.x + dx * distance
            node.y = center.y + dy * distance
            node.z = center.z + dz * distance
            node.cluster_center = center
            node.cluster_radius = radius

    placed = sum(c.size for c in clusters)
    if placed != len(nodes):
        logger.warning(f"Layout placed {placed} of {len(nodes)} nodes; the rest keep their positions")

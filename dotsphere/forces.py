"""Force parameters the renderer's simulation runs with.

Link distance/strength/width are pure functions of the link weight. The
cluster force keeps clusters apart and pulls stray members back toward their
seeded center; the renderer calls it once per simulation tick.
"""

from __future__ import annotations

import math
from dataclasses import asdict

from .config import ForceSettings
from .models import Node

DEFAULT_DISTANCE_WEIGHT = 0.5
DEFAULT_STRENGTH_WEIGHT = 0.3
DEFAULT_WIDTH_WEIGHT = 0.5


def link_distance(weight: float | None) -> float:
    """Rest length: 80 * (1.5 - weight). Heavier links sit closer."""
    w = DEFAULT_DISTANCE_WEIGHT if weight is None else weight
    return 80 * (1.5 - w)


def link_strength(weight: float | None) -> float:
    w = DEFAULT_STRENGTH_WEIGHT if weight is None else weight
    return w * 0.9


def link_width(weight: float | None) -> float:
    w = DEFAULT_WIDTH_WEIGHT if weight is None else weight
    return w * 3


def force_config(settings: ForceSettings | None = None) -> dict[str, float]:
    """Simulation constants as a plain dict for the renderer."""
    return asdict(settings or ForceSettings())


def cluster_centroids(nodes: list[Node]) -> dict[int, tuple[float, float, float]]:
    sums: dict[int, list[float]] = {}
    for node in nodes:
        if node.cluster is None:
            continue
        acc = sums.setdefault(node.cluster, [0.0, 0.0, 0.0, 0.0])
        acc[0] += node.x
        acc[1] += node.y
        acc[2] += node.z
        acc[3] += 1
    return {cid: (sx / n, sy / n, sz / n) for cid, (sx, sy, sz, n) in sums.items()}


def apply_cluster_force(nodes: list[Node], alpha: float, settings: ForceSettings | None = None) -> None:
    """One tick of inter-cluster repulsion plus intra-cluster cohesion (mutates nodes)."""
    settings = settings or ForceSettings()
    centroids = cluster_centroids(nodes)
    min_distance = settings.cluster_min_distance

    by_cluster: dict[int, list[Node]] = {}
    for node in nodes:
        if node.cluster is not None:
            by_cluster.setdefault(node.cluster, []).append(node)

    ids = list(centroids)
    for i, a in enumerate(ids):
        for b in ids[i + 1 :]:
            ax, ay, az = centroids[a]
            bx, by, bz = centroids[b]
            dx, dy, dz = bx - ax, by - ay, bz - az
            distance = math.sqrt(dx * dx + dy * dy + dz * dz)
            if distance == 0 or distance >= min_distance:
                continue

            force = (min_distance - distance) / min_distance * settings.cluster_repulsion * alpha
            fx, fy, fz = dx / distance * force, dy / distance * force, dz / distance * force
            for node in by_cluster[a]:
                node.x -= fx
                node.y -= fy
                node.z -= fz
            for node in by_cluster[b]:
                node.x += fx
                node.y += fy
                node.z += fz

    pull = settings.cohesion * alpha
    for node in nodes:
        center = node.cluster_center
        if center is None:
            continue
        dx, dy, dz = center.x - node.x, center.y - node.y, center.z - node.z
        dist = math.sqrt(dx * dx + dy * dy + dz * dz)
        if dist > (node.cluster_radius or settings.cohesion_radius):
            node.x += dx * pull
            node.y += dy * pull
            node.z += dz * pull

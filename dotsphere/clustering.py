"""Louvain-style community detection on a weighted, undirected view of the graph.

Three phases:

1. Local search: every node starts alone; nodes repeatedly join the
   neighbouring community they are most strongly tied to, with a hysteresis
   margin so ties do not flip back and forth.
2. Merge: communities below the minimum size fold into the qualifying
   community they share the most weight with.
3. Renumber: surviving communities get dense ids 0..K-1.

All working state lives in a `ClusterContext` built per call.
"""

from __future__ import annotations

import logging
import random
from collections import Counter, defaultdict
from dataclasses import dataclass, field

from .config import ClusteringSettings
from .models import Cluster, Link, Node

logger = logging.getLogger(__name__)


@dataclass
class ClusterContext:
    """Mutable state for one clustering run."""

    adjacency: dict[str, list[tuple[str, float]]] = field(default_factory=dict)
    degree: dict[str, float] = field(default_factory=dict)
    communities: dict[str, int] = field(default_factory=dict)  # node id -> community

    @classmethod
    def build(cls, nodes: list[Node], links: list[Link]) -> "ClusterContext":
        ctx = cls()
        for node in nodes:
            ctx.adjacency[node.id] = []
            ctx.degree[node.id] = 0.0

        dropped = 0
        for link in links:
            src, dst = link.source, link.target
            if src not in ctx.adjacency or dst not in ctx.adjacency:
                dropped += 1
                continue
            # Self-loops and parallel edges accumulate.
            ctx.adjacency[src].append((dst, link.weight))
            ctx.adjacency[dst].append((src, link.weight))
            ctx.degree[src] += link.weight
            ctx.degree[dst] += link.weight

        if dropped:
            logger.debug(f"Dropped {dropped} links with unknown endpoints")

        for i, node in enumerate(nodes):
            ctx.communities[node.id] = i
        return ctx

    def community_weights(self, node_id: str) -> dict[int, float]:
        """Total incident weight from `node_id` toward each neighbouring community."""
        weights: dict[int, float] = {}
        for neighbor, weight in self.adjacency.get(node_id, []):
            comm = self.communities.get(neighbor)
            if comm is not None:
                weights[comm] = weights.get(comm, 0.0) + weight
        return weights

    def community_count(self) -> int:
        return len(set(self.communities.values()))


def _local_search(
    nodes: list[Node],
    ctx: ClusterContext,
    *,
    rng: random.Random,
    settings: ClusteringSettings,
) -> int:
    """Move nodes between communities until a pass makes no move. Returns passes run."""
    passes = 0
    while passes < settings.max_passes:
        passes += 1
        moved = 0

        order = list(nodes)
        rng.shuffle(order)

        for node in order:
            current = ctx.communities[node.id]
            weights = ctx.community_weights(node.id)
            if not weights:
                continue

            current_weight = weights.get(current, 0.0)
            best, best_weight = current, current_weight
            for comm, weight in weights.items():
                if weight > best_weight:
                    best, best_weight = comm, weight

            if best != current and best_weight > current_weight * settings.move_margin:
                ctx.communities[node.id] = best
                moved += 1

        logger.debug(f"Pass {passes}: {moved} moves, {ctx.community_count()} communities")
        if moved == 0:
            break

    return passes


def _group_by_community(nodes: list[Node], ctx: ClusterContext) -> dict[int, list[Node]]:
    groups: dict[int, list[Node]] = {}
    for node in nodes:
        groups.setdefault(ctx.communities[node.id], []).append(node)
    return groups


def _connection_weight(members: list[Node], target: int, ctx: ClusterContext) -> float:
    total = 0.0
    for node in members:
        for neighbor, weight in ctx.adjacency.get(node.id, []):
            if ctx.communities.get(neighbor) == target:
                total += weight
    return total


def _merge_small_communities(
    groups: dict[int, list[Node]],
    ctx: ClusterContext,
    *,
    min_size: int,
) -> int:
    """Fold undersized communities into their best-connected qualifying neighbour.

    Mutates `groups` and `ctx.communities`. Returns the number of merges.
    """
    small = [(cid, members) for cid, members in groups.items() if len(members) < min_size]
    merges = 0

    for cid, members in small:
        best_target: int | None = None
        best_weight = 0.0

        for target, target_members in groups.items():
            if target == cid or len(target_members) < min_size:
                continue
            weight = _connection_weight(members, target, ctx)
            if weight > best_weight:
                best_target, best_weight = target, weight

        if best_target is None:
            # No tie to any qualifying community: stays undersized.
            continue

        for node in members:
            ctx.communities[node.id] = best_target
        groups[best_target].extend(members)
        del groups[cid]
        merges += 1

    return merges


def cluster_nodes(
    nodes: list[Node],
    links: list[Link],
    *,
    rng: random.Random | None = None,
    settings: ClusteringSettings | None = None,
) -> list[Cluster]:
    """Partition nodes into clusters, largest first.

    Sets `node.cluster` on every node. Links whose endpoints are not in `nodes`
    are ignored.
    """
    rng = rng or random.Random()
    settings = settings or ClusteringSettings()

    if not nodes:
        return []

    ctx = ClusterContext.build(nodes, links)
    passes = _local_search(nodes, ctx, rng=rng, settings=settings)

    groups = _group_by_community(nodes, ctx)
    merges = _merge_small_communities(groups, ctx, min_size=settings.min_cluster_size)

    renumber = {old: new for new, old in enumerate(groups)}
    for node in nodes:
        node.cluster = renumber[ctx.communities[node.id]]

    final: dict[int, list[Node]] = {}
    for node in nodes:
        final.setdefault(node.cluster, []).append(node)

    clusters = [Cluster(id=cid, nodes=members) for cid, members in final.items()]
    clusters.sort(key=lambda c: -c.size)

    logger.info(
        f"Created {len(clusters)} clusters from {len(nodes)} nodes "
        f"({passes} passes, {merges} merges); sizes: {', '.join(str(c.size) for c in clusters)}"
    )
    return clusters


def modularity(clusters: list[Cluster], links: list[Link]) -> float:
    """Weighted modularity of a partition on the undirected view of `links`.

    Q = sum_c (L_c / m) - (D_c / 2m)^2, with L_c the weight inside cluster c,
    D_c the weighted degree of c and m the total link weight.
    """
    cluster_of = {n.id: c.id for c in clusters for n in c.nodes}

    m = 0.0
    internal: Counter[int] = Counter()
    degree: Counter[int] = Counter()
    for link in links:
        ca = cluster_of.get(link.source)
        cb = cluster_of.get(link.target)
        if ca is None or cb is None:
            continue
        m += link.weight
        degree[ca] += link.weight
        degree[cb] += link.weight
        if ca == cb:
            internal[ca] += link.weight

    if m <= 0:
        return 0.0

    q = 0.0
    for cid in degree:
        q += (internal.get(cid, 0.0) / m) - ((degree[cid] / (2 * m)) ** 2)
    return q


def intra_cluster_weight_fraction(clusters: list[Cluster], links: list[Link]) -> float:
    """Fraction of link weight whose endpoints share a cluster."""
    cluster_of = {n.id: c.id for c in clusters for n in c.nodes}
    same = 0.0
    total = 0.0
    for link in links:
        ca = cluster_of.get(link.source)
        cb = cluster_of.get(link.target)
        if ca is None or cb is None:
            continue
        total += link.weight
        if ca == cb:
            same += link.weight
    return same / total if total else 0.0


def cluster_adjacency(clusters: list[Cluster], links: list[Link]) -> dict[tuple[int, int], float]:
    """Total link weight between each pair of distinct clusters, keyed (min_id, max_id)."""
    cluster_of = {n.id: c.id for c in clusters for n in c.nodes}
    between: dict[tuple[int, int], float] = defaultdict(float)
    for link in links:
        ca = cluster_of.get(link.source)
        cb = cluster_of.get(link.target)
        if ca is None or cb is None or ca == cb:
            continue
        key = (ca, cb) if ca < cb else (cb, ca)
        between[key] += link.weight
    return dict(between)

"""Build a renderable scene from parsed DOT data."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any

from .clustering import cluster_nodes
from .colors import apply_color_mode
from .config import Settings
from .dot.convert import convert_graph
from .forces import force_config, link_distance, link_strength, link_width
from .layout import assign_cluster_positions
from .models import GraphData, Scene

logger = logging.getLogger(__name__)


def build_scene(
    graph: GraphData,
    *,
    settings: Settings | None = None,
    rng: random.Random | None = None,
    color_mode: str | None = None,
) -> Scene:
    """Convert, cluster, lay out and colour one graph snapshot.

    The returned scene is complete; nothing mutates it afterwards.
    """
    settings = settings or Settings()
    rng = rng or random.Random()

    nodes, links = convert_graph(graph, rng=rng, settings=settings.ingest)
    clusters = cluster_nodes(nodes, links, rng=rng, settings=settings.clustering)
    assign_cluster_positions(nodes, clusters, rng=rng, settings=settings.layout)
    apply_color_mode(
        nodes,
        links,
        color_mode or settings.render.color_mode,
        rng=rng,
        default_color=settings.ingest.default_color,
    )

    logger.info(f"Built scene: {len(nodes)} nodes, {len(links)} links, {len(clusters)} clusters")
    return Scene(nodes=nodes, links=links, clusters=clusters)


def scene_payload(scene: Scene, settings: Settings | None = None) -> dict[str, Any]:
    """JSON-ready payload for the force-directed renderer."""
    settings = settings or Settings()
    return {
        "nodes": [n.to_dict() for n in scene.nodes],
        "links": [
            {
                "source": link.source,
                "target": link.target,
                "weight": link.weight,
                "penwidth": link.penwidth,
                "distance": link_distance(link.weight),
                "strength": link_strength(link.weight),
                "width": link_width(link.weight),
            }
            for link in scene.links
        ],
        "clusters": [c.to_dict() for c in scene.clusters],
        "forces": force_config(settings.forces),
    }


def write_scene(scene: Scene, out: Path, settings: Settings | None = None) -> None:
    """Write the payload atomically so a reader never sees a half-written file."""
    text = json.dumps(scene_payload(scene, settings), indent=2) + "\n"
    tmp = out.with_name(out.name + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(out)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise

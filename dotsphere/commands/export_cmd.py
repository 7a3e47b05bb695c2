"""Export command - write the renderer's scene payload for a DOT graph."""

from __future__ import annotations

import json
import random
from pathlib import Path

from rich.console import Console

from ..config import Settings
from ..dot.parser import read_dot
from ..pipeline import build_scene, scene_payload, write_scene


def run_export(
    dot_path: Path,
    *,
    settings: Settings | None = None,
    out: Path | None = None,
    seed: int | None = None,
    color_mode: str | None = None,
) -> int:
    """Cluster, lay out and colour the graph, then write the scene as JSON."""
    console = Console(stderr=True)
    settings = settings or Settings()

    graph = read_dot(dot_path)
    scene = build_scene(graph, settings=settings, rng=random.Random(seed), color_mode=color_mode)

    if out:
        write_scene(scene, out, settings)
        console.print(
            f"Wrote scene ({len(scene.nodes)} nodes, {len(scene.clusters)} clusters) to {out}",
            style="green",
        )
    else:
        print(json.dumps(scene_payload(scene, settings), indent=2))

    return 0

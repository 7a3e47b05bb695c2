"""Watch command - rebuild the scene payload whenever the DOT file changes."""

from __future__ import annotations

import random
from datetime import datetime
from pathlib import Path

from rich.console import Console

from ..config import Settings
from ..models import GraphDelta, Scene
from ..pipeline import write_scene
from ..watcher import run_watch_loop


def run_watch(
    dot_path: Path,
    *,
    out: Path,
    settings: Settings | None = None,
    seed: int | None = None,
) -> int:
    """
    Watch `dot_path` and rewrite `out` on every content change.

    This is a blocking command that runs until interrupted (Ctrl+C).
    An `out` that cannot be written on the initial build raises OSError.
    """
    console = Console(stderr=True)
    settings = settings or Settings()

    console.print(f"[bold]Watching[/bold] {dot_path}")
    console.print(f"  Output: {out}")
    console.print(f"  Seed: {seed if seed is not None else 'random'}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    rebuilds = 0

    def on_rebuild(scene: Scene, delta: GraphDelta | None) -> None:
        nonlocal rebuilds
        write_scene(scene, out, settings)
        rebuilds += 1
        timestamp = datetime.now().strftime("%H:%M:%S")
        change = ""
        if delta is not None:
            change = (
                f" [dim](+{len(delta.added_nodes)}/-{len(delta.removed_nodes)} nodes, "
                f"+{len(delta.added_edges)}/-{len(delta.removed_edges)} edges)[/dim]"
            )
        console.print(
            f"[dim]{timestamp}[/dim] {len(scene.nodes)} nodes, {len(scene.clusters)} clusters{change}"
        )

    run_watch_loop(dot_path, settings=settings, rng=random.Random(seed), on_rebuild=on_rebuild)

    console.print()
    console.print(f"[bold]Stopped.[/bold] Rebuilt {rebuilds} times.")
    return 0

"""
File system watcher that rebuilds the scene when a DOT file changes.

This module provides:
- Watchdog-based monitoring of a single DOT file
- Debounced rebuilds (editors save in several writes)
- Content-hash checks so touch-only events do not trigger a rebuild
- Last-write-wins: each rebuild discards the previous scene entirely
"""

from __future__ import annotations

import hashlib
import logging
import random
import time
from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .config import Settings
from .dot.delta import compute_delta
from .dot.parser import DotParseError, parse_dot
from .models import GraphData, GraphDelta, Scene
from .pipeline import build_scene

logger = logging.getLogger(__name__)

RebuildCallback = Callable[[Scene, GraphDelta | None], None]


def compute_file_hash(path: Path) -> str | None:
    """Compute SHA-256 hash of file contents."""
    try:
        return hashlib.sha256(path.read_bytes()).hexdigest()[:16]
    except OSError:
        return None


class DotFileHandler(FileSystemEventHandler):
    """
    Rebuilds a scene from one DOT file whenever its content changes.

    Key behaviors:
    - Ignores events for any other file in the watched directory
    - Debounces rapid modifications; `flush_pending` does the work
    - Skips rebuilds when the content hash is unchanged
    - Logs parse errors and keeps the last good scene
    """

    DEBOUNCE_SECONDS = 1.0

    def __init__(
        self,
        dot_path: Path,
        *,
        settings: Settings | None = None,
        rng: random.Random | None = None,
        on_rebuild: RebuildCallback | None = None,
    ):
        super().__init__()
        self.dot_path = dot_path.resolve()
        self.settings = settings or Settings()
        self.rng = rng or random.Random()
        self.on_rebuild = on_rebuild

        self.pending_since: float | None = None
        self.last_hash: str | None = None
        self.last_graph: GraphData | None = None
        self.scene: Scene | None = None
        self.rebuild_count = 0

    def _is_target(self, path: str | bytes) -> bool:
        if isinstance(path, bytes):
            path = path.decode()
        try:
            return Path(path).resolve() == self.dot_path
        except OSError:
            return False

    def _mark_pending(self) -> None:
        self.pending_since = time.time()

    def rebuild(self) -> bool:
        """Re-read the DOT file and rebuild if its content changed. Returns True on rebuild."""
        new_hash = compute_file_hash(self.dot_path)
        if new_hash is None:
            logger.warning(f"Cannot read {self.dot_path}; keeping previous scene")
            return False
        if new_hash == self.last_hash:
            logger.debug(f"{self.dot_path.name} unchanged (hash {new_hash})")
            return False

        try:
            text = self.dot_path.read_text(encoding="utf-8")
            graph = parse_dot(text)
        except (OSError, UnicodeDecodeError, DotParseError) as e:
            logger.error(f"Failed to read or parse {self.dot_path}: {e}")
            # Remember the hash so the same broken content is not re-parsed.
            self.last_hash = new_hash
            return False

        delta = compute_delta(self.last_graph, graph) if self.last_graph is not None else None
        if delta is not None:
            logger.info(
                f"{self.dot_path.name} changed: +{len(delta.added_nodes)}/-{len(delta.removed_nodes)} nodes, "
                f"+{len(delta.added_edges)}/-{len(delta.removed_edges)} edges"
            )

        scene = build_scene(graph, settings=self.settings, rng=self.rng)
        self.last_hash = new_hash
        self.last_graph = graph
        self.scene = scene
        self.rebuild_count += 1

        if self.on_rebuild:
            self.on_rebuild(scene, delta)
        return True

    def flush_pending(self) -> bool:
        """Rebuild if a pending change has passed the debounce window."""
        if self.pending_since is None:
            return False
        if time.time() - self.pending_since < self.DEBOUNCE_SECONDS:
            return False
        self.pending_since = None
        return self.rebuild()

    def on_created(self, event: FileCreatedEvent) -> None:
        if not event.is_directory and self._is_target(event.src_path):
            self._mark_pending()

    def on_modified(self, event: FileModifiedEvent) -> None:
        if not event.is_directory and self._is_target(event.src_path):
            self._mark_pending()

    def on_moved(self, event: FileMovedEvent) -> None:
        # Editors that save via rename land here with the target as dest_path.
        if not event.is_directory and self._is_target(event.dest_path):
            self._mark_pending()


def watch_dot_file(
    dot_path: Path,
    *,
    settings: Settings | None = None,
    rng: random.Random | None = None,
    on_rebuild: RebuildCallback | None = None,
) -> tuple[Observer, DotFileHandler]:
    """
    Build the initial scene and start watching `dot_path`.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = DotFileHandler(dot_path, settings=settings, rng=rng, on_rebuild=on_rebuild)
    handler.rebuild()

    observer = Observer()
    observer.schedule(handler, str(handler.dot_path.parent), recursive=False)
    observer.start()

    return observer, handler


def run_watch_loop(
    dot_path: Path,
    *,
    settings: Settings | None = None,
    rng: random.Random | None = None,
    on_rebuild: RebuildCallback | None = None,
    poll_interval: float = 0.5,
) -> None:
    """
    Run the watch loop until interrupted.

    Rebuilds happen on this thread, one at a time. A rebuild whose output
    cannot be written is logged and the loop keeps watching; errors from the
    initial build propagate.
    """
    observer, handler = watch_dot_file(dot_path, settings=settings, rng=rng, on_rebuild=on_rebuild)

    try:
        while True:
            time.sleep(poll_interval)
            try:
                handler.flush_pending()
            except OSError as e:
                logger.error(f"Rebuild of {handler.dot_path.name} failed: {e}")
    except KeyboardInterrupt:
        logger.debug("Watch loop interrupted")
    finally:
        observer.stop()
        observer.join()

"""Parse and delta commands - inspect DOT input as the ingestion adapter sees it."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console

from ..dot.delta import compute_delta, delta_to_markdown
from ..dot.parser import read_dot


def _emit(text: str, out: Path | None, console: Console, what: str) -> None:
    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote {what} to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")


def run_parse(dot_path: Path, *, out: Path | None = None) -> int:
    """Print the parsed graph (nodes, edges, attributes) as JSON."""
    console = Console(stderr=True)

    graph = read_dot(dot_path)
    text = json.dumps(graph.to_dict(), indent=2) + "\n"
    _emit(text, out, console, "parsed graph")
    return 0


def run_delta(old_path: Path, new_path: Path, *, fmt: str = "json", out: Path | None = None) -> int:
    """Report nodes/edges added and removed between two DOT files."""
    console = Console(stderr=True)

    if fmt not in ("json", "md"):
        raise ValueError("fmt must be one of: json, md")

    delta = compute_delta(read_dot(old_path), read_dot(new_path))

    if fmt == "json":
        text = json.dumps(delta.to_dict(), indent=2, sort_keys=True) + "\n"
    else:
        text = delta_to_markdown(delta, old_label=old_path.name, new_label=new_path.name)

    _emit(text, out, console, "graph delta")
    return 0

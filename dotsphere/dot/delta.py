"""Structural difference between two parsed DOT snapshots."""

from __future__ import annotations

from ..models import GraphData, GraphDelta


def compute_delta(old: GraphData, new: GraphData) -> GraphDelta:
    """Nodes and (source, target) edges added and removed going from `old` to `new`.

    Edge multiplicity and attributes are ignored.
    """
    old_nodes, new_nodes = old.node_ids(), new.node_ids()
    old_edges, new_edges = old.edge_pairs(), new.edge_pairs()

    return GraphDelta(
        added_nodes=sorted(new_nodes - old_nodes),
        removed_nodes=sorted(old_nodes - new_nodes),
        added_edges=sorted(new_edges - old_edges),
        removed_edges=sorted(old_edges - new_edges),
    )


def delta_to_markdown(delta: GraphDelta, *, old_label: str, new_label: str) -> str:
    lines: list[str] = []
    lines.append(f"## Graph delta: `{old_label}` -> `{new_label}`")
    lines.append("")
    if delta.is_empty:
        lines.append("No structural changes.")
        return "\n".join(lines) + "\n"

    def section(title: str, items: list[str]) -> None:
        lines.append(f"### {title} ({len(items)})")
        lines.append("")
        for item in items:
            lines.append(f"- {item}")
        lines.append("")

    section("Added nodes", [f"`{n}`" for n in delta.added_nodes])
    section("Removed nodes", [f"`{n}`" for n in delta.removed_nodes])
    section("Added edges", [f"`{a}` -> `{b}`" for a, b in delta.added_edges])
    section("Removed edges", [f"`{a}` -> `{b}`" for a, b in delta.removed_edges])

    return "\n".join(lines).rstrip() + "\n"

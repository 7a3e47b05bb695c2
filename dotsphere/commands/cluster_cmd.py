"""Cluster command - run community detection on a DOT graph and report the partition."""

from __future__ import annotations

import json
import random
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..clustering import cluster_adjacency, cluster_nodes, intra_cluster_weight_fraction, modularity
from ..config import Settings
from ..dot.convert import convert_graph
from ..dot.parser import read_dot
from ..models import Cluster, Link


def run_cluster(
    dot_path: Path,
    *,
    settings: Settings | None = None,
    fmt: str = "md",
    out: Path | None = None,
    seed: int | None = None,
    top: int = 10,
) -> int:
    """Cluster the graph in `dot_path` and print a report.

    Args:
        dot_path: DOT file to read
        settings: Loaded settings (defaults if None)
        fmt: md|json|rich
        out: Optional output path; prints to stdout if None
        seed: Seed for the shuffle order (random if None)
        top: How many members per cluster and inter-cluster links to list
    """
    console = Console(stderr=True)
    settings = settings or Settings()

    if fmt not in ("md", "json", "rich"):
        raise ValueError("fmt must be one of: md, json, rich")

    graph = read_dot(dot_path)
    rng = random.Random(seed)
    nodes, links = convert_graph(graph, rng=rng, settings=settings.ingest)
    clusters = cluster_nodes(nodes, links, rng=rng, settings=settings.clustering)

    payload = _cluster_payload(
        clusters,
        links,
        source=str(dot_path),
        node_count=len(nodes),
        min_size=settings.clustering.min_cluster_size,
        seed=seed,
        top=top,
    )

    if fmt == "rich":
        if out:
            rich_console = Console(record=True)
            _print_rich(payload, console=rich_console)
            out.write_text(rich_console.export_text(), encoding="utf-8")
            console.print(f"Wrote cluster report to {out}", style="green")
        else:
            _print_rich(payload, console=Console())
        return 0

    if fmt == "json":
        text = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    else:
        text = _cluster_report_to_markdown(payload)

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote cluster report to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")

    return 0


def _internal_weight(cluster: Cluster, links: list[Link]) -> float:
    ids = {n.id for n in cluster.nodes}
    return sum(link.weight for link in links if link.source in ids and link.target in ids)


def _cluster_payload(
    clusters: list[Cluster],
    links: list[Link],
    *,
    source: str,
    node_count: int,
    min_size: int,
    seed: int | None,
    top: int,
) -> dict:
    rows = []
    for c in clusters:
        rows.append(
            {
                "id": c.id,
                "size": c.size,
                "members": [n.id for n in c.nodes[: max(0, top)]],
                "internal_weight": round(_internal_weight(c, links), 3),
                "undersized": c.size < min_size,
            }
        )

    between = cluster_adjacency(clusters, links)
    strongest = sorted(between.items(), key=lambda kv: (-kv[1], kv[0]))[: max(0, top)]

    sizes = [c.size for c in clusters]
    return {
        "title": "Cluster report",
        "source": source,
        "node_count": node_count,
        "edge_count": len(links),
        "clusters": rows,
        "strongest_links": [{"a": a, "b": b, "weight": round(w, 3)} for (a, b), w in strongest],
        "summary": {
            "cluster_count": len(clusters),
            "largest": max(sizes, default=0),
            "smallest": min(sizes, default=0),
            "undersized_count": sum(1 for r in rows if r["undersized"]),
            "modularity": round(modularity(clusters, links), 3),
            "intra_cluster_weight_fraction": round(intra_cluster_weight_fraction(clusters, links), 3),
            "seed": seed,
        },
    }


def _cluster_report_to_markdown(payload: dict) -> str:
    s = payload["summary"]
    lines: list[str] = []
    lines.append("---")
    lines.append("role: report")
    lines.append(f"generated: {date.today().isoformat()}")
    lines.append("tool: dotsphere")
    lines.append("source: cluster")
    lines.append("---")
    lines.append("")
    lines.append(f"# {payload['title']}")
    lines.append("")
    lines.append(f"- Source: `{payload['source']}`")
    lines.append(f"- Nodes: {payload['node_count']}")
    lines.append(f"- Edges: {payload['edge_count']}")
    if s.get("seed") is not None:
        lines.append(f"- Seed: {s['seed']}")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|---|---:|")
    lines.append(f"| Clusters | {s.get('cluster_count', 0)} |")
    lines.append(f"| Largest | {s.get('largest', 0)} |")
    lines.append(f"| Smallest | {s.get('smallest', 0)} |")
    lines.append(f"| Undersized | {s.get('undersized_count', 0)} |")
    lines.append(f"| Modularity | {s.get('modularity', 0.0)} |")
    lines.append(f"| Intra-cluster weight fraction | {s.get('intra_cluster_weight_fraction', 0.0)} |")
    lines.append("")

    lines.append("## Clusters")
    lines.append("")
    lines.append("| Cluster | Size | Internal weight | Members |")
    lines.append("|---:|---:|---:|---|")
    for row in payload["clusters"]:
        members = ", ".join(f"`{m}`" for m in row["members"])
        if row["size"] > len(row["members"]):
            members += f", ... (+{row['size'] - len(row['members'])})"
        flag = " (undersized)" if row["undersized"] else ""
        lines.append(f"| {row['id']}{flag} | {row['size']} | {row['internal_weight']} | {members} |")
    lines.append("")

    if payload["strongest_links"]:
        lines.append("## Strongest inter-cluster links")
        lines.append("")
        lines.append("| Clusters | Weight |")
        lines.append("|---|---:|")
        for row in payload["strongest_links"]:
            lines.append(f"| {row['a']} - {row['b']} | {row['weight']} |")
        lines.append("")

    return "\n".join(lines)


def _print_rich(payload: dict, *, console: Console) -> None:
    s = payload["summary"]
    console.print(f"[bold]{payload['title']}[/bold] ({payload['source']})")
    console.print(
        f"Nodes: {payload['node_count']}  Edges: {payload['edge_count']}  "
        f"Clusters: {s['cluster_count']}  Modularity: {s['modularity']}"
    )
    console.print()

    t = Table(title="Clusters", show_header=True, header_style="bold")
    t.add_column("Cluster", justify="right")
    t.add_column("Size", justify="right")
    t.add_column("Internal weight", justify="right")
    t.add_column("Members", style="cyan")
    for row in payload["clusters"]:
        size = f"[yellow]{row['size']}[/yellow]" if row["undersized"] else str(row["size"])
        t.add_row(str(row["id"]), size, str(row["internal_weight"]), ", ".join(row["members"]))
    console.print(t)

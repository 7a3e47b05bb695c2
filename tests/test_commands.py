import json
from pathlib import Path

import pytest

from dotsphere.commands.cluster_cmd import run_cluster
from dotsphere.commands.export_cmd import run_export
from dotsphere.commands.parse_cmd import run_delta, run_parse


def test_cluster_report_json(tmp_path: Path, two_triangles_dot: Path) -> None:
    out = tmp_path / "clusters.json"
    code = run_cluster(two_triangles_dot, fmt="json", out=out, seed=1)
    assert code == 0

    payload = json.loads(out.read_text(encoding="utf-8"))
    summary = payload["summary"]
    assert summary["cluster_count"] == 2
    assert summary["largest"] == 3
    assert summary["smallest"] == 3
    assert summary["undersized_count"] == 0
    assert summary["seed"] == 1
    assert summary["modularity"] > 0.4
    assert payload["node_count"] == 6
    assert payload["edge_count"] == 7
    assert sorted(sorted(row["members"]) for row in payload["clusters"]) == [["a", "b", "c"], ["d", "e", "f"]]
    assert payload["strongest_links"] == [{"a": 0, "b": 1, "weight": 0.1}]


def test_cluster_report_markdown(tmp_path: Path, two_triangles_dot: Path) -> None:
    out = tmp_path / "clusters.md"
    run_cluster(two_triangles_dot, fmt="md", out=out, seed=1, top=2)

    text = out.read_text(encoding="utf-8")
    assert text.startswith("---\nrole: report\n")
    assert "# Cluster report" in text
    assert "| Clusters | 2 |" in text
    assert ", ... (+1)" in text
    assert "## Strongest inter-cluster links" in text


def test_cluster_report_rich(tmp_path: Path, two_triangles_dot: Path) -> None:
    out = tmp_path / "clusters.txt"
    run_cluster(two_triangles_dot, fmt="rich", out=out, seed=1)

    text = out.read_text(encoding="utf-8")
    assert "Cluster report" in text
    assert "Clusters" in text


def test_cluster_rejects_unknown_format(two_triangles_dot: Path) -> None:
    with pytest.raises(ValueError, match="fmt must be one of"):
        run_cluster(two_triangles_dot, fmt="csv")


def test_export_writes_scene(tmp_path: Path, two_triangles_dot: Path) -> None:
    out = tmp_path / "scene.json"
    assert run_export(two_triangles_dot, out=out, seed=3, color_mode="degree") == 0

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert len(payload["nodes"]) == 6
    assert len(payload["clusters"]) == 2
    assert all(n["color"].startswith("hsl(120, ") for n in payload["nodes"])


def test_parse_prints_graph_json(two_triangles_dot: Path, capsys: pytest.CaptureFixture) -> None:
    assert run_parse(two_triangles_dot) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["directed"] is False
    assert len(payload["nodes"]) == 6
    assert payload["edges"][0] == {"source": "a", "target": "b", "attrs": {"label": "1.0"}}


def test_delta_between_files(tmp_path: Path, two_triangles_dot: Path) -> None:
    new = tmp_path / "new.dot"
    new.write_text("graph triangles { a -- b; b -- g; }", encoding="utf-8")
    out = tmp_path / "delta.json"

    assert run_delta(two_triangles_dot, new, fmt="json", out=out) == 0

    delta = json.loads(out.read_text(encoding="utf-8"))
    assert delta["added_nodes"] == ["g"]
    assert delta["removed_nodes"] == ["c", "d", "e", "f"]
    assert delta["added_edges"] == [["b", "g"]]
    assert ["c", "d"] in delta["removed_edges"]


def test_delta_rejects_unknown_format(two_triangles_dot: Path) -> None:
    with pytest.raises(ValueError):
        run_delta(two_triangles_dot, two_triangles_dot, fmt="xml")

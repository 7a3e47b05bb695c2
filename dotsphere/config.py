"""Settings for ingestion, clustering, layout, forces and rendering.

Settings are data, loaded from an optional ``dotsphere.toml``:

    [clustering]
    max_passes = 15
    move_margin = 1.1
    min_cluster_size = 3

    [layout]
    sphere_radius = 2000.0

Missing sections and keys keep their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "dotsphere.toml"

COLOR_MODES = ("source", "cluster", "weight", "degree")


@dataclass(frozen=True)
class IngestSettings:
    default_weight: float = 0.5
    default_penwidth: float = 1.0
    default_color: str = "#666666"
    scatter: float = 100.0  # edge length of the initial random cube


@dataclass(frozen=True)
class ClusteringSettings:
    max_passes: int = 15
    move_margin: float = 1.1
    min_cluster_size: int = 3


@dataclass(frozen=True)
class LayoutSettings:
    sphere_radius: float = 2000.0
    radius_scale: float = 40.0
    min_cluster_radius: float = 150.0
    max_cluster_radius: float = 500.0


@dataclass(frozen=True)
class ForceSettings:
    charge_strength: float = -200.0
    charge_distance_max: float = 1000.0
    center_strength: float = 0.01
    velocity_decay: float = 0.4
    cluster_min_distance: float = 1500.0
    cluster_repulsion: float = 500.0
    cohesion: float = 0.03
    cohesion_radius: float = 300.0  # used when a node has no cluster radius


@dataclass(frozen=True)
class RenderSettings:
    color_mode: str = "cluster"


@dataclass(frozen=True)
class Settings:
    ingest: IngestSettings = field(default_factory=IngestSettings)
    clustering: ClusteringSettings = field(default_factory=ClusteringSettings)
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    forces: ForceSettings = field(default_factory=ForceSettings)
    render: RenderSettings = field(default_factory=RenderSettings)


_SECTIONS: dict[str, type] = {
    "ingest": IngestSettings,
    "clustering": ClusteringSettings,
    "layout": LayoutSettings,
    "forces": ForceSettings,
    "render": RenderSettings,
}


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_value(section: str, key: str, value: Any, default: Any) -> Any:
    where = f"{section}.{key}"
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{where} must be an integer")
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{where} must be a number")
        return float(value)
    if isinstance(default, str):
        if not isinstance(value, str):
            raise ValueError(f"{where} must be a string")
        return value.strip()
    return value


def _build_section(name: str, raw: dict[str, Any]) -> Any:
    cls = _SECTIONS[name]
    base = cls()
    known = {f.name for f in fields(cls)}
    updates: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            raise ValueError(f"unknown setting: {name}.{key}")
        updates[key] = _coerce_value(name, key, value, getattr(base, key))
    return replace(base, **updates)


def _validate(settings: Settings) -> None:
    c = settings.clustering
    if c.max_passes < 1:
        raise ValueError("clustering.max_passes must be at least 1")
    if c.move_margin < 1.0:
        raise ValueError("clustering.move_margin must be >= 1.0")
    if c.min_cluster_size < 1:
        raise ValueError("clustering.min_cluster_size must be at least 1")

    lay = settings.layout
    if lay.sphere_radius <= 0:
        raise ValueError("layout.sphere_radius must be positive")
    if lay.min_cluster_radius < 0 or lay.max_cluster_radius < lay.min_cluster_radius:
        raise ValueError("layout cluster radius bounds must satisfy 0 <= min <= max")

    if settings.ingest.default_weight < 0:
        raise ValueError("ingest.default_weight must be >= 0")

    if settings.render.color_mode not in COLOR_MODES:
        raise ValueError(f"render.color_mode must be one of: {', '.join(COLOR_MODES)}")


def settings_from_dict(data: dict[str, Any]) -> Settings:
    """Build validated settings from a parsed TOML document."""
    sections: dict[str, Any] = {}
    for name, raw in data.items():
        if name not in _SECTIONS:
            raise ValueError(f"unknown settings section: {name}")
        sections[name] = _build_section(name, _coerce_dict(raw))

    settings = Settings(**sections)
    _validate(settings)
    return settings


def load_settings(path: Path | None) -> Settings:
    """Load settings from TOML, or return defaults when path is None."""
    if path is None:
        return Settings()

    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"{path}: invalid TOML: {e}") from e

    return settings_from_dict(data)


def find_config(start: Path) -> Path | None:
    """Find a dotsphere.toml by walking up from `start`."""
    cur = start.resolve()
    if cur.is_file():
        cur = cur.parent
    for p in (cur, *cur.parents):
        candidate = p / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None

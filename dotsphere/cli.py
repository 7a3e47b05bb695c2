"""CLI entrypoint for dotsphere."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import COLOR_MODES, Settings, find_config, load_settings
from .dot.parser import DotParseError

DOT_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _settings_for(ctx: click.Context, dot_path: Path) -> Settings:
    """Settings from --config, else a dotsphere.toml found above the DOT file, else defaults."""
    config_path = ctx.obj.get("config") or find_config(dot_path)
    try:
        return load_settings(config_path)
    except ValueError as e:
        raise click.ClickException(f"Invalid config {config_path}: {e}")


def _run(fn, *args, **kwargs) -> int:
    try:
        return fn(*args, **kwargs)
    except DotParseError as e:
        raise click.ClickException(str(e))
    except OSError as e:
        raise click.ClickException(f"{e.strerror or e}: {e.filename}")


@click.group()
@click.version_option(__version__, prog_name="dotsphere")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to dotsphere.toml (defaults to one found next to or above the DOT file)",
)
@click.option("--verbose", "-V", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """dotsphere - cluster DOT graphs and seed a 3D force-directed layout."""
    ctx.ensure_object(dict)
    _configure_logging(verbose)
    ctx.obj["config"] = config.resolve() if config else None


@cli.command()
@click.argument("dot_file", type=DOT_FILE)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
def parse(dot_file: Path, out: Path | None) -> None:
    """Show the parsed graph (nodes, edges, attributes) as JSON."""
    from .commands.parse_cmd import run_parse

    sys.exit(_run(run_parse, dot_file, out=out))


@cli.command()
@click.argument("old_file", type=DOT_FILE)
@click.argument("new_file", type=DOT_FILE)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "md"]),
    default="json",
    show_default=True,
    help="Output format",
)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
def delta(old_file: Path, new_file: Path, fmt: str, out: Path | None) -> None:
    """Compare two DOT files: nodes and edges added or removed."""
    from .commands.parse_cmd import run_delta

    sys.exit(_run(run_delta, old_file, new_file, fmt=fmt, out=out))


@cli.command()
@click.argument("dot_file", type=DOT_FILE)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["md", "json", "rich"]),
    default="md",
    show_default=True,
    help="Output format",
)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
@click.option("--seed", type=int, default=None, help="Seed the shuffle order for a reproducible partition")
@click.option("--top", type=int, default=10, show_default=True, help="Members per cluster / inter-cluster links to list")
@click.pass_context
def cluster(ctx: click.Context, dot_file: Path, fmt: str, out: Path | None, seed: int | None, top: int) -> None:
    """Detect clusters in a DOT graph and report sizes, members and modularity.

    Examples:

        dotsphere cluster graph.dot

        dotsphere cluster graph.dot --format json --seed 7 --out clusters.json
    """
    from .commands.cluster_cmd import run_cluster

    settings = _settings_for(ctx, dot_file)
    sys.exit(_run(run_cluster, dot_file, settings=settings, fmt=fmt, out=out, seed=seed, top=top))


@cli.command()
@click.argument("dot_file", type=DOT_FILE)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write output to a file")
@click.option("--seed", type=int, default=None, help="Seed clustering and layout randomness")
@click.option(
    "--color-mode",
    type=click.Choice(list(COLOR_MODES)),
    default=None,
    help="Node colouring (defaults to render.color_mode from config)",
)
@click.pass_context
def export(ctx: click.Context, dot_file: Path, out: Path | None, seed: int | None, color_mode: str | None) -> None:
    """Write the scene payload (seeded positions, clusters, forces) as JSON."""
    from .commands.export_cmd import run_export

    settings = _settings_for(ctx, dot_file)
    sys.exit(_run(run_export, dot_file, settings=settings, out=out, seed=seed, color_mode=color_mode))


@cli.command()
@click.argument("dot_file", type=DOT_FILE)
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), required=True, help="Scene JSON to keep updated")
@click.option("--seed", type=int, default=None, help="Seed clustering and layout randomness")
@click.pass_context
def watch(ctx: click.Context, dot_file: Path, out: Path, seed: int | None) -> None:
    """Rebuild the scene payload whenever the DOT file changes.

    Runs until interrupted (Ctrl+C).

    Examples:

        dotsphere watch semantic_graph.dot --out graph.json
    """
    from .commands.watch_cmd import run_watch

    settings = _settings_for(ctx, dot_file)
    sys.exit(_run(run_watch, dot_file, out=out, settings=settings, seed=seed))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()

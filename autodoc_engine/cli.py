"""Typer-based CLI for the autodoc structural analysis engine."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .analyzer import ProjectAnalysis, ProjectAnalyzer
from .config_manager import EngineConfig, load_engine_config
from .errors import ConfigError
from .models import SourceFile

app = typer.Typer(
    help="Structural analysis of JavaScript / TypeScript sources: symbols, import graph, chunks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"autodoc-engine v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log engine activity."),
):
    """autodoc-engine: parse sources, resolve imports, cut semantic chunks."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _engine_config(config_file: Optional[Path], max_chunk_size: Optional[int]) -> EngineConfig:
    try:
        return load_engine_config(config_file).with_overrides(max_chunk_size=max_chunk_size)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load_sources(paths: List[Path]) -> List[SourceFile]:
    """Read each file as UTF-8; unreadable files are reported and skipped."""
    sources: List[SourceFile] = []
    for path in paths:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            typer.echo(f"Skipping {path}: {exc}", err=True)
            continue
        sources.append(SourceFile(path=str(path), content=content))
    return sources


def _run(
    files: List[Path],
    config_file: Optional[Path],
    max_chunk_size: Optional[int],
    workers: int = 1,
) -> ProjectAnalysis:
    config = _engine_config(config_file, max_chunk_size)
    return ProjectAnalyzer(config, max_workers=workers).analyze(_load_sources(files))


_FILES_ARG = typer.Argument(..., exists=True, dir_okay=False, help="Source files to analyze.")
_CONFIG_OPT = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="TOML config file.")
_CHUNK_OPT = typer.Option(None, "--max-chunk-size", min=1, help="Module fallback chunk size.")


@app.command("analyze")
def analyze(
    files: List[Path] = _FILES_ARG,
    config_file: Optional[Path] = _CONFIG_OPT,
    max_chunk_size: Optional[int] = _CHUNK_OPT,
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Parser threads."),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
):
    """Parse files, build their import graph and report the symbols found."""
    analysis = _run(files, config_file, max_chunk_size, workers)

    if as_json:
        payload = {
            "files": [p.to_dict() for p in analysis.parsed],
            "graph": [n.to_dict() for n in analysis.graph.get_all_nodes()],
            "chunks": {
                path: [c.to_dict() for c in chunks] for path, chunks in analysis.chunks.items()
            },
            "failed": analysis.failed,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title="Structural analysis", show_header=True)
    table.add_column("File", style="cyan")
    table.add_column("Classes")
    table.add_column("Functions")
    table.add_column("Imports", justify="right")
    table.add_column("Imported by", justify="right")
    for parsed in analysis.parsed:
        table.add_row(
            parsed.path,
            ", ".join(c.name for c in parsed.classes) or "-",
            ", ".join(f.name for f in parsed.functions) or "-",
            str(len(analysis.graph.get_dependencies(parsed.path))),
            str(len(analysis.graph.get_dependents(parsed.path))),
        )
    console.print(table)

    for reason in analysis.failed.values():
        console.print(f"[yellow]Parse failed:[/yellow] {reason}")
    typer.echo(f"Files: {len(analysis.parsed)} parsed | {len(analysis.failed)} failed")


@app.command("chunks")
def chunks(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source file to chunk."),
    config_file: Optional[Path] = _CONFIG_OPT,
    max_chunk_size: Optional[int] = _CHUNK_OPT,
):
    """Print the semantic chunks of one file."""
    analysis = _run([file], config_file, max_chunk_size)
    for chunk in analysis.chunks.get(str(file), []):
        typer.echo(f"--- {chunk.type.value}: {chunk.name} ({len(chunk.content)} chars)")
        typer.echo(chunk.content)


@app.command("deps")
def deps(
    files: List[Path] = _FILES_ARG,
    target: Path = typer.Option(..., "--target", "-t", help="File whose relationships to show."),
    config_file: Optional[Path] = _CONFIG_OPT,
):
    """Show what one file imports and what imports it within the given files."""
    analysis = _run(files, config_file, None)
    if str(target) not in analysis.graph:
        raise typer.BadParameter(f"{target} is not among the analyzed files.")

    typer.echo(f"Dependencies of {target}:")
    for path in analysis.graph.get_dependencies(str(target)) or ["(none)"]:
        typer.echo(f"  {path}")
    typer.echo(f"Dependents of {target}:")
    for path in analysis.graph.get_dependents(str(target)) or ["(none)"]:
        typer.echo(f"  {path}")


if __name__ == "__main__":
    app()

# src/ristream/cli.py
"""
ristream Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`.

Features
--------
- **Expand**: Resolve inline archives and object instances in a RIB file and
  print (or save) the result.
- **Inspect**: List the archives and objects a RIB file defines, with their
  sizes, without printing the expanded stream.
- **Error Panel**: Every problem reported while parsing or filtering is shown
  after the run.

Usage
-----
    $ ristream expand scene.rib -o scene_flat.rib --stats
    $ ristream inspect scene.rib
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ristream.core.settings import MAX_REPLAY_DEPTH_LIMIT
from ristream.pipelines.expand import ExpandResult, run_expand

# Ensure env vars (RISTREAM_*) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="ristream: cache and replay inline archives in RIB streams.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers: Rendering & I/O
# --------------------------------------------------------------------------- #


def _read_input(file: Path) -> str:
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Cannot read {file}:[/bold red] {e}")
        raise typer.Exit(code=1) from e


def _render_errors(result: ExpandResult) -> None:
    """Helper: show error reports, if any, in a single panel."""
    errors = result["errors"]
    if not errors:
        return
    lines = [escape(f"[{e['severity']}] {e['code']}: {e['message']}") for e in errors]
    console.print(
        Panel("\n".join(lines), title=f"{len(errors)} problem(s)", border_style="yellow")
    )


def _stream_table(snapshot: dict[str, Any]) -> Table:
    """Helper: tabulate the archives and objects held by the filter."""
    table = Table(title="Cached streams")
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Commands", justify="right")
    table.add_column("Note", style="dim")

    for kind in ("archives", "objects"):
        seen: set[str] = set()
        for entry in snapshot[kind]:
            # Only the first definition of a name is ever replayed.
            note = "shadowed" if entry["name"] in seen else ""
            seen.add(entry["name"])
            table.add_row(kind[:-1], escape(entry["name"]), str(entry["commands"]), note)
    return table


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def expand(
    file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to the input RIB file.",
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the expanded RIB here instead of stdout."),
    ] = None,
    capture_records: Annotated[
        bool | None,
        typer.Option(
            "--capture-records/--no-capture-records",
            help="Keep or drop comments found inside archive and object definitions "
            "(default: RISTREAM_CAPTURE_RECORDS).",
            show_default=False,
        ),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option(
            "--max-depth",
            min=1,
            max=MAX_REPLAY_DEPTH_LIMIT,
            help="Maximum number of nested replays.",
        ),
    ] = None,
    stats: Annotated[
        bool,
        typer.Option("--stats", "-s", help="Show a table of cached archives and objects."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Expand inline archives and object instances in a RIB file.

    References to archives defined in the file are replaced by their
    contents; references to anything else are left for the renderer.
    """
    text = _read_input(file)
    try:
        result = run_expand(
            text,
            capture_archive_records=capture_records,
            max_replay_depth=max_depth,
        )
    except Exception as e:
        console.print(f"\n[bold red]Expand Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    if output is not None:
        output.write_text(result["rib"], encoding="utf-8")
        console.print(
            Panel(
                f"{result['requests']} requests read\nSaved to: {output}",
                title="Expanded",
                border_style="green",
            )
        )
    else:
        # Plain print keeps the output usable in shell pipes.
        typer.echo(result["rib"], nl=False)

    if stats:
        console.print(_stream_table(result["snapshot"]))
    _render_errors(result)


@app.command()  # type: ignore[misc]
def inspect(
    file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to the input RIB file.",
        ),
    ],
    show: Annotated[
        bool,
        typer.Option("--show", help="Also print the expanded stream with syntax colouring."),
    ] = False,
) -> None:
    """
    List the archives and objects defined in a RIB file.
    """
    result = run_expand(_read_input(file))
    snap = result["snapshot"]

    console.print(
        Panel.fit(
            f"[bold cyan]ristream[/bold cyan]\nInspecting: [u]{file.name}[/u]",
            border_style="cyan",
        )
    )
    console.print(_stream_table(snap))
    if snap["recording"] is not None:
        console.print(
            f"[yellow]Input ends inside {snap['state'].replace('_', ' ')} "
            f"\"{escape(snap['recording'])}\".[/yellow]"
        )
    if show:
        console.print(Syntax(result["rib"], "text", line_numbers=True))
    _render_errors(result)


if __name__ == "__main__":
    app()

"""Shared plumbing for importmap commands: loading the map and writing it back."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import click

from ..console import console
from ..console import error_console
from ..import_map import ImportMap
from ..import_map import ImportMapError
from ..import_map import dump_document
from ..import_map import save_to_file
from ..paths import create_import_map
from ..utils.error_format import error_hint
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message


@dataclass
class CliOptions:
    """Global options shared by every command."""

    map_path: Path | None = None
    map_url: str | None = None
    root_url: str | None = None


def get_options(ctx: click.Context) -> CliOptions:
    options = ctx.find_object(CliOptions)
    return options if options is not None else CliOptions()


def report_error(e: BaseException) -> None:
    """Print an error (and hint, when there is one) to stderr."""
    error_console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e, include_type=False))}")
    if hint := error_hint(e):
        error_console.print(f"[dim]{escape_markup(hint)}[/dim]")


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn import map and file errors into a red message and exit code 1."""
    try:
        yield
    except FileNotFoundError as e:
        report_error(e)
        sys.exit(1)
    except ImportMapError as e:
        report_error(e)
        sys.exit(1)


def load_map(ctx: click.Context) -> ImportMap:
    """Load the import map selected by the global options."""
    options = get_options(ctx)
    return create_import_map(options.map_path, options.map_url, options.root_url)


def emit_map(import_map: ImportMap, output: Path | None) -> None:
    """Write the map to output, or print its JSON document to stdout."""
    if output is None:
        click.echo(dump_document(import_map), nl=False)
        return
    save_to_file(import_map, output)
    console.print(f"[green]✓ Wrote import map to {escape_markup(output)}[/green]")


output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the resulting import map here (default: print JSON to stdout)",
)

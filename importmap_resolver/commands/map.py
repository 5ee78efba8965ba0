"""Map rewriting commands: relocation, merging and simplification.

Each command loads the map, applies one operation and writes the result
to --output, or prints the JSON document to stdout.
"""

from __future__ import annotations

from pathlib import Path

import click

from ..import_map import ImportMap
from ..import_map import load_from_file
from ..paths import default_map_url
from .common import emit_map
from .common import handle_errors
from .common import load_map
from .common import output_option


@click.command("rebase")
@click.argument("map_url")
@click.option("--root", "root_url", default=None, help="New root location (inferred when omitted)")
@output_option
@click.pass_context
def rebase_cmd(ctx: click.Context, map_url: str, root_url: str | None, output: Path | None):
    """Relocate the import map to MAP_URL, keeping every resolution identical."""
    with handle_errors():
        import_map = load_map(ctx).rebase(map_url, root_url)
        emit_map(import_map, output)


@click.command("extend")
@click.argument("other", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--other-map-url", default=None, help="Declaring location of OTHER (default: current directory)")
@click.option("--override-scopes", is_flag=True, help="Replace same-named scopes instead of merging them")
@output_option
@click.pass_context
def extend_cmd(
    ctx: click.Context,
    other: Path,
    other_map_url: str | None,
    override_scopes: bool,
    output: Path | None,
):
    """Merge the import map in OTHER into the loaded map."""
    with handle_errors():
        import_map = load_map(ctx)
        incoming: ImportMap = load_from_file(other, map_url=other_map_url, default_map_url=default_map_url())
        import_map.extend(incoming, override_scopes=override_scopes)
        emit_map(import_map, output)


@click.command("flatten")
@output_option
@click.pass_context
def flatten_cmd(ctx: click.Context, output: Path | None):
    """Hoist mappings shared by related scopes into a common scope."""
    with handle_errors():
        emit_map(load_map(ctx).flatten(), output)


@click.command("combine")
@output_option
@click.pass_context
def combine_cmd(ctx: click.Context, output: Path | None):
    """Collapse sibling exact mappings into path mappings."""
    with handle_errors():
        emit_map(load_map(ctx).combine_sub_paths(), output)


@click.command("replace")
@click.argument("url")
@click.argument("new_url")
@output_option
@click.pass_context
def replace_cmd(ctx: click.Context, url: str, new_url: str, output: Path | None):
    """Replace target URL with NEW_URL everywhere in the map.

    End URL with "/" to replace every target under that path.
    """
    with handle_errors():
        emit_map(load_map(ctx).replace(url, new_url), output)

"""Resolution commands: resolve specifiers and inspect the loaded map."""

from __future__ import annotations

import click
from rich.table import Table

from ..console import console
from ..utils.error_format import escape_markup
from .common import handle_errors
from .common import load_map


@click.command("resolve")
@click.argument("specifier")
@click.option("--parent", "-p", default=None, help="Location of the importing module (default: the map's location)")
@click.pass_context
def resolve_cmd(ctx: click.Context, specifier: str, parent: str | None):
    """Resolve SPECIFIER against the import map.

    Examples:

        \b
        importmap resolve react
        importmap resolve ./util.js --parent https://site.com/app/main.js
    """
    with handle_errors():
        import_map = load_map(ctx)
        if parent is None:
            resolved = import_map.resolve(specifier)
        else:
            resolved = import_map.resolve_with_parent(specifier, parent)
    click.echo(resolved)


@click.command("show")
@click.pass_context
def show_cmd(ctx: click.Context):
    """Show the import map tables."""
    with handle_errors():
        import_map = load_map(ctx)

    console.print(f"[bold]Map URL:[/bold] {escape_markup(import_map.map_url)}")
    console.print(f"[bold]Root URL:[/bold] {escape_markup(import_map.root_url or '(none)')}")

    imports_table = Table(title="Imports", show_header=True, header_style="bold cyan")
    imports_table.add_column("Specifier", style="green")
    imports_table.add_column("Target")
    for key, target in import_map.imports.items():
        imports_table.add_row(escape_markup(key), escape_markup(target))
    console.print(imports_table)

    for scope, table in import_map.scopes.items():
        scope_table = Table(title=f"Scope {escape_markup(scope)}", show_header=True, header_style="bold cyan")
        scope_table.add_column("Specifier", style="green")
        scope_table.add_column("Target")
        for key, target in table.items():
            scope_table.add_row(escape_markup(key), escape_markup(target))
        console.print(scope_table)

    if import_map.integrity:
        integrity_table = Table(title="Integrity", show_header=True, header_style="bold cyan")
        integrity_table.add_column("Target", style="green")
        integrity_table.add_column("Hash", style="dim")
        for target, digest in import_map.integrity.items():
            integrity_table.add_row(escape_markup(target), escape_markup(digest))
        console.print(integrity_table)

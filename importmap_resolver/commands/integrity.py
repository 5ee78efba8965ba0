"""Integrity commands: look up and record subresource integrity hashes."""

from __future__ import annotations

from pathlib import Path

import click

from .common import emit_map
from .common import handle_errors
from .common import load_map
from .common import output_option


@click.group(invoke_without_command=True)
@click.pass_context
def integrity(ctx: click.Context):
    """Manage integrity hashes for import map targets."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@integrity.command("get")
@click.argument("target")
@click.pass_context
def integrity_get(ctx: click.Context, target: str):
    """Print the integrity hash recorded for TARGET."""
    with handle_errors():
        click.echo(load_map(ctx).integrity_for(target))


@integrity.command("set")
@click.argument("target")
@click.argument("hash_value", metavar="HASH")
@output_option
@click.pass_context
def integrity_set(ctx: click.Context, target: str, hash_value: str, output: Path | None):
    """Record HASH as the integrity of TARGET."""
    with handle_errors():
        emit_map(load_map(ctx).set_integrity(target, hash_value), output)

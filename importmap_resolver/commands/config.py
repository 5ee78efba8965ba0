"""Settings commands: record where the import map lives and where it is declared."""

from __future__ import annotations

from typing import cast

import click

from ..console import console
from ..lib.settings import MAP_SETTING_KEYS
from ..lib.settings import AppSettings
from ..lib.settings import Scope
from ..utils.error_format import escape_markup

SCOPE_LABELS = {
    "local": "local (.importmap/settings.local.yaml)",
    "project": "project (.importmap/settings.yaml)",
    "global": "global (~/.importmap/settings.yaml)",
}


def _scope_options(verb: str):
    """Attach the --local/--project/--global flags to a command."""

    def decorator(func):
        func = click.option(
            "--global", "scope_flag", flag_value="global", help=f"{verb} user settings (~/.importmap/settings.yaml)"
        )(func)
        func = click.option(
            "--project", "scope_flag", flag_value="project", help=f"{verb} project settings (.importmap/settings.yaml)"
        )(func)
        func = click.option(
            "--local", "scope_flag", flag_value="local", help=f"{verb} local settings (.importmap/settings.local.yaml)"
        )(func)
        return func

    return decorator


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Manage import map settings."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config.command("set")
@click.argument("key", type=click.Choice(MAP_SETTING_KEYS))
@click.argument("value")
@_scope_options("Store in")
def config_set(key: str, value: str, scope_flag: str | None):
    """Set KEY (path, map_url or root_url) to VALUE.

    Examples:

        \b
        importmap config set map_url https://site.com/app/
        importmap config set path maps/importmap.json --local
    """
    scope = cast(Scope, scope_flag or "project")
    AppSettings().set_map_setting(key, value, scope=scope)

    console.print(f"[green]✓ Set {key}[/green]")
    console.print(f"  Value: {escape_markup(value)}")
    console.print(f"  Scope: {SCOPE_LABELS[scope]}")


@config.command("unset")
@click.argument("key", type=click.Choice(MAP_SETTING_KEYS))
@_scope_options("Remove from")
def config_unset(key: str, scope_flag: str | None):
    """Remove KEY from the settings at one scope."""
    scope = cast(Scope, scope_flag or "project")
    if AppSettings().clear_map_setting(key, scope=scope):
        console.print(f"[green]✓ Removed {key}[/green] from {SCOPE_LABELS[scope]}")
    else:
        console.print(f"[yellow]{key} is not set in {SCOPE_LABELS[scope]}[/yellow]")


@config.command("show")
def config_show():
    """Show the effective import map settings after merging all scopes."""
    settings = AppSettings().get_map_settings()
    for key in MAP_SETTING_KEYS:
        value = settings.get(key)
        console.print(f"[bold]{key}:[/bold] {escape_markup(value) if value else '[dim](not set)[/dim]'}")

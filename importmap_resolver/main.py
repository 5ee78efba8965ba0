"""importmap - command-line interface for import map resolution."""

import logging
from pathlib import Path

import click

from .commands.common import CliOptions
from .commands.config import config as config_group
from .commands.integrity import integrity as integrity_group
from .commands.map import combine_cmd
from .commands.map import extend_cmd
from .commands.map import flatten_cmd
from .commands.map import rebase_cmd
from .commands.map import replace_cmd
from .commands.resolve import resolve_cmd
from .commands.resolve import show_cmd
from .logging_setup import init_json_logging

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="importmap-resolver")
@click.option(
    "--map",
    "map_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Import map JSON document (default: settings, then ./importmap.json)",
)
@click.option("--map-url", default=None, help="Declaring location of the map (default: current directory)")
@click.option("--root-url", default=None, help="Root location for '/'-leading entries")
@click.option("--log-file", default=None, help="JSONL log file (default: $IMPORTMAP_LOG_PATH)")
@click.option("--log-level", default=None, help="Log level (default: $IMPORTMAP_LOG_LEVEL or WARNING)")
@click.pass_context
def cli(
    ctx: click.Context,
    map_path: Path | None,
    map_url: str | None,
    root_url: str | None,
    log_file: str | None,
    log_level: str | None,
):
    """Resolve module specifiers with WHATWG import maps."""
    if log_file or log_level:
        init_json_logging(log_file, log_level)

    ctx.obj = CliOptions(map_path=map_path, map_url=map_url, root_url=root_url)
    logger.debug(f"importmap invoked with {ctx.obj}")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


cli.add_command(resolve_cmd)
cli.add_command(show_cmd)
cli.add_command(rebase_cmd)
cli.add_command(extend_cmd)
cli.add_command(flatten_cmd)
cli.add_command(combine_cmd)
cli.add_command(replace_cmd)
cli.add_command(integrity_group)
cli.add_command(config_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()

"""Command line interface for btshow.

Provides:
- ``btshow scrape``: query a UDP tracker for swarm statistics
- ``btshow config``: show the effective configuration
"""

from __future__ import annotations

import logging

import click

from btshow import __version__
from btshow.cli.scrape_commands import scrape
from btshow.config.config import init_config, set_config
from btshow.models import LogLevel
from btshow.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# -v / -vv map onto these log levels; default keeps the console quiet
VERBOSITY_LEVELS = {
    0: None,
    1: LogLevel.INFO,
    2: LogLevel.DEBUG,
}


@click.group(
    name="btshow",
    help="BitTorrent Tracker Client - CLI",
    invoke_without_command=True,
)
@click.version_option(__version__, prog_name="btshow")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a btshow.toml configuration file",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase log verbosity (-v info, -vv debug)",
)
@click.pass_context
def cli(ctx, config_file: str | None, verbose: int):
    """BitTorrent tracker client."""
    try:
        manager = init_config(config_file)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    level = VERBOSITY_LEVELS.get(min(verbose, 2))
    if level is not None:
        observability = manager.config.observability.model_copy(
            update={"log_level": level}
        )
        set_config(manager.config.model_copy(update={"observability": observability}))

    logger.debug("Loaded configuration from %s", manager.config_file or "defaults")

    ctx.ensure_object(dict)
    ctx.obj["config_manager"] = manager

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("config")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["toml", "json"]),
    default="toml",
    show_default=True,
    help="Output format",
)
@click.pass_context
def show_config(ctx, fmt: str):
    """Show the effective configuration."""
    click.echo(ctx.obj["config_manager"].export(fmt))


cli.add_command(scrape)


def main() -> None:
    """Entry point for the ``btshow`` console script."""
    cli()  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()

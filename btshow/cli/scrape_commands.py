"""CLI command for UDP tracker scraping (BEP 15).

Parses hex info hashes, runs one scrape against the tracker and renders the
per-hash statistics.
"""

from __future__ import annotations

import json
import logging

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.table import Table

from btshow.config.config import get_config
from btshow.models import TrackerConfig
from btshow.tracker.client import UDPTrackerClient
from btshow.tracker.scrape import ScrapeResult
from btshow.utils.exceptions import BtshowError, InvalidInfoHashError
from btshow.utils.logging_config import LoggingContext
from btshow.utils.tracker_utils import parse_info_hash

logger = logging.getLogger(__name__)


def _parse_info_hashes(_ctx, _param, values: tuple[str, ...]) -> list[bytes]:
    """Click callback decoding each hex argument into 20 raw bytes."""
    info_hashes = []
    for value in values:
        try:
            info_hashes.append(parse_info_hash(value))
        except InvalidInfoHashError as e:
            raise click.BadParameter(e.message) from e
    return info_hashes


def render_table(result: ScrapeResult, console: Console) -> None:
    """Print scrape results as a Rich table."""
    table = Table(title="Scrape Results")
    table.add_column("Info Hash", style="cyan", no_wrap=True)
    table.add_column("Seeders", style="green", justify="right")
    table.add_column("Leechers", style="yellow", justify="right")
    table.add_column("Completed", style="blue", justify="right")

    for info_hash, stat in result.items():
        table.add_row(
            info_hash.hex(),
            str(stat.seeders),
            str(stat.leechers),
            str(stat.completed),
        )

    console.print(table)


def render_json(result: ScrapeResult) -> str:
    """Serialize scrape results keyed by hex info hash."""
    return json.dumps(
        {
            info_hash.hex(): {
                "seeders": stat.seeders,
                "leechers": stat.leechers,
                "completed": stat.completed,
            }
            for info_hash, stat in result.items()
        },
        indent=2,
    )


@click.command("scrape")
@click.argument(
    "info_hashes",
    nargs=-1,
    required=True,
    callback=_parse_info_hashes,
    metavar="INFOHASH...",
)
@click.option(
    "--udp-tracker-host",
    "-u",
    "tracker_host",
    default=None,
    help="UDP tracker host and port (defaults to tracker.host from config)",
)
@click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0.0, min_open=True),
    default=None,
    help="Seconds to wait for each tracker reply (defaults to tracker.timeout)",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print results as JSON",
)
def scrape(
    info_hashes: list[bytes],
    tracker_host: str | None,
    timeout: float | None,
    as_json: bool,
):
    """Scrape one or more infohashes for completed, leechers and seeders."""
    tracker_config = get_config().tracker
    if timeout is not None:
        try:
            tracker_config = TrackerConfig.model_validate(
                {**tracker_config.model_dump(), "timeout": timeout}
            )
        except PydanticValidationError as e:
            msg = e.errors()[0]["msg"]
            raise click.BadParameter(msg, param_hint="'--timeout'") from e

    try:
        with LoggingContext(
            "tracker_scrape",
            tracker=tracker_host or tracker_config.host,
            count=len(info_hashes),
        ), UDPTrackerClient.from_config(tracker_config, tracker_host) as client:
            result = client.scrape(*info_hashes)
    except BtshowError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(render_json(result))
    else:
        render_table(result, Console())

"""CLI commands for the network status dashboard.

Usage:
    nano-status status
    nano-status monitor [--interval SECONDS] [--count N]
    nano-status delegators ACCOUNT
"""

from __future__ import annotations

import asyncio
import sys

import click

from nano_status.consts import DEFAULT_RPC_URL, DEFAULT_TIMEOUT, POLL_INTERVAL
from nano_status.netstatus.aggregator import SnapshotAggregator
from nano_status.netstatus.config import ConfigBuilder, StatusConfig
from nano_status.netstatus.errors import FetchError
from nano_status.netstatus.monitor import (
    StatusMonitor,
    console,
    display_delegators,
    display_network_status,
)
from nano_status.netstatus.rpc import NanoRPCClient
from nano_status.utils.logging import make_logger, setup_logging

logger = make_logger(__name__)


def _create_client(ctx: click.Context) -> NanoRPCClient:
    """Create an RPC client from the context config."""
    config: StatusConfig = ctx.obj["config"]
    return NanoRPCClient(
        url=config.rpc_url,
        timeout=config.timeout,
        official_accounts=config.official_representatives,
    )


@click.group()
@click.option(
    "--rpc-url",
    default=DEFAULT_RPC_URL,
    envvar="NANO_RPC_URL",
    show_default=True,
    help="Node RPC endpoint (env: NANO_RPC_URL)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_TIMEOUT,
    envvar="NANO_RPC_TIMEOUT",
    show_default=True,
    help="RPC request timeout in seconds (env: NANO_RPC_TIMEOUT)",
)
@click.option(
    "--official-rep",
    "official_reps",
    multiple=True,
    envvar="NANO_OFFICIAL_REPS",
    help="Official representative account, repeatable "
    "(env: NANO_OFFICIAL_REPS, space separated)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Log level",
)
@click.pass_context
def cli(
    ctx: click.Context,
    rpc_url: str,
    timeout: float,
    official_reps: tuple[str, ...],
    log_level: str,
) -> None:
    """Show the health of the Nano network as seen by a node.

    Examples:

        # One-shot status from a local node
        nano-status status

        # Refresh every 10 seconds until Ctrl-C
        nano-status --official-rep nano_1abc... monitor

        # List delegators of a representative
        nano-status delegators nano_1abc...
    """
    setup_logging(log_level.upper(), logger)

    try:
        config = (
            ConfigBuilder()
            .rpc_url(rpc_url)
            .timeout(timeout)
            .official_representatives(official_reps)
            .build()
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Poll the node once and print the network status."""
    with _create_client(ctx) as client:
        aggregator = SnapshotAggregator(client)
        snapshot = asyncio.run(aggregator.poll_once())

    if snapshot is None:
        console.print("[red]Failed to fetch network status[/red]")
        sys.exit(1)

    display_network_status(snapshot)


@cli.command()
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=POLL_INTERVAL,
    envvar="NANO_POLL_INTERVAL",
    show_default=True,
    help="Seconds between the end of one poll and the next (env: NANO_POLL_INTERVAL)",
)
@click.option(
    "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many successful polls (default: run until Ctrl-C)",
)
@click.pass_context
def monitor(ctx: click.Context, interval: float, count: int | None) -> None:
    """Continuously poll the node and print the network status."""
    try:
        config = ConfigBuilder.from_config(ctx.obj["config"]).poll_interval(interval).build()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--interval") from e
    ctx.obj["config"] = config

    with _create_client(ctx) as client:
        status_monitor = StatusMonitor(client, config.poll_interval)
        try:
            asyncio.run(status_monitor.monitor(max_renders=count))
        except KeyboardInterrupt:
            console.print("\n\n[bold yellow]Monitoring stopped by user[/bold yellow]")


@cli.command()
@click.argument("account")
@click.pass_context
def delegators(ctx: click.Context, account: str) -> None:
    """List the accounts delegating to ACCOUNT."""
    with _create_client(ctx) as client:
        try:
            result = client.get_delegators(account)
        except FetchError as e:
            raise click.ClickException(str(e)) from e

    display_delegators(account, result)


def main() -> None:
    """Entry point for the nano-status CLI."""
    cli()


if __name__ == "__main__":
    main()

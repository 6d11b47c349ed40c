"""Network status display utilities.

This module provides:
- Number and percentage formatting for NANO amounts
- Rich table display for a network snapshot
- Delegator listing
- Async monitoring loop that re-renders on every published snapshot
"""

from __future__ import annotations

import asyncio
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from nano_status.netstatus.aggregator import SnapshotAggregator
from nano_status.netstatus.metrics import summarize
from nano_status.netstatus.snapshot import parse_weights
from nano_status.utils.logging import make_logger

if TYPE_CHECKING:
    from nano_status.netstatus.protocols import MetricsClient
    from nano_status.netstatus.snapshot import Snapshot

logger = make_logger(__name__)
console = Console()


def format_number(value: Decimal | int | float, precision: int = 0) -> str:
    """Format a number with thousands separators and fixed decimals.

    Rounds half-up, e.g. format_number(Decimal("1234.5")) -> "1,235".
    """
    quantum = Decimal(1).scaleb(-precision)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:,.{precision}f}"


def format_percent(value: Decimal | None) -> str:
    """Format a percentage, or N/A when it is unavailable."""
    if value is None:
        return "N/A"
    return f"{value:.2f}%"


def format_uptime(seconds: float) -> str:
    """Format time spent monitoring, e.g. "42s", "3m05s", "2h07m" or "1d 4h"."""
    days, rest = divmod(int(seconds), 86400)
    hours, rest = divmod(rest, 3600)
    mins, secs = divmod(rest, 60)
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h{mins:02d}m"
    if mins:
        return f"{mins}m{secs:02d}s"
    return f"{secs}s"


def display_network_status(snapshot: Snapshot, target: Console | None = None) -> None:
    """Display a snapshot and its derived metrics.

    Args:
        snapshot: Snapshot to render
        target: Console to print to (default: module console)
    """
    out = target or console
    summary = summarize(snapshot)

    out.print(
        f"[bold]{format_number(summary.representative_count)}[/bold] "
        "[dim]representatives online[/dim]"
    )
    out.print(
        f"[bold]{format_number(summary.rebroadcast_count)}[/bold] "
        "[dim]representatives rebroadcasting votes[/dim]"
    )
    out.print(
        f"[bold]{format_number(summary.online_weight)} NANO[/bold] "
        "[dim]voting power is online,[/dim] "
        f"{format_percent(summary.percent_represented)} "
        "[dim]of the total voting power[/dim]"
    )
    out.print(
        f"[bold]{format_number(summary.official_weight)} NANO[/bold] "
        "[dim]is delegated to official representatives,[/dim] "
        f"{format_percent(summary.official_percent)} "
        "[dim]of the total voting power and[/dim] "
        f"{format_percent(summary.official_online_percent)} "
        "[dim]of the online voting power[/dim]"
    )

    blocks = Table(title="Block Stats")
    blocks.add_column("Type", style="cyan", no_wrap=True)
    blocks.add_column("Count", justify="right", style="yellow")
    for block_type, count in sorted(
        snapshot.blocks_by_type.items(), key=lambda x: (-x[1], x[0])
    ):
        blocks.add_row(block_type, format_number(count))
    blocks.add_row("[bold]total[/bold]", format_number(summary.total_blocks))

    peers = Table(title=f"Peer Versions ({summary.peer_count} peers)")
    peers.add_column("Version", style="cyan", no_wrap=True)
    peers.add_column("Peers", justify="right", style="blue")
    peers.add_column("Share", justify="right", style="white")
    for version, count in summary.peer_versions:
        share = Decimal(count) / Decimal(summary.peer_count) * 100
        peers.add_row(
            version,
            format_number(count),
            format_percent(share.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)),
        )

    out.print(blocks)
    out.print(peers)


def display_delegators(
    account: str,
    delegators: dict[str, str],
    target: Console | None = None,
) -> None:
    """Display the delegators of a representative, largest balance first.

    Args:
        account: Representative account
        delegators: Delegator account -> balance in NANO, as text
        target: Console to print to (default: module console)
    """
    out = target or console
    balances = parse_weights(delegators, "delegators")

    table = Table(title=f"Delegators of {account}")
    table.add_column("Account", style="cyan", no_wrap=True)
    table.add_column("Balance", justify="right", style="yellow")
    for delegator, balance in sorted(balances.items(), key=lambda x: (-x[1], x[0])):
        table.add_row(delegator, f"{format_number(balance, 6)} NANO")

    out.print(table)
    total = sum(balances.values(), Decimal(0))
    out.print(
        f"[dim]{format_number(len(balances))} delegators, total[/dim] "
        f"{format_number(total, 6)} NANO"
    )


class StatusMonitor:
    """Renders every snapshot published by a SnapshotAggregator.

    Attributes:
        aggregator: The aggregator being watched
    """

    def __init__(
        self,
        client: MetricsClient,
        interval: float,
        target: Console | None = None,
    ) -> None:
        """Initialize the monitor.

        Args:
            client: Metrics source passed to the aggregator
            interval: Delay between poll cycles in seconds
            target: Console to print to (default: module console)
        """
        self._console = target or console
        self._start_time: float | None = None
        self.renders = 0
        self._max_renders: int | None = None
        self._done = asyncio.Event()
        self.aggregator = SnapshotAggregator(client, interval, on_snapshot=self.render)

    def _get_uptime(self) -> float | None:
        """Get seconds since monitoring started."""
        if self._start_time is None:
            return None
        return time.time() - self._start_time

    def render(self, snapshot: Snapshot) -> None:
        """Print the status header and tables for a snapshot."""
        uptime = self._get_uptime()
        uptime_str = f" (up {format_uptime(uptime)})" if uptime else ""
        self._console.print(
            f"\n[bold]Network Status - {time.strftime('%H:%M:%S')}"
            f"{uptime_str}[/bold]\n"
        )
        display_network_status(snapshot, self._console)
        self.renders += 1

        if self._max_renders is not None and self.renders >= self._max_renders:
            self._done.set()

    async def monitor(self, max_renders: int | None = None) -> int:
        """Poll and render until cancelled or max_renders is reached.

        Args:
            max_renders: Stop after this many snapshots (None: run forever)

        Returns:
            Number of snapshots rendered
        """
        self._start_time = time.time()
        self._console.print(
            f"[yellow]Polling every {self.aggregator.interval:g}s, "
            "Ctrl-C to stop...[/yellow]"
        )

        self._max_renders = max_renders
        self._done = asyncio.Event()

        async with self.aggregator:
            await self._done.wait()
        await self.aggregator.wait_idle()
        return self.renders

"""Network status polling for Nano nodes.

This package polls a node's RPC for block counts, peers and representative
weights, keeps a current Snapshot of them, and derives voting-power
statistics from it.

Usage (CLI):
    nano-status status
    nano-status monitor [--interval SECONDS]
    nano-status delegators ACCOUNT

Usage (Python):
    >>> from nano_status.netstatus import create_aggregator, summarize
    >>>
    >>> async def main():
    ...     async with create_aggregator() as aggregator:
    ...         await aggregator.wait_idle()
    ...         print(summarize(aggregator.snapshot))
"""

from __future__ import annotations

from nano_status.netstatus.aggregator import SnapshotAggregator
from nano_status.netstatus.config import ConfigBuilder, StatusConfig
from nano_status.netstatus.errors import FetchError, NetworkStatusError, ParseError
from nano_status.netstatus.metrics import (
    NetworkSummary,
    official_online_percent,
    official_percent,
    official_weight,
    online_weight,
    peer_versions,
    percent_represented,
    rebroadcast_count,
    rebroadcastable_reps,
    representative_count,
    summarize,
)
from nano_status.netstatus.protocols import MetricsClient
from nano_status.netstatus.rpc import NanoRPCClient
from nano_status.netstatus.snapshot import Snapshot, parse_weight

__all__ = [
    # Main classes
    "SnapshotAggregator",
    "Snapshot",
    "NetworkSummary",
    # Config
    "StatusConfig",
    "ConfigBuilder",
    # Protocols
    "MetricsClient",
    # Implementations
    "NanoRPCClient",
    # Errors
    "NetworkStatusError",
    "FetchError",
    "ParseError",
    # Derived metrics
    "online_weight",
    "official_weight",
    "rebroadcastable_reps",
    "percent_represented",
    "official_percent",
    "official_online_percent",
    "representative_count",
    "rebroadcast_count",
    "peer_versions",
    "summarize",
    "parse_weight",
    # Factory functions
    "create_aggregator",
]


def create_aggregator(
    config: StatusConfig | None = None,
    client: MetricsClient | None = None,
) -> SnapshotAggregator:
    """Factory function to create a SnapshotAggregator with sensible defaults.

    Args:
        config: Dashboard configuration (default: StatusConfig())
        client: Metrics client (default: NanoRPCClient built from config)

    Returns:
        Configured, not yet started SnapshotAggregator
    """
    if config is None:
        config = StatusConfig()

    if client is None:
        client = NanoRPCClient(
            url=config.rpc_url,
            timeout=config.timeout,
            official_accounts=config.official_representatives,
        )

    return SnapshotAggregator(client, interval=config.poll_interval)

"""Protocol definitions for network status components.

These protocols define the interfaces the aggregator depends on, so that
the node client can be swapped for a fake in tests or for another
transport.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsClient(Protocol):
    """Protocol for the four network metric queries.

    Every method raises FetchError on network or protocol failure.

    Implementations:
        - NanoRPCClient: HTTP JSON RPC client using requests
    """

    async def block_count_by_type(self) -> dict[str, int]:
        """Get block counts keyed by block type.

        Returns:
            Dict mapping block type (e.g. "send", "state") to count
        """
        ...

    async def peers(self) -> dict[str, str]:
        """Get the node's peers.

        Returns:
            Dict mapping peer address to protocol version
        """
        ...

    async def representatives_online(self) -> dict[str, str]:
        """Get online representatives and their voting weight.

        Returns:
            Dict mapping account address to weight in NANO, as text
        """
        ...

    async def official_representatives(self) -> dict[str, str]:
        """Get official representatives and their voting weight.

        Returns:
            Dict mapping account address to weight in NANO, as text
        """
        ...

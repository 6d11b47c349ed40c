"""RPC client for querying a Nano node.

This module provides an HTTP JSON RPC client using the requests library.
Blocking calls are run in worker threads so the async accessors never
block the event loop.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any

import requests

from nano_status.consts import DEFAULT_RPC_URL, DEFAULT_TIMEOUT, RAW_PER_NANO
from nano_status.netstatus.errors import FetchError, ParseError
from nano_status.utils.logging import make_logger

logger = make_logger(__name__)


def raw_to_nano(raw: str | int) -> str:
    """Convert a raw amount to NANO, as text.

    Args:
        raw: Amount in raw (1 NANO = 10^30 raw)

    Returns:
        The amount in NANO without exponent notation, e.g. "13324.8289"

    Raises:
        ParseError: If the raw amount is not a non-negative integer
    """
    try:
        value = Decimal(str(raw))
    except InvalidOperation as e:
        raise ParseError(f"Invalid raw amount: {raw!r}") from e
    if not value.is_finite() or value != value.to_integral_value() or value < 0:
        raise ParseError(f"Invalid raw amount: {raw!r}")
    # Raw balances exceed the default 28-digit precision
    with localcontext() as ctx:
        ctx.prec = 64
        nano = value / RAW_PER_NANO
    text = format(nano, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def convert_amounts(amounts: dict[str, Any], action: str) -> dict[str, str]:
    """Convert account -> raw amounts to NANO, dropping malformed records.

    A None amount marks a record the node sent without an amount.

    Args:
        amounts: Mapping of account to raw amount
        action: RPC action the amounts came from, used in log messages

    Returns:
        Dict mapping account -> amount in NANO, as text
    """
    converted: dict[str, str] = {}
    for account, raw in amounts.items():
        if raw is None:
            logger.warning(f"Dropping {action} record for {account}: no amount")
            continue
        try:
            converted[account] = raw_to_nano(raw)
        except ParseError as e:
            logger.warning(f"Dropping {action} record for {account}: {e}")
    return converted


class NanoRPCClient:
    """HTTP RPC client for a Nano node using the requests library.

    Attributes:
        url: URL of the node's RPC endpoint
        timeout: Request timeout in seconds
        official_accounts: Accounts treated as official representatives
    """

    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        timeout: float = DEFAULT_TIMEOUT,
        official_accounts: tuple[str, ...] | list[str] = (),
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the RPC client.

        Args:
            url: URL of the node's RPC endpoint
            timeout: Request timeout in seconds
            official_accounts: Accounts treated as official representatives
            session: Optional requests session (a new one is created if None)
        """
        self.url = url
        self.timeout = timeout
        self.official_accounts = tuple(official_accounts)
        self._session = session or requests.Session()

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> NanoRPCClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _call(self, action: str, **params: Any) -> dict[str, Any]:
        """Make an RPC call to the node.

        Args:
            action: RPC action name
            **params: Extra fields for the request body

        Returns:
            The decoded response dict

        Raises:
            FetchError: On timeout, connection failure, HTTP error status,
                invalid JSON, or an "error" field in the response
        """
        payload = {"action": action, **params}
        logger.debug(f"RPC {action} -> {self.url}")

        try:
            response = self._session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            logger.debug(f"RPC timeout for {action}")
            raise FetchError(f"Timeout calling {action}", action) from e
        except requests.exceptions.ConnectionError as e:
            logger.debug(f"Connection error for {action}: {e}")
            raise FetchError(f"Connection error calling {action}: {e}", action) from e
        except requests.exceptions.JSONDecodeError as e:
            logger.warning(f"Invalid JSON response for {action}: {e}")
            raise FetchError(f"Invalid JSON response for {action}", action) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"RPC error for {action}: {e}")
            raise FetchError(f"RPC error calling {action}: {e}", action) from e
        except ValueError as e:
            logger.warning(f"Invalid JSON response for {action}: {e}")
            raise FetchError(f"Invalid JSON response for {action}", action) from e

        if not isinstance(data, dict):
            raise FetchError(f"Unexpected response for {action}: {data!r}", action)
        if "error" in data:
            raise FetchError(f"Node returned error for {action}: {data['error']}", action)
        return data

    def get_block_count_by_type(self) -> dict[str, int]:
        """Get block counts by type (blocking).

        Returns:
            Dict mapping block type -> count
        """
        result = self._call("block_count_type")
        try:
            return {block_type: int(count) for block_type, count in result.items()}
        except (TypeError, ValueError) as e:
            raise FetchError(
                f"Malformed block_count_type response: {e}", "block_count_type"
            ) from e

    def get_peers(self) -> dict[str, str]:
        """Get peer list (blocking).

        Handles both the plain form (address -> version) and the
        peer_details form (address -> {"protocol_version": ...}).

        Returns:
            Dict mapping peer address -> protocol version
        """
        result = self._call("peers")
        peers = result.get("peers", {})
        # Nodes with no peers return an empty string
        if peers == "":
            return {}
        if not isinstance(peers, dict):
            raise FetchError(f"Malformed peers response: {peers!r}", "peers")

        versions: dict[str, str] = {}
        for address, info in peers.items():
            if isinstance(info, dict):
                versions[address] = str(info.get("protocol_version", "unknown"))
            else:
                versions[address] = str(info)
        return versions

    def get_representatives_online(self) -> dict[str, str]:
        """Get online representatives with their weight in NANO (blocking).

        Returns:
            Dict mapping account -> weight in NANO, as text
        """
        result = self._call("representatives_online", weight="true")
        reps = result.get("representatives", {})
        if reps == "":
            return {}
        if not isinstance(reps, dict):
            raise FetchError(
                f"Malformed representatives_online response: {reps!r}",
                "representatives_online",
            )

        raw_weights = {
            account: info.get("weight") if isinstance(info, dict) else info
            for account, info in reps.items()
        }
        return convert_amounts(raw_weights, "representatives_online")

    def get_official_representatives(self) -> dict[str, str]:
        """Get weights of the configured official representatives (blocking).

        Official accounts the node does not know about are omitted.

        Returns:
            Dict mapping account -> weight in NANO, as text
        """
        if not self.official_accounts:
            return {}

        result = self._call("representatives")
        reps = result.get("representatives", {})
        if reps == "":
            return {}
        if not isinstance(reps, dict):
            raise FetchError(
                f"Malformed representatives response: {reps!r}", "representatives"
            )

        official = {
            account: reps[account] for account in self.official_accounts if account in reps
        }
        return convert_amounts(official, "representatives")

    def get_delegators(self, account: str) -> dict[str, str]:
        """Get accounts delegating to a representative (blocking).

        Args:
            account: Representative account address

        Returns:
            Dict mapping delegator account -> balance in NANO, as text
        """
        result = self._call("delegators", account=account)
        delegators = result.get("delegators", {})
        if delegators == "":
            return {}
        if not isinstance(delegators, dict):
            raise FetchError(
                f"Malformed delegators response: {delegators!r}", "delegators"
            )
        return convert_amounts(delegators, "delegators")

    async def block_count_by_type(self) -> dict[str, int]:
        return await asyncio.to_thread(self.get_block_count_by_type)

    async def peers(self) -> dict[str, str]:
        return await asyncio.to_thread(self.get_peers)

    async def representatives_online(self) -> dict[str, str]:
        return await asyncio.to_thread(self.get_representatives_online)

    async def official_representatives(self) -> dict[str, str]:
        return await asyncio.to_thread(self.get_official_representatives)

    async def delegators(self, account: str) -> dict[str, str]:
        return await asyncio.to_thread(self.get_delegators, account)

"""Immutable snapshot of network metrics from one poll cycle.

A Snapshot is only ever built from the complete results of all four
metric queries; see SnapshotAggregator for how it is published.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType

from nano_status.netstatus.errors import ParseError
from nano_status.utils.logging import make_logger

logger = make_logger(__name__)


def parse_weight(amount: str | int | float | Decimal) -> Decimal:
    """Parse a textual NANO amount into a Decimal.

    Args:
        amount: Amount as text (e.g. "13324.8289") or a number

    Returns:
        The amount as a Decimal

    Raises:
        ParseError: If the amount is malformed, not finite, or negative
    """
    if isinstance(amount, bool):
        raise ParseError(f"Invalid weight amount: {amount!r}")
    try:
        value = Decimal(amount.strip() if isinstance(amount, str) else str(amount))
    except (InvalidOperation, ValueError) as e:
        raise ParseError(f"Invalid weight amount: {amount!r}") from e

    if not value.is_finite():
        raise ParseError(f"Weight amount is not finite: {amount!r}")
    if value < 0:
        raise ParseError(f"Weight amount is negative: {amount!r}")
    return value


def parse_weights(weights: Mapping[str, str], source: str) -> dict[str, Decimal]:
    """Parse a mapping of account -> amount text, dropping malformed records.

    Args:
        weights: Mapping of account address to amount text
        source: Name of the mapping, used in log messages

    Returns:
        Dict of account address to Decimal weight
    """
    parsed: dict[str, Decimal] = {}
    for account, amount in weights.items():
        try:
            parsed[account] = parse_weight(amount)
        except ParseError as e:
            logger.warning(f"Dropping {source} record for {account}: {e}")
    return parsed


@dataclass(frozen=True)
class Snapshot:
    """Network metrics captured by a single poll cycle.

    Attributes:
        blocks_by_type: Block type -> block count
        peers: Peer address -> protocol version
        representatives_online: Account -> online voting weight (NANO)
        official_representatives: Account -> voting weight (NANO)
        fetched_at: Unix timestamp when the snapshot was assembled
    """

    blocks_by_type: Mapping[str, int] = field(default_factory=dict)
    peers: Mapping[str, str] = field(default_factory=dict)
    representatives_online: Mapping[str, Decimal] = field(default_factory=dict)
    official_representatives: Mapping[str, Decimal] = field(default_factory=dict)
    fetched_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        # Copy into read-only views so callers can't mutate a published snapshot
        for name in (
            "blocks_by_type",
            "peers",
            "representatives_online",
            "official_representatives",
        ):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @classmethod
    def from_results(
        cls,
        blocks_by_type: Mapping[str, int],
        peers: Mapping[str, str],
        representatives_online: Mapping[str, str],
        official_representatives: Mapping[str, str],
    ) -> Snapshot:
        """Build a snapshot from raw MetricsClient results.

        Weight amounts arrive as text and are parsed here; malformed
        records are dropped and logged.
        """
        return cls(
            blocks_by_type=blocks_by_type,
            peers=peers,
            representatives_online=parse_weights(
                representatives_online, "representatives_online"
            ),
            official_representatives=parse_weights(
                official_representatives, "official_representatives"
            ),
        )

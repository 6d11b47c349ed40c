"""Derived network metrics.

Pure functions over a Snapshot: weighted sums, percentages of supply and
the rebroadcast-eligible subset of online representatives. Nothing here
performs I/O.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from nano_status.consts import MAX_SUPPLY, REBROADCASTABLE_THRESHOLD
from nano_status.netstatus.snapshot import Snapshot

TWO_PLACES = Decimal("0.01")


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    """Return part/whole as a percentage rounded half-up to 2 places."""
    return (part / whole * 100).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def online_weight(snapshot: Snapshot) -> Decimal:
    """Total voting weight of all online representatives."""
    return sum(snapshot.representatives_online.values(), Decimal(0))


def official_weight(snapshot: Snapshot) -> Decimal:
    """Total voting weight delegated to official representatives."""
    return sum(snapshot.official_representatives.values(), Decimal(0))


def rebroadcastable_reps(snapshot: Snapshot) -> dict[str, Decimal]:
    """Online representatives with weight >= REBROADCASTABLE_THRESHOLD."""
    return {
        account: weight
        for account, weight in snapshot.representatives_online.items()
        if weight >= REBROADCASTABLE_THRESHOLD
    }


def percent_represented(snapshot: Snapshot) -> Decimal:
    """Online voting weight as a percentage of MAX_SUPPLY."""
    return _percent(online_weight(snapshot), MAX_SUPPLY)


def official_percent(snapshot: Snapshot) -> Decimal:
    """Official voting weight as a percentage of MAX_SUPPLY."""
    return _percent(official_weight(snapshot), MAX_SUPPLY)


def official_online_percent(snapshot: Snapshot) -> Decimal | None:
    """Official voting weight as a percentage of online voting weight.

    Returns:
        The percentage, or None when no weight is online
    """
    online = online_weight(snapshot)
    if online == 0:
        return None
    return _percent(official_weight(snapshot), online)


def representative_count(snapshot: Snapshot) -> int:
    """Number of online representatives."""
    return len(snapshot.representatives_online)


def rebroadcast_count(snapshot: Snapshot) -> int:
    """Number of rebroadcast-eligible representatives."""
    return len(rebroadcastable_reps(snapshot))


def peer_versions(snapshot: Snapshot) -> list[tuple[str, int]]:
    """Count peers per protocol version, most common first.

    Ties are ordered by version, newest first.
    """
    counts = Counter(snapshot.peers.values())
    return sorted(counts.items(), key=lambda x: (-x[1], _version_key(x[0])))


def _version_key(version: str) -> tuple[int, int | str]:
    if version.isdigit():
        return (0, -int(version))
    return (1, version)


@dataclass(frozen=True)
class NetworkSummary:
    """All derived metrics for one snapshot, computed once for display."""

    representative_count: int
    rebroadcast_count: int
    online_weight: Decimal
    percent_represented: Decimal
    official_weight: Decimal
    official_percent: Decimal
    official_online_percent: Decimal | None
    peer_count: int
    peer_versions: list[tuple[str, int]]
    total_blocks: int


def summarize(snapshot: Snapshot) -> NetworkSummary:
    """Compute every derived metric for a snapshot."""
    return NetworkSummary(
        representative_count=representative_count(snapshot),
        rebroadcast_count=rebroadcast_count(snapshot),
        online_weight=online_weight(snapshot),
        percent_represented=percent_represented(snapshot),
        official_weight=official_weight(snapshot),
        official_percent=official_percent(snapshot),
        official_online_percent=official_online_percent(snapshot),
        peer_count=len(snapshot.peers),
        peer_versions=peer_versions(snapshot),
        total_blocks=sum(snapshot.blocks_by_type.values()),
    )

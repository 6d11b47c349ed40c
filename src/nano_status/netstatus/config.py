"""Configuration dataclass and builder for the network status dashboard.

This module provides:
- StatusConfig: RPC endpoint, timeouts, poll interval and official reps
- ConfigBuilder: Fluent builder for creating a StatusConfig
"""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlparse

from nano_status.consts import DEFAULT_RPC_URL, DEFAULT_TIMEOUT, POLL_INTERVAL


@dataclass(frozen=True)
class StatusConfig:
    """Immutable dashboard configuration.

    Attributes:
        rpc_url: URL of the node's JSON RPC endpoint
        timeout: Per-request timeout in seconds
        poll_interval: Delay between the end of one poll and the next (seconds)
        official_representatives: Accounts treated as official representatives
    """

    rpc_url: str = DEFAULT_RPC_URL
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = POLL_INTERVAL
    official_representatives: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        parsed = urlparse(self.rpc_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid RPC URL: {self.rpc_url}")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(
                f"Poll interval must be positive, got {self.poll_interval}"
            )


class ConfigBuilder:
    """Fluent builder for StatusConfig.

    Example:
        >>> config = (
        ...     ConfigBuilder()
        ...     .rpc_url("http://node.example:7076")
        ...     .official_representatives(["nano_1abc...", "nano_3def..."])
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._rpc_url: str = DEFAULT_RPC_URL
        self._timeout: float = DEFAULT_TIMEOUT
        self._poll_interval: float = POLL_INTERVAL
        self._official: list[str] = []

    @classmethod
    def from_config(cls, config: StatusConfig) -> ConfigBuilder:
        """Start a builder from an existing config, e.g. to override one value."""
        return (
            cls()
            .rpc_url(config.rpc_url)
            .timeout(config.timeout)
            .poll_interval(config.poll_interval)
            .official_representatives(config.official_representatives)
        )

    def rpc_url(self, url: str | None) -> ConfigBuilder:
        """Set the RPC URL. Keeps the default if None."""
        if url:
            self._rpc_url = url
        return self

    def timeout(self, seconds: float | None) -> ConfigBuilder:
        """Set the per-request timeout."""
        if seconds is not None:
            self._timeout = seconds
        return self

    def poll_interval(self, seconds: float | None) -> ConfigBuilder:
        """Set the delay between poll cycles."""
        if seconds is not None:
            self._poll_interval = seconds
        return self

    def official_representatives(self, accounts: list[str] | tuple[str, ...]) -> ConfigBuilder:
        """Add official representative accounts (duplicates are ignored)."""
        for account in accounts:
            account = account.strip()
            if account and account not in self._official:
                self._official.append(account)
        return self

    def build(self) -> StatusConfig:
        """Build the immutable config.

        Raises:
            ValueError: If any value is invalid
        """
        return StatusConfig(
            rpc_url=self._rpc_url,
            timeout=self._timeout,
            poll_interval=self._poll_interval,
            official_representatives=tuple(self._official),
        )

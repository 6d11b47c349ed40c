"""Exceptions raised while fetching and parsing network metrics."""

from __future__ import annotations


class NetworkStatusError(Exception):
    """Base class for network status errors."""


class FetchError(NetworkStatusError):
    """A node RPC query failed (network, timeout or malformed response).

    Attributes:
        action: The RPC action that failed, if known
    """

    def __init__(self, message: str, action: str | None = None) -> None:
        super().__init__(message)
        self.action = action


class ParseError(NetworkStatusError, ValueError):
    """A weight amount could not be parsed into a non-negative decimal."""

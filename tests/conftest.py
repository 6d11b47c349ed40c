"""Shared pytest fixtures for network status testing."""

from __future__ import annotations

import asyncio

import pytest

from nano_status.netstatus.snapshot import Snapshot


class FakeMetricsClient:
    """In-memory MetricsClient.

    Each accessor returns a copy of the configured mapping. Set
    ``failures[name]`` to make an accessor raise, ``gate`` to hold every
    fetch until the event is set, or ``delay`` to make fetches take time.
    """

    def __init__(
        self,
        blocks: dict[str, int] | None = None,
        peers: dict[str, str] | None = None,
        online: dict[str, str] | None = None,
        official: dict[str, str] | None = None,
    ) -> None:
        self.blocks = blocks if blocks is not None else {"send": 10, "state": 90}
        self.peer_map = peers if peers is not None else {"[::1]:7075": "18"}
        self.online = online if online is not None else {"A": "10000", "B": "20000"}
        self.official = official if official is not None else {"A": "15000"}
        self.delegator_map: dict[str, str] = {}
        self.failures: dict[str, BaseException] = {}
        self.gate: asyncio.Event | None = None
        self.delay = 0.0
        self.cycles = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def _respond(self, name: str, value: dict) -> dict:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            await asyncio.sleep(self.delay)
            if name in self.failures:
                raise self.failures[name]
            return dict(value)
        finally:
            self.in_flight -= 1

    async def block_count_by_type(self) -> dict[str, int]:
        self.cycles += 1
        return await self._respond("block_count_by_type", self.blocks)

    async def peers(self) -> dict[str, str]:
        return await self._respond("peers", self.peer_map)

    async def representatives_online(self) -> dict[str, str]:
        return await self._respond("representatives_online", self.online)

    async def official_representatives(self) -> dict[str, str]:
        return await self._respond("official_representatives", self.official)

    def get_delegators(self, account: str) -> dict[str, str]:
        if "delegators" in self.failures:
            raise self.failures["delegators"]
        return dict(self.delegator_map)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> FakeMetricsClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


@pytest.fixture
def fake_client() -> FakeMetricsClient:
    """Fake client returning the two-representative example network."""
    return FakeMetricsClient()


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """Snapshot with two online reps and one official rep."""
    return Snapshot.from_results(
        blocks_by_type={"send": 10, "receive": 5, "state": 90},
        peers={
            "[::ffff:10.0.0.1]:7075": "18",
            "[::ffff:10.0.0.2]:7075": "18",
            "[::ffff:10.0.0.3]:7075": "17",
        },
        representatives_online={"A": "10000", "B": "20000"},
        official_representatives={"A": "15000"},
    )

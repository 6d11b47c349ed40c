"""Periodic snapshot polling.

SnapshotAggregator owns the poll loop: it queries all four metric sources
concurrently, publishes one complete Snapshot per successful cycle, and
schedules the next cycle a fixed delay after the current one finishes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING

from nano_status.consts import POLL_INTERVAL
from nano_status.netstatus.errors import FetchError
from nano_status.netstatus.snapshot import Snapshot
from nano_status.utils.logging import make_logger

if TYPE_CHECKING:
    from nano_status.netstatus.protocols import MetricsClient

logger = make_logger(__name__)

SnapshotListener = Callable[[Snapshot], None]


class SnapshotAggregator:
    """Keeps a single current Snapshot fresh by polling a MetricsClient.

    At most one poll cycle is in flight at a time. The next cycle is
    scheduled only after the current one has finished (published or
    failed), so cadence is interval + fetch latency rather than a fixed
    grid.

    Attributes:
        client: Source of the four metric queries
        interval: Delay in seconds between the end of a cycle and the next
    """

    def __init__(
        self,
        client: MetricsClient,
        interval: float = POLL_INTERVAL,
        on_snapshot: SnapshotListener | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            client: Source of the four metric queries
            interval: Delay in seconds between cycles
            on_snapshot: Optional listener called with each published snapshot
        """
        self.client = client
        self.interval = interval
        self._snapshot: Snapshot | None = None
        self._listeners: list[SnapshotListener] = []
        self._running = False
        self._timer: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None

        if on_snapshot is not None:
            self.add_listener(on_snapshot)

    @property
    def snapshot(self) -> Snapshot | None:
        """The most recently published snapshot, or None before the first."""
        return self._snapshot

    @property
    def running(self) -> bool:
        """True between start() and stop()."""
        return self._running

    def add_listener(self, listener: SnapshotListener) -> None:
        """Register a callback for every published snapshot."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        """Unregister a callback. Unknown callbacks are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def next_poll_in(self) -> float | None:
        """Seconds until the scheduled poll fires, or None if none is pending.

        Safe to call from outside the event loop.
        """
        timer, loop = self._timer, self._loop
        if timer is None or loop is None or timer.cancelled():
            return None
        return max(0.0, timer.when() - loop.time())

    def start(self) -> None:
        """Start polling: poll immediately, then keep rescheduling.

        Must be called from a running event loop. Does nothing if
        already running.
        """
        if self._running:
            logger.debug("Aggregator already running")
            return
        self._running = True
        logger.info(f"Starting snapshot polling (interval {self.interval}s)")

        # A cycle left over from before stop() reschedules itself when done
        if self._task is not None and not self._task.done():
            return
        self._launch_cycle()

    def stop(self) -> None:
        """Stop polling.

        Cancels the pending poll, if any. A cycle that is already in
        flight is allowed to finish and publish, but will not schedule
        another. Safe to call repeatedly.
        """
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._running:
            logger.info("Stopped snapshot polling")
        self._running = False

    async def wait_idle(self) -> None:
        """Wait for an in-flight poll cycle, if any, to finish."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.shield(task)

    async def __aenter__(self) -> SnapshotAggregator:
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    async def poll_once(self) -> Snapshot | None:
        """Run one fetch/assemble/publish cycle without scheduling another.

        Returns:
            The published snapshot, or None if any query failed
        """
        try:
            snapshot = await self._fetch_snapshot()
        except FetchError as e:
            logger.warning(f"Poll failed, keeping previous snapshot: {e}")
            return None
        self._publish(snapshot)
        return snapshot

    async def _fetch_snapshot(self) -> Snapshot:
        """Query all four sources concurrently and build a Snapshot.

        All four queries settle before this returns or raises, so no
        query from this cycle is left running.

        Raises:
            FetchError: If any of the queries failed
        """
        results = await asyncio.gather(
            self.client.block_count_by_type(),
            self.client.peers(),
            self.client.representatives_online(),
            self.client.official_representatives(),
            return_exceptions=True,
        )

        # A query cancelled inside the client counts as a failed fetch
        for result in results:
            if isinstance(result, FetchError):
                raise result
            if isinstance(result, BaseException):
                raise FetchError(f"Unexpected error fetching metrics: {result!r}") from result

        blocks_by_type, peers, reps_online, official_reps = results
        return Snapshot.from_results(
            blocks_by_type=blocks_by_type,
            peers=peers,
            representatives_online=reps_online,
            official_representatives=official_reps,
        )

    def _publish(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        logger.debug(
            f"Published snapshot: {len(snapshot.representatives_online)} reps online, "
            f"{len(snapshot.peers)} peers"
        )
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Snapshot listener {listener!r} failed")

    def _launch_cycle(self) -> None:
        self._timer = None
        if not self._running:
            return
        self._task = asyncio.get_running_loop().create_task(self._cycle())

    async def _cycle(self) -> None:
        try:
            await self.poll_once()
        except Exception:
            logger.exception("Unexpected error during poll cycle")

        if self._running:
            self._loop = asyncio.get_running_loop()
            self._timer = self._loop.call_later(self.interval, self._launch_cycle)

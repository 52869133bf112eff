"""Reachability watcher - single source of truth for network availability."""

import asyncio
import logging
from typing import List, Optional

from .probes.base import ReachabilityProbe

logger = logging.getLogger(__name__)

_END = object()


class ChangeSubscription:
    """An independent cursor over the watcher's status broadcasts.

    Receives every status broadcast after it was created. Iterate it with
    ``async for``; iteration ends when the subscription is closed or the
    watcher stops.
    """

    def __init__(self, watcher: "ReachabilityWatcher", distinct: bool = False):
        self._watcher = watcher
        self.distinct = distinct
        self._queue: asyncio.Queue = asyncio.Queue()
        self._last: Optional[bool] = None
        self._closed = False

    def _deliver(self, available: bool) -> None:
        if self._closed:
            return
        if self.distinct and available == self._last:
            return
        self._last = available
        self._queue.put_nowait(available)

    def _end(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_END)

    def close(self) -> None:
        """Stop receiving broadcasts. Values already queued are still yielded."""
        self._watcher._unsubscribe(self)
        self._end()

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "ChangeSubscription":
        return self

    async def __anext__(self) -> bool:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            raise StopAsyncIteration
        return item

    async def __aenter__(self) -> "ChangeSubscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


class ReachabilityWatcher:
    """Tracks last-known reachability and broadcasts every probe update.

    All state lives on the event loop the watcher was started on. Probe
    callbacks arrive on the probe's own thread and are marshalled onto that
    loop, so a probe update and an initial-status timeout never race.

    Every probe callback is re-broadcast, including repeats of the current
    value. Subscribers that only want transitions pass ``distinct=True``.
    """

    def __init__(self, probe: ReachabilityProbe):
        """Initialize the watcher.

        Args:
            probe: Path probe supplying status updates.
        """
        self.probe = probe

        # Optimistic until the first reading, so no false "offline" at startup
        self._available = True
        self._has_initial_reading = False
        self._initial_waiters: List[asyncio.Future] = []
        self._subscriptions: List[ChangeSubscription] = []

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._stopped = False

    @property
    def has_initial_reading(self) -> bool:
        return self._has_initial_reading

    def current_status(self) -> bool:
        """Return the last known reachability without waiting."""
        return self._available

    async def start(self) -> None:
        """Bind to the running event loop and start the probe."""
        if self._loop is not None:
            logger.warning("ReachabilityWatcher already started")
            return

        self._loop = asyncio.get_running_loop()
        self.probe.start(self._on_probe_callback)
        logger.info(f"Started reachability watcher ({type(self.probe).__name__})")

    def _on_probe_callback(self, available: bool) -> None:
        # Runs on the probe thread
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("Dropping probe update: watcher loop not running")
            return
        loop.call_soon_threadsafe(self._on_probe_change, available)

    def _on_probe_change(self, available: bool) -> None:
        if self._stopped:
            return
        self._record(available, source="probe")

    def _record(self, available: bool, source: str) -> None:
        """Store a reading, release initial waiters and broadcast it."""
        if available != self._available or not self._has_initial_reading:
            logger.info(
                f"Network status updated ({source}) - available: {available}"
            )
        else:
            logger.debug(f"Network status unchanged ({source}) - available: {available}")

        self._available = available
        self._has_initial_reading = True

        self._resolve_waiters(available)
        self._broadcast(available)

    def _resolve_waiters(self, available: bool) -> None:
        waiters, self._initial_waiters = self._initial_waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(available)

    def _broadcast(self, available: bool) -> None:
        for subscription in list(self._subscriptions):
            subscription._deliver(available)

    async def await_initial_status(self, timeout: Optional[float] = 10.0) -> bool:
        """Return the first definite reachability reading.

        Returns immediately once a reading exists, or when the probe can
        answer synchronously. Otherwise waits for the first probe update, for
        at most ``timeout`` seconds, then falls back to the last known value.

        Args:
            timeout: Maximum seconds to wait for the first reading.

        Returns:
            True if the network is reachable.
        """
        if self._has_initial_reading:
            logger.debug(
                f"Already received initial status - available: {self._available}"
            )
            return self._available

        # Nothing resolves waiters once stopped
        if self._stopped:
            return self._available

        status = self.probe.current_status_sync()
        if status is not None:
            self._record(status.available, source="current path")
            return self._available

        waiter = asyncio.get_running_loop().create_future()
        self._initial_waiters.append(waiter)
        logger.info("Waiting for initial network status")

        try:
            done, _ = await asyncio.wait({waiter}, timeout=timeout)
        finally:
            if waiter in self._initial_waiters:
                self._initial_waiters.remove(waiter)

        if waiter in done:
            return waiter.result()

        waiter.cancel()
        logger.warning(
            f"Timeout waiting for initial network status after {timeout}s, "
            f"returning current status: {self._available}"
        )
        return self._available

    def subscribe_to_changes(self, distinct: bool = False) -> ChangeSubscription:
        """Subscribe to status broadcasts from now on.

        Args:
            distinct: Skip values equal to the last one this subscriber got.

        Returns:
            An async iterator of availability values.
        """
        subscription = ChangeSubscription(self, distinct=distinct)
        if self._stopped:
            subscription._end()
        else:
            self._subscriptions.append(subscription)
        return subscription

    def _unsubscribe(self, subscription: ChangeSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def stop(self) -> None:
        """Stop the probe, release pending waiters and end all subscriptions."""
        if self._stopped:
            return
        self._stopped = True

        await asyncio.to_thread(self.probe.stop)

        if self._initial_waiters:
            logger.info(
                f"Releasing {len(self._initial_waiters)} initial status waiter(s) "
                f"with available: {self._available}"
            )
        self._resolve_waiters(self._available)

        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription._end()

        logger.info("Stopped reachability watcher")

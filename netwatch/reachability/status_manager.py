"""Display-facing network status, kept current from the watcher."""

import asyncio
import logging
from typing import Callable, List, Optional

from .watcher import ChangeSubscription, ReachabilityWatcher

logger = logging.getLogger(__name__)


class NetworkStatusManager:
    """Holds the ``is_network_available`` flag that display code reads."""

    def __init__(
        self,
        watcher: ReachabilityWatcher,
        initial_status_timeout: float = 10.0,
    ):
        """Initialize the status manager.

        Args:
            watcher: Reachability watcher to follow.
            initial_status_timeout: Seconds to wait for the first reading.
        """
        self.watcher = watcher
        self.initial_status_timeout = initial_status_timeout
        self.is_network_available = watcher.current_status()

        self._listeners: List[Callable[[bool], None]] = []
        self._subscription: Optional[ChangeSubscription] = None
        self._follow_task: Optional[asyncio.Task] = None
        self._seen_change = False

    def add_listener(self, listener: Callable[[bool], None]) -> None:
        """Call listener with every status applied to is_network_available."""
        self._listeners.append(listener)

    def _apply(self, available: bool) -> None:
        self.is_network_available = available
        for listener in self._listeners:
            try:
                listener(available)
            except Exception as e:
                logger.error(f"Network status listener failed: {e}")

    async def _follow_changes(self, subscription: ChangeSubscription) -> None:
        async for available in subscription:
            logger.info(f"Network status changed - isNetworkAvailable: {available}")
            self._seen_change = True
            self._apply(available)

    async def start(self) -> bool:
        """Gate on the initial status, then follow changes in the background.

        Returns:
            The initial network status.
        """
        # Subscribe before waiting so no update between the two is lost
        self._subscription = self.watcher.subscribe_to_changes()
        self._follow_task = asyncio.create_task(
            self._follow_changes(self._subscription)
        )

        initial = await self.watcher.await_initial_status(self.initial_status_timeout)
        # A change the stream already delivered is newer than the initial value
        if not self._seen_change:
            self._apply(initial)
        logger.info(f"Initial network status - isNetworkAvailable: {initial}")
        return initial

    async def stop(self) -> None:
        """Stop following the watcher."""
        if self._subscription:
            self._subscription.close()
            self._subscription = None

        if self._follow_task:
            try:
                await self._follow_task
            except asyncio.CancelledError:
                pass
            self._follow_task = None

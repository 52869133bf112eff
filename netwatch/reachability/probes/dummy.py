import logging
from typing import Callable, Optional

from .base import PathStatus, ReachabilityProbe

logger = logging.getLogger(__name__)


class DummyProbe(ReachabilityProbe):
    def __init__(self, initial_status: Optional[PathStatus] = None):
        """
        initial_status is what current_status_sync() sees before anything is
        pushed. None (or REQUIRES_CONNECTION) models a path that is still
        settling, so callers have to wait for the first push.
        """
        self.status = initial_status
        self.started = False
        self._on_change: Optional[Callable[[bool], None]] = None
        self.sync_reads = 0

    def start(self, on_change: Callable[[bool], None]) -> None:
        self._on_change = on_change
        self.started = True
        logger.info("Started dummy probe")

    def current_status_sync(self) -> Optional[PathStatus]:
        self.sync_reads += 1
        if self.status is None or not self.status.is_definite:
            return None
        return self.status

    def push(self, status: PathStatus) -> None:
        """Deliver a path update on the caller's thread."""
        self.status = status
        if self._on_change is not None:
            self._on_change(status.available)

    def stop(self) -> None:
        self.started = False

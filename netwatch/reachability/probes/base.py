"""Base class for reachability probes."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional


class PathStatus(Enum):
    """OS-level network path states."""
    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"
    REQUIRES_CONNECTION = "requires_connection"  # Link still settling

    @property
    def is_definite(self) -> bool:
        return self is not PathStatus.REQUIRES_CONNECTION

    @property
    def available(self) -> bool:
        return self is PathStatus.SATISFIED


class ReachabilityProbe(ABC):
    """Base class for all reachability probes.

    A probe reports every path update to a single callback, including updates
    that leave the availability boolean unchanged.
    """

    @abstractmethod
    def start(self, on_change: Callable[[bool], None]) -> None:
        """Begin monitoring and invoke on_change on every path update."""
        pass

    @abstractmethod
    def current_status_sync(self) -> Optional[PathStatus]:
        """Return the current path status if definite, else None."""
        pass

    def stop(self) -> None:
        """Stop monitoring. Probes without a background task need nothing."""
        pass

"""Path probes feeding the reachability watcher."""

from .base import PathStatus, ReachabilityProbe
from .linux import LinuxPathProbe
from .dummy import DummyProbe

__all__ = [
    "PathStatus",
    "ReachabilityProbe",
    "LinuxPathProbe",
    "DummyProbe",
]

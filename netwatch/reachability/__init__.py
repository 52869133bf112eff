"""Reachability Service - tracks whether the network is usable right now."""

__version__ = "0.1.0"

from .probes import PathStatus, ReachabilityProbe
from .service import ReachabilityService
from .status_manager import NetworkStatusManager
from .watcher import ChangeSubscription, ReachabilityWatcher


def main():
    """Entry point for reachability service."""
    from .config import load_config
    from netwatch.shared.logging import setup_logging

    config = load_config()
    setup_logging(config.log_level, log_file=config.log_file)

    service = ReachabilityService(config)
    service.run()


__all__ = [
    "ChangeSubscription",
    "NetworkStatusManager",
    "PathStatus",
    "ReachabilityProbe",
    "ReachabilityService",
    "ReachabilityWatcher",
    "main",
]

"""Linux path probe backed by procfs and sysfs."""

import logging
import threading
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Tuple

from .base import PathStatus, ReachabilityProbe

logger = logging.getLogger(__name__)

RTF_UP = 0x0001
RTF_REJECT = 0x0200
DEFAULT_DESTINATION = "00000000"
DEFAULT_DESTINATION_V6 = "0" * 32

# Operstates that can carry traffic. Virtual links (tun, wg) report "unknown".
USABLE_OPERSTATES = {"up", "unknown"}
# Operstates of a link that is still coming up
SETTLING_OPERSTATES = {"dormant", "lowerlayerdown"}

PathSnapshot = Tuple[PathStatus, FrozenSet[str]]


class LinuxPathProbe(ReachabilityProbe):
    """Polls the default routes and interface state to track the network path.

    A default route in either the IPv4 or the IPv6 table counts, so an
    IPv6-only network is reported as reachable.
    """

    def __init__(
        self,
        poll_interval: float = 2.0,
        proc_route_path: str = "/proc/net/route",
        sys_class_net: str = "/sys/class/net",
        proc_ipv6_route_path: str = "/proc/net/ipv6_route",
    ):
        """Initialize the probe.

        Args:
            poll_interval: Seconds between path polls.
            proc_route_path: Location of the kernel IPv4 routing table.
            sys_class_net: Directory holding per-interface sysfs entries.
            proc_ipv6_route_path: Location of the kernel IPv6 routing table.
        """
        self.poll_interval = poll_interval
        self.proc_route_path = Path(proc_route_path)
        self.proc_ipv6_route_path = Path(proc_ipv6_route_path)
        self.sys_class_net = Path(sys_class_net)

        self._on_change: Optional[Callable[[bool], None]] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._last_snapshot: Optional[PathSnapshot] = None

    def _default_route_interfaces(self) -> List[str]:
        """Return interfaces holding an active IPv4 default route."""
        interfaces = []
        with open(self.proc_route_path) as f:
            next(f, None)  # header
            for line in f:
                fields = line.split()
                if len(fields) < 4:
                    continue
                iface, destination, _gateway, flags = fields[:4]
                try:
                    is_up = int(flags, 16) & RTF_UP
                except ValueError:
                    continue
                if destination == DEFAULT_DESTINATION and is_up:
                    interfaces.append(iface)
        return interfaces

    def _default_route_interfaces_v6(self) -> List[str]:
        """Return interfaces holding an active IPv6 default route.

        The table has no header. Columns are destination, prefix length,
        source, source prefix length, next hop, metric, refcount, use,
        flags and interface.
        """
        interfaces = []
        with open(self.proc_ipv6_route_path) as f:
            for line in f:
                fields = line.split()
                if len(fields) < 10:
                    continue
                destination, prefix_len, flags, iface = fields[0], fields[1], fields[8], fields[9]
                try:
                    flags = int(flags, 16)
                except ValueError:
                    continue
                # Kernels without IPv6 routing install a reject default on lo
                if flags & RTF_REJECT or not flags & RTF_UP:
                    continue
                if destination == DEFAULT_DESTINATION_V6 and prefix_len == "00":
                    interfaces.append(iface)
        return interfaces

    def _operstate(self, iface: str) -> str:
        try:
            return (self.sys_class_net / iface / "operstate").read_text().strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read operstate for {iface}: {e}")
            return "down"

    def snapshot(self) -> PathSnapshot:
        """Read the current path status and the default-route interfaces."""
        try:
            interfaces = self._default_route_interfaces()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read routing table: {e}")
            interfaces = []

        try:
            interfaces += self._default_route_interfaces_v6()
        except (OSError, UnicodeDecodeError) as e:
            # Absent when IPv6 is disabled
            logger.debug(f"Could not read IPv6 routing table: {e}")

        states = {iface: self._operstate(iface) for iface in interfaces}
        usable = frozenset(i for i, s in states.items() if s in USABLE_OPERSTATES)

        if usable:
            return PathStatus.SATISFIED, usable
        if any(s in SETTLING_OPERSTATES for s in states.values()):
            return PathStatus.REQUIRES_CONNECTION, frozenset(states)
        return PathStatus.UNSATISFIED, frozenset()

    def current_status_sync(self) -> Optional[PathStatus]:
        status, _ = self.snapshot()
        return status if status.is_definite else None

    def poll(self) -> None:
        """Read one snapshot and report it if the path changed."""
        snapshot = self.snapshot()
        if snapshot == self._last_snapshot:
            return

        previous = self._last_snapshot
        self._last_snapshot = snapshot
        status, interfaces = snapshot
        logger.debug(
            f"Path update: {status.value} via {sorted(interfaces) or 'no interface'} "
            f"(was {previous[0].value if previous else 'unknown'})"
        )

        if self._on_change is None:
            return
        try:
            self._on_change(status.available)
        except Exception as e:
            logger.error(f"Path change callback failed: {e}")

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll()
            except Exception as e:
                logger.error(f"Error polling network path: {e}")
            self._stop_event.wait(self.poll_interval)

    def start(self, on_change: Callable[[bool], None]) -> None:
        if self._thread and self._thread.is_alive():
            logger.warning("LinuxPathProbe already started")
            return

        self._on_change = on_change
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="LinuxPathProbe",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            f"Started path probe (routes={self.proc_route_path}, "
            f"interval={self.poll_interval}s)"
        )

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=self.poll_interval + 1)
            self._thread = None

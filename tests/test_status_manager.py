import asyncio

import pytest

from netwatch.reachability.probes import DummyProbe, PathStatus
from netwatch.reachability.status_manager import NetworkStatusManager
from netwatch.reachability.watcher import ReachabilityWatcher

from .conftest import settle


@pytest.mark.asyncio
async def test_initial_status_from_current_path():
    watcher = ReachabilityWatcher(DummyProbe(initial_status=PathStatus.UNSATISFIED))
    await watcher.start()
    manager = NetworkStatusManager(watcher)

    assert manager.is_network_available is True
    assert await manager.start() is False
    assert manager.is_network_available is False

    await manager.stop()
    await watcher.stop()


@pytest.mark.asyncio
async def test_follows_changes_after_start(watcher, probe):
    manager = NetworkStatusManager(watcher, initial_status_timeout=0.05)
    seen = []
    manager.add_listener(seen.append)

    # Times out to the optimistic default
    assert await manager.start() is True

    probe.push(PathStatus.UNSATISFIED)
    await settle()
    assert manager.is_network_available is False

    probe.push(PathStatus.SATISFIED)
    await settle()
    assert manager.is_network_available is True

    await manager.stop()
    assert seen == [True, False, True]


@pytest.mark.asyncio
async def test_change_during_initial_wait_is_not_overwritten(watcher, probe):
    manager = NetworkStatusManager(watcher, initial_status_timeout=10.0)
    start = asyncio.create_task(manager.start())
    await settle()

    probe.push(PathStatus.UNSATISFIED)
    probe.push(PathStatus.SATISFIED)

    assert await asyncio.wait_for(start, 1.0) is False
    await settle()
    assert manager.is_network_available is True

    await manager.stop()


@pytest.mark.asyncio
async def test_listener_errors_are_contained(watcher, probe):
    manager = NetworkStatusManager(watcher, initial_status_timeout=0.01)

    def broken(available):
        raise RuntimeError("display gone")

    manager.add_listener(broken)
    await manager.start()

    probe.push(PathStatus.UNSATISFIED)
    await settle()

    assert manager.is_network_available is False
    await manager.stop()

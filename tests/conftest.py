"""Shared test fixtures."""
import asyncio

import pytest
import pytest_asyncio

from netwatch.reachability.probes import DummyProbe
from netwatch.reachability.watcher import ReachabilityWatcher


async def settle(rounds: int = 3):
    """Let callbacks scheduled with call_soon_threadsafe run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def next_value(subscription, timeout: float = 1.0):
    return await asyncio.wait_for(subscription.__anext__(), timeout)


@pytest.fixture
def probe():
    """A probe whose path is still settling."""
    return DummyProbe()


@pytest_asyncio.fixture
async def watcher(probe):
    watcher = ReachabilityWatcher(probe)
    await watcher.start()
    yield watcher
    await watcher.stop()

import asyncio

import pytest

from storefront_toolkit.notifications import RecordingNotifier
from storefront_toolkit.reactions import ReactionLedger
from storefront_toolkit.remote_store import InMemoryRemoteStore
from storefront_toolkit.session import InMemorySessionProvider, Session


class GatedRemoteStore(InMemoryRemoteStore):
    """Holds every write at a gate until the test opens it."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()
        self.waiting = 0

    async def _wait(self) -> None:
        self.waiting += 1
        await self.gate.wait()
        self.waiting -= 1

    async def insert(self, table, row):
        await self._wait()
        return await super().insert(table, row)

    async def delete(self, table, filters):
        await self._wait()
        return await super().delete(table, filters)


class ReadGatedRemoteStore(InMemoryRemoteStore):
    """Answers every select from the rows present when it was issued, then holds the answer at a gate."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()
        self.waiting = 0

    async def select(self, table, filters, order_by=None, descending=False, limit=None):
        result = await super().select(table, filters, order_by=order_by, descending=descending, limit=limit)
        self.waiting += 1
        await self.gate.wait()
        self.waiting -= 1
        return result


async def wait_at_gate(store, count: int = 1) -> None:
    for _ in range(100):
        if store.waiting >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {count} call(s) at the gate, saw {store.waiting}")


@pytest.fixture
def store():
    return InMemoryRemoteStore()


@pytest.fixture
def gated_store():
    return GatedRemoteStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def ledger(store, notifier):
    return ReactionLedger(store, notifier=notifier)


@pytest.fixture
def gated_ledger(gated_store, notifier):
    return ReactionLedger(gated_store, notifier=notifier)


@pytest.fixture
def sessions():
    return InMemorySessionProvider()


@pytest.fixture
def signed_in():
    return InMemorySessionProvider(Session.authenticated("U1", role="user"))


@pytest.fixture
def read_gated_store():
    return ReadGatedRemoteStore()


@pytest.fixture
def read_gated_ledger(read_gated_store, notifier):
    return ReactionLedger(read_gated_store, notifier=notifier)

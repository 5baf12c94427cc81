"""Shared fixtures: in-memory database, fake clock/scheduler/sink."""

from __future__ import annotations

import random

import pytest
import pytest_asyncio

from Libs import Database
from Public.WatchPayout.Libs import RewardPolicy, RoomPresence, SessionStore, WatchPayoutManager

T0 = 1_000_000.0


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class FakeHandle:
    def __init__(self, delay, callback, args, label):
        self.delay = delay
        self.callback = callback
        self.args = args
        self.label = label
        self.cancelled = False
        self.done = False

    def cancel(self) -> bool:
        if self.cancelled or self.done:
            return False
        self.cancelled = True
        return True


class FakeScheduler:
    """Records scheduled work; tests fire it explicitly instead of sleeping."""

    def __init__(self):
        self.handles: list[FakeHandle] = []

    def schedule(self, delay, callback, *args, label=""):
        handle = FakeHandle(delay, callback, args, label)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.done]

    async def fire(self, handle: FakeHandle) -> None:
        handle.done = True
        await handle.callback(*handle.args)

    async def run_next(self) -> FakeHandle | None:
        pending = self.pending
        if not pending:
            return None
        await self.fire(pending[0])
        return pending[0]

    def cancel_all(self) -> int:
        count = 0
        for handle in self.handles:
            if handle.cancel():
                count += 1
        return count


class RecordingSink:
    def __init__(self):
        self.credits: list[tuple[str, int]] = []
        self.failing: set[str] = set()
        self.raising: set[str] = set()

    async def credit(self, username: str, amount: int) -> bool:
        if username in self.raising:
            raise RuntimeError("ledger unavailable")
        if username in self.failing:
            return False
        self.credits.append((username, amount))
        return True

    def count(self, username: str) -> int:
        return sum(1 for name, _ in self.credits if name == username)


class FixedRandom(random.Random):
    def __init__(self, value: float):
        super().__init__()
        self.value = value

    def random(self) -> float:
        return self.value


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.init_db()
    yield db
    await db.close()


@pytest.fixture
def store(database) -> SessionStore:
    return SessionStore(database)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def presence() -> RoomPresence:
    return RoomPresence(system_users=["[server]"])


@pytest.fixture
def make_manager(store, presence, sink, scheduler, clock):
    def _make(**kwargs) -> WatchPayoutManager:
        options = {
            "policy": RewardPolicy(rng=FixedRandom(0.5)),
            "scheduler": scheduler,
            "clock": clock,
        }
        options.update(kwargs)
        return WatchPayoutManager(store, presence, sink, **options)

    return _make


@pytest_asyncio.fixture
async def manager(make_manager) -> WatchPayoutManager:
    engine = make_manager()
    await engine.bootstrap()
    return engine

"""Pytest configuration and fixtures for cacheprobe.

Store-backed tests run against fakeredis wrapped in the real RedisStore
adapter, so no server is needed. Tests that need a live endpoint are marked
requires_store.
"""

import pytest

from cacheprobe.core.config import get_settings
from cacheprobe.domain.enums import ClientVariant, TopologyMode
from cacheprobe.domain.value_objects import ConnectionSpec, NodeAddress
from cacheprobe.infrastructure.cache.connection_factory import StoreHandle
from cacheprobe.infrastructure.cache.flexible import FlexibleCache
from cacheprobe.infrastructure.cache.redis_store import RedisStore


class FakeClock:
    """Manually advanced wall clock for flexible TTL tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def single_spec() -> ConnectionSpec:
    return ConnectionSpec(
        topology=TopologyMode.SINGLE,
        client=ClientVariant.REDIS_PY,
        nodes=(NodeAddress("127.0.0.1", 6379),),
        key_prefix="test:",
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def fake_store(single_spec: ConnectionSpec):
    """RedisStore over an in-memory fakeredis client."""
    aioredis = pytest.importorskip("fakeredis.aioredis")
    client = aioredis.FakeRedis(decode_responses=True)
    await client.flushall()
    store = RedisStore(client, single_spec)
    yield store
    await store.close()


@pytest.fixture
def flexible_cache(fake_store: RedisStore, fake_clock: FakeClock) -> FlexibleCache:
    return FlexibleCache(fake_store, lock_seconds=5, poll_interval=0.01, clock=fake_clock)


@pytest.fixture
def store_handle(
    fake_store: RedisStore, single_spec: ConnectionSpec, flexible_cache: FlexibleCache
) -> StoreHandle:
    """Live handle over fakeredis, as the connection factory would return it."""
    return StoreHandle(fake_store, single_spec, flexible_cache)

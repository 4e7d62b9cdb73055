"""Shared fixtures for the traveller test suite.

- No network: provider HTTP goes through respx, Redis through ``FakeRedis``.
- HTTP tests call the ASGI app in-process via ``httpx.AsyncClient``.
- AnyIO is the async runner (``@pytest.mark.anyio``).
"""

import os

# Settings are read at import time; keep tests off real Redis and the scheduler
os.environ.setdefault("TP_TOKEN", "test-token")
os.environ.setdefault("TP_MARKER", "678943")
os.environ["DURABLE_CACHE_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"

from typing import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport

from traveller.config import Settings
from traveller.services.cache_service import TwoTierCache
from traveller.services.travelpayouts_client import TravelpayoutsClient


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Force pytest-anyio to use the asyncio event loop."""
    return "asyncio"


class FakeRedis:
    """In-memory stand-in for ``redis.asyncio.Redis`` with decoded responses."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.set_calls: list[tuple[str, str, int | None]] = []
        self.fail = False

    def _check(self):
        if self.fail:
            raise ConnectionError("redis down")

    async def ping(self):
        self._check()
        return True

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.set_calls.append((key, value, ex))
        self.store[key] = value
        return True

    async def delete(self, *keys):
        self._check()
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
        return removed

    async def scan_iter(self, match=None):
        self._check()
        prefix = match.rstrip("*") if match else ""
        for key in list(self.store):
            if key.startswith(prefix):
                yield key

    async def aclose(self):
        pass


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock) -> TwoTierCache:
    return TwoTierCache(storage_prefix="test_", durable_enabled=False, clock=clock)


@pytest.fixture
def durable_cache(fake_redis, clock) -> TwoTierCache:
    return TwoTierCache(storage_prefix="test_", durable_enabled=True, redis_client=fake_redis, clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        tp_token="test-token",
        tp_marker="678943",
        hotels_enabled=True,
        http_max_retries=1,
        http_retry_base_delay_seconds=0,
        durable_cache_enabled=False,
        scheduler_enabled=False,
    )


@pytest.fixture
async def provider(test_settings) -> AsyncGenerator[TravelpayoutsClient, None]:
    client = TravelpayoutsClient(test_settings)
    yield client
    await client.close()


@pytest.fixture
def provider_sync(test_settings) -> TravelpayoutsClient:
    """Adapter for tests that never reach the network."""
    return TravelpayoutsClient(test_settings)


@pytest.fixture
async def async_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    from traveller.main import app

    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()

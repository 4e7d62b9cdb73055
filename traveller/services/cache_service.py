"""Two-tier cache: in-process memory in front of a durable Redis store.

Writes go to both tiers; reads check memory first and promote durable hits
back into memory. Expiry is lazy on read, with ``cleanup()`` as the eager
sweep. The durable tier is best-effort: when Redis is unreachable the cache
keeps working from memory alone.
"""

import asyncio
import json
import logging
import time
from typing import Any, Callable, Mapping

import redis.asyncio as redis
from pydantic import BaseModel

from traveller.config import settings

logger = logging.getLogger(__name__)

# Seconds to wait before trying an unreachable Redis again
RECONNECT_INTERVAL = 60


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def cache_key(prefix: str, params: Mapping[str, Any]) -> str:
    """Build ``prefix:k1=v1&k2=v2`` from ``params``, sorted by key.

    ``None`` values are dropped so an omitted field and an explicit ``None``
    produce the same key.
    """
    pairs = sorted(
        ((k, v) for k, v in params.items() if v is not None),
        key=lambda kv: kv[0],
    )
    return f"{prefix}:" + "&".join(f"{k}={_format_value(v)}" for k, v in pairs)


def query_cache_key(prefix: str, query: BaseModel) -> str:
    return cache_key(prefix, query.model_dump(mode="json", exclude_none=True))


class TwoTierCache:
    """Memory + Redis cache with per-entry TTLs."""

    def __init__(
        self,
        redis_url: str | None = None,
        *,
        storage_prefix: str | None = None,
        durable_enabled: bool | None = None,
        redis_client: Any = None,
        clock: Callable[[], float] = time.time,
    ):
        self._memory: dict[str, dict[str, Any]] = {}
        self._redis_url = redis_url or settings.redis_url
        self._prefix = storage_prefix if storage_prefix is not None else settings.cache_storage_prefix
        self._durable_enabled = settings.durable_cache_enabled if durable_enabled is None else durable_enabled
        self._redis = redis_client
        self._redis_failed_at: float | None = None
        self._connect_lock = asyncio.Lock()
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _storage_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def _get_redis(self):
        if not self._durable_enabled:
            return None
        if self._redis is not None:
            return self._redis
        async with self._connect_lock:
            # Another request may have connected (or failed) while we waited
            if self._redis is not None:
                return self._redis
            if self._redis_failed_at is not None and time.monotonic() - self._redis_failed_at < RECONNECT_INTERVAL:
                return None

            client = None
            try:
                client = redis.from_url(
                    self._redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                    socket_connect_timeout=2,
                )
                await client.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, durable cache disabled: {e}")
                self._redis_failed_at = time.monotonic()
                if client is not None:
                    await client.aclose()
                return None

            self._redis = client
            self._redis_failed_at = None
            return self._redis

    async def _durable_delete(self, r, key: str) -> None:
        try:
            await r.delete(self._storage_key(key))
        except Exception as e:
            logger.warning(f"Failed to delete {key} from durable cache: {e}")

    async def set(self, key: str, data: Any, ttl_seconds: int) -> None:
        """Store ``data`` for ``ttl_seconds`` in memory and, best-effort, in Redis."""
        entry = {"data": data, "expiresAt": self._now_ms() + int(ttl_seconds * 1000)}
        self._memory[key] = entry

        r = await self._get_redis()
        if r is None:
            return
        try:
            await r.set(self._storage_key(key), json.dumps(entry, default=str), ex=max(int(ttl_seconds), 1))
        except Exception as e:
            logger.warning(f"Failed to write {key} to durable cache: {e}")

    async def get(self, key: str) -> Any | None:
        """Return cached data or ``None`` on miss, expiry or durable-tier error."""
        now = self._now_ms()

        entry = self._memory.get(key)
        if entry is not None:
            if now <= entry["expiresAt"]:
                return entry["data"]
            del self._memory[key]

        r = await self._get_redis()
        if r is None:
            return None

        try:
            raw = await r.get(self._storage_key(key))
        except Exception as e:
            logger.warning(f"Failed to read {key} from durable cache: {e}")
            return None
        if raw is None:
            return None

        try:
            stored = json.loads(raw)
            expires_at = int(stored["expiresAt"])
            data = stored["data"]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding corrupt durable cache entry {key}: {e}")
            await self._durable_delete(r, key)
            return None

        if now > expires_at:
            await self._durable_delete(r, key)
            return None

        # Promote so later reads in this process skip Redis
        self._memory[key] = {"data": data, "expiresAt": expires_at}
        return data

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None

    async def delete(self, key: str) -> None:
        self._memory.pop(key, None)
        r = await self._get_redis()
        if r is not None:
            await self._durable_delete(r, key)

    async def clear(self) -> None:
        self._memory.clear()
        r = await self._get_redis()
        if r is None:
            return
        try:
            keys = [k async for k in r.scan_iter(match=f"{self._prefix}*")]
            if keys:
                await r.delete(*keys)
        except Exception as e:
            logger.warning(f"Failed to clear durable cache: {e}")

    async def cleanup(self) -> int:
        """Remove expired entries from both tiers. Returns the number removed."""
        now = self._now_ms()
        removed = 0

        expired = [k for k, entry in self._memory.items() if now > entry["expiresAt"]]
        for k in expired:
            self._memory.pop(k, None)
        removed += len(expired)

        r = await self._get_redis()
        if r is None:
            return removed

        try:
            stale = []
            async for storage_key in r.scan_iter(match=f"{self._prefix}*"):
                raw = await r.get(storage_key)
                if raw is None:
                    continue
                try:
                    expires_at = int(json.loads(raw)["expiresAt"])
                except (ValueError, KeyError, TypeError):
                    stale.append(storage_key)
                    continue
                if now > expires_at:
                    stale.append(storage_key)
            if stale:
                await r.delete(*stale)
            removed += len(stale)
        except Exception as e:
            logger.warning(f"Failed to clean up durable cache: {e}")

        return removed

    def get_stats(self) -> dict:
        return {
            "memory_size": len(self._memory),
            "memory_keys": list(self._memory.keys()),
            "durable": self._durable_enabled and self._redis is not None,
        }

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None

"""Cache-through orchestration shared by the flight, hotel and location services."""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from traveller.schemas.queries import QueryModel
from traveller.schemas.travel import CanonicalModel
from traveller.services.cache_service import TwoTierCache, query_cache_key
from traveller.services.travelpayouts_client import TravelpayoutsClient

logger = logging.getLogger(__name__)

Q = TypeVar("Q", bound=QueryModel)
D = TypeVar("D", bound=CanonicalModel)


class CachedSearchService(ABC, Generic[Q, D]):
    """Validated query -> cache lookup -> provider + mapper on miss -> cache write.

    Provider errors propagate untouched; an empty result is cached like any
    other successful answer.
    """

    family: str
    dto: type[D]

    def __init__(self, cache: TwoTierCache, provider: TravelpayoutsClient, ttl_seconds: int):
        self._cache = cache
        self._provider = provider
        self._ttl = ttl_seconds

    def cache_key(self, query: Q) -> str:
        return query_cache_key(self.family, query)

    async def search(self, query: Q) -> list[D]:
        key = self.cache_key(query)

        cached = await self._cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit for {self.family}: {key}")
            return [self.dto.model_validate(item) for item in cached]

        logger.info(f"Cache miss for {self.family}, fetching from provider: {key}")
        results = await self._fetch(query)

        await self._cache.set(key, [item.to_json() for item in results], self._ttl)
        return results

    @abstractmethod
    async def _fetch(self, query: Q) -> list[D]:
        """Call the provider and map its records for ``query``."""

from traveller.config import settings
from traveller.schemas.queries import LocationsQuery
from traveller.schemas.travel import Location
from traveller.services.cache_service import TwoTierCache
from traveller.services.search_service import CachedSearchService
from traveller.services.travelpayouts_client import TravelpayoutsClient
from traveller.services.travelpayouts_mapper import map_location


class LocationService(CachedSearchService[LocationsQuery, Location]):
    """Autocomplete lookups; places change rarely, hence the long TTL."""

    family = "locations"
    dto = Location

    def __init__(
        self, cache: TwoTierCache, provider: TravelpayoutsClient, ttl_seconds: int = settings.location_cache_ttl
    ):
        super().__init__(cache, provider, ttl_seconds)

    async def _fetch(self, query: LocationsQuery) -> list[Location]:
        raw_locations = await self._provider.search_locations(query)
        return [map_location(loc) for loc in raw_locations]

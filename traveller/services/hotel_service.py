"""Hotel search service with star and price filters."""

from traveller.config import settings
from traveller.schemas.queries import HotelsQuery
from traveller.schemas.travel import Hotel
from traveller.services.cache_service import TwoTierCache
from traveller.services.search_service import CachedSearchService
from traveller.services.travelpayouts_client import TravelpayoutsClient
from traveller.services.travelpayouts_mapper import map_hotel


def _matches_filters(hotel: Hotel, query: HotelsQuery) -> bool:
    if query.stars is not None and (hotel.stars is None or hotel.stars < query.stars):
        return False
    if query.price_min is None and query.price_max is None:
        return True
    if hotel.price is None:
        return False
    if query.price_min is not None and hotel.price.amount < query.price_min:
        return False
    if query.price_max is not None and hotel.price.amount > query.price_max:
        return False
    return True


class HotelService(CachedSearchService[HotelsQuery, Hotel]):
    family = "hotels"
    dto = Hotel

    def __init__(self, cache: TwoTierCache, provider: TravelpayoutsClient, ttl_seconds: int = settings.hotel_cache_ttl):
        super().__init__(cache, provider, ttl_seconds)

    async def _fetch(self, query: HotelsQuery) -> list[Hotel]:
        raw_hotels = await self._provider.search_hotels(query)
        hotels = [map_hotel(h, query.currency, city=query.location) for h in raw_hotels]
        return [h for h in hotels if _matches_filters(h, query)]

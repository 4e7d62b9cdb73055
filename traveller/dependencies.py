"""Process-wide service wiring.

One cache and one provider client per process; services receive them
explicitly. Routers resolve services through these functions, which tests
replace with ``app.dependency_overrides``.
"""

from functools import lru_cache

from traveller.config import settings
from traveller.services.cache_service import TwoTierCache
from traveller.services.flight_service import FlightService
from traveller.services.hotel_service import HotelService
from traveller.services.location_service import LocationService
from traveller.services.travelpayouts_client import TravelpayoutsClient


@lru_cache()
def get_cache() -> TwoTierCache:
    return TwoTierCache(
        settings.redis_url,
        storage_prefix=settings.cache_storage_prefix,
        durable_enabled=settings.durable_cache_enabled,
    )


@lru_cache()
def get_provider() -> TravelpayoutsClient:
    return TravelpayoutsClient(settings)


@lru_cache()
def get_flight_service() -> FlightService:
    return FlightService(get_cache(), get_provider(), ttl_seconds=settings.flight_cache_ttl)


@lru_cache()
def get_hotel_service() -> HotelService:
    return HotelService(get_cache(), get_provider(), ttl_seconds=settings.hotel_cache_ttl)


@lru_cache()
def get_location_service() -> LocationService:
    return LocationService(get_cache(), get_provider(), ttl_seconds=settings.location_cache_ttl)

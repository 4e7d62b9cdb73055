"""Flight search service."""

import logging

from traveller.config import settings
from traveller.schemas.queries import FlightsQuery
from traveller.schemas.travel import FlightItinerary
from traveller.services.cache_service import TwoTierCache
from traveller.services.search_service import CachedSearchService
from traveller.services.travelpayouts_client import TravelpayoutsClient
from traveller.services.travelpayouts_mapper import map_flight

logger = logging.getLogger(__name__)


class FlightService(CachedSearchService[FlightsQuery, FlightItinerary]):
    family = "flights"
    dto = FlightItinerary

    def __init__(
        self,
        cache: TwoTierCache,
        provider: TravelpayoutsClient,
        ttl_seconds: int = settings.flight_cache_ttl,
        marker: str | None = settings.tp_marker,
        booking_domain: str = settings.aviasales_domain,
    ):
        super().__init__(cache, provider, ttl_seconds)
        self._marker = marker
        self._booking_domain = booking_domain

    async def _fetch(self, query: FlightsQuery) -> list[FlightItinerary]:
        offers = await self._provider.search_flights(query)

        flights = []
        for offer in offers:
            try:
                flights.append(
                    map_flight(offer, query.currency, marker=self._marker, domain=self._booking_domain)
                )
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                # Incomplete rows (no departure time) cannot form an itinerary
                logger.warning(f"Skipping malformed flight offer: {e!r}")
        return flights

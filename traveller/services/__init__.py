"""Search core: provider access, caching and per-family search services.

Modules:
    http_client           GET with deadlines and backoff retries
    travelpayouts_client  Provider adapter (places, Aviasales prices, Hotellook)
    travelpayouts_mapper  Provider records to canonical DTOs
    cache_service         Memory + Redis two-tier cache
    search_service        Cache-through base class
    flight_service        Flights
    hotel_service         Hotels, with star and price filters
    location_service      Location autocomplete

Pipeline:
    parse_*_query → Service.search → cache → TravelpayoutsClient → mapper
"""

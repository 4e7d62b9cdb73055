"""Travelpayouts API client: adapter for places autocomplete, Aviasales prices and Hotellook.

Translates typed queries into provider query strings and returns the
provider's raw records. Only ``travelpayouts_mapper`` interprets those records.
"""

import logging
from typing import Any

import httpx

from traveller.config import Settings, settings
from traveller.data.hotel_city_ids import city_id_from_iata, city_id_from_name
from traveller.data.locations import iata_code_for
from traveller.errors import ProviderError
from traveller.schemas.queries import FlightsQuery, HotelsQuery, LocationsQuery
from traveller.services.http_client import fetch_with_retry

logger = logging.getLogger(__name__)

RawRecord = dict[str, Any]


def _offer_price(offer: RawRecord) -> float:
    try:
        return float(offer["price"])
    except (KeyError, TypeError, ValueError):
        return float("inf")


class TravelpayoutsClient:
    """Adapter for the Travelpayouts affiliate APIs."""

    def __init__(self, config: Settings = settings, client: httpx.AsyncClient | None = None):
        self._config = config
        self._client = client
        self.hotels_enabled = config.hotels_enabled

        if not config.tp_token:
            logger.warning("TP_TOKEN not set, Travelpayouts calls may be rejected")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.http_timeout_seconds,
                headers={"Accept-Encoding": "gzip"},
            )
        return self._client

    async def _get(self, url: str, params: dict[str, Any], headers: dict[str, str] | None = None) -> httpx.Response:
        client = await self._get_client()
        return await fetch_with_retry(
            client,
            url,
            params=params,
            headers=headers,
            timeout=self._config.http_timeout_seconds,
            max_retries=self._config.http_max_retries,
            base_delay=self._config.http_retry_base_delay_seconds,
            max_retry_after=self._config.http_max_retry_after_seconds,
        )

    @staticmethod
    def _json(resp: httpx.Response, resource: str) -> Any:
        if not resp.is_success:
            raise ProviderError(
                f"Travelpayouts {resource} API error: {resp.status_code} {resp.reason_phrase}",
                details={"status": resp.status_code, "responseBody": resp.text[:500]},
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(f"Travelpayouts {resource} API returned malformed JSON: {e}") from e

    # ── Locations ──────────────────────────────────────────────

    async def search_locations(self, query: LocationsQuery) -> list[RawRecord]:
        params: dict[str, Any] = {"term": query.q, "locale": self._config.locale}
        if query.type != "all":
            params["types[]"] = query.type

        resp = await self._get(f"{self._config.tp_autocomplete_url.rstrip('/')}/places2", params)
        data = self._json(resp, "locations")

        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)][: query.limit]

    # ── Flights ────────────────────────────────────────────────

    async def search_flights(self, query: FlightsQuery) -> list[RawRecord]:
        params: dict[str, Any] = {
            "origin": query.origin,
            "destination": query.destination,
            "departure_at": query.date,
            "one_way": "false" if query.return_date else "true",
            "direct": "true" if query.nonstop else "false",
            "currency": query.currency.lower(),
            "limit": query.page_size,
            "page": query.page,
            "sorting": "price",
            "token": self._config.tp_token,
        }
        if query.return_date:
            params["return_at"] = query.return_date
        if self._config.tp_marker:
            params["marker"] = self._config.tp_marker

        logger.info(
            f"Searching flights: {query.origin} -> {query.destination} "
            f"({query.date} to {query.return_date or 'one-way'})"
        )
        resp = await self._get(
            f"{self._config.tp_api_base.rstrip('/')}/aviasales/v3/prices_for_dates",
            params,
            headers={"X-Access-Token": self._config.tp_token},
        )
        payload = self._json(resp, "flights")

        if not isinstance(payload, dict):
            raise ProviderError("Travelpayouts flights API returned an unexpected payload")
        if payload.get("success") is False:
            raise ProviderError(f"Travelpayouts flights API error: {payload.get('error')}")

        offers = payload.get("data") or []
        if not isinstance(offers, list):
            offers = []

        # Callers rely on cheapest-first ordering
        ranked = sorted((o for o in offers if isinstance(o, dict)), key=_offer_price)
        result = ranked[: query.page_size]
        if not result:
            logger.warning(f"No flight data available for {query.origin} -> {query.destination}")
        else:
            logger.info(f"Found {len(result)} flights for {query.origin} -> {query.destination}")
        return result

    # ── Hotels ─────────────────────────────────────────────────

    def resolve_city_id(self, query: HotelsQuery) -> int | None:
        """Resolve the Hotellook city id for a hotel query, without network calls."""
        if query.location_id is not None:
            return query.location_id
        if not query.location:
            return None

        candidates = [query.location]
        head = query.location.split(",")[0].strip()
        if head and head != query.location:
            candidates.append(head)

        for name in candidates:
            city_id = city_id_from_name(name)
            if city_id is None:
                city_id = city_id_from_iata(iata_code_for(name))
            if city_id is None and len(name) == 3:
                city_id = city_id_from_iata(name)
            if city_id is not None:
                return city_id
        return None

    async def search_hotels(self, query: HotelsQuery) -> list[RawRecord]:
        if not self.hotels_enabled:
            logger.warning("Hotel search disabled (HOTELS_ENABLED=false), returning no hotels")
            return []

        city_id = self.resolve_city_id(query)
        if city_id is None:
            logger.warning(
                f"Cannot search hotels without a city id for {query.location!r}; "
                f"add it to the hotel city table to enable this destination"
            )
            return []

        params: dict[str, Any] = {
            "locationId": city_id,
            "checkIn": query.check_in,
            "checkOut": query.check_out,
            "adults": query.guests,
            "currency": query.currency.lower(),
            "limit": query.page_size,
            "token": self._config.tp_token,
        }

        logger.info(f"Fetching hotels for city id {city_id} ({query.check_in} to {query.check_out})")
        resp = await self._get(f"{self._config.hotellook_api_base.rstrip('/')}/api/v2/cache.json", params)
        data = self._json(resp, "hotels")

        if isinstance(data, list):
            hotels = data
        elif isinstance(data, dict):
            hotels = data.get("hotels") or data.get("results") or []
        else:
            raise ProviderError("Travelpayouts hotels API returned an unexpected payload")

        return [h for h in hotels if isinstance(h, dict)]

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

"""Tests for the Travelpayouts adapter."""

import httpx
import pytest
import respx

from traveller.errors import ProviderError
from traveller.schemas.queries import parse_flights_query, parse_hotels_query, parse_locations_query
from traveller.services.travelpayouts_client import TravelpayoutsClient

PRICES_URL = "https://api.travelpayouts.com/aviasales/v3/prices_for_dates"
PLACES_URL = "https://autocomplete.travelpayouts.com/places2"
HOTELS_URL = "https://engine.hotellook.com/api/v2/cache.json"


def _flights_query(**overrides):
    params = {"origin": "AMS", "destination": "BCN", "date": "2025-06-01"}
    params.update(overrides)
    return parse_flights_query(params)


def _hotels_query(**overrides):
    params = {"checkIn": "2025-06-01", "checkOut": "2025-06-05"}
    params.update(overrides)
    return parse_hotels_query(params)


def _offer(price):
    return {"origin": "AMS", "destination": "BCN", "price": price, "departure_at": "2025-06-01T10:00:00Z"}


# ── Flights ────────────────────────────────────────────────────


@pytest.mark.anyio
async def test_search_flights_sends_provider_params(provider):
    with respx.mock(assert_all_called=True) as router:
        route = router.get(PRICES_URL).respond(200, json={"success": True, "data": [_offer(99)]})
        await provider.search_flights(_flights_query(return_date="2025-06-08", nonstop="true", pageSize="5"))

    request = route.calls.last.request
    params = request.url.params
    assert params["origin"] == "AMS"
    assert params["destination"] == "BCN"
    assert params["departure_at"] == "2025-06-01"
    assert params["return_at"] == "2025-06-08"
    assert params["one_way"] == "false"
    assert params["direct"] == "true"
    assert params["currency"] == "eur"
    assert params["limit"] == "5"
    assert params["sorting"] == "price"
    assert params["marker"] == "678943"
    assert params["token"] == "test-token"
    assert request.headers["X-Access-Token"] == "test-token"


@pytest.mark.anyio
async def test_search_flights_orders_by_price(provider):
    offers = [_offer(500), _offer(120), _offer(300)]
    with respx.mock() as router:
        router.get(PRICES_URL).respond(200, json={"success": True, "data": offers})
        result = await provider.search_flights(_flights_query())

    assert [o["price"] for o in result] == [120, 300, 500]


@pytest.mark.anyio
async def test_search_flights_truncates_to_page_size(provider):
    offers = [_offer(p) for p in (40, 10, 30, 20)]
    with respx.mock() as router:
        router.get(PRICES_URL).respond(200, json={"success": True, "data": offers})
        result = await provider.search_flights(_flights_query(pageSize="2"))

    assert [o["price"] for o in result] == [10, 20]


@pytest.mark.anyio
async def test_search_flights_unsuccessful_payload_raises(provider):
    with respx.mock() as router:
        router.get(PRICES_URL).respond(200, json={"success": False, "error": "invalid token"})
        with pytest.raises(ProviderError, match="invalid token"):
            await provider.search_flights(_flights_query())


@pytest.mark.anyio
async def test_search_flights_non_2xx_raises_with_status(provider):
    with respx.mock() as router:
        router.get(PRICES_URL).respond(401, text="unauthorized")
        with pytest.raises(ProviderError) as exc_info:
            await provider.search_flights(_flights_query())

    assert exc_info.value.details == {"status": 401, "responseBody": "unauthorized"}


@pytest.mark.anyio
async def test_search_flights_malformed_json_raises(provider):
    with respx.mock() as router:
        router.get(PRICES_URL).respond(200, text="<html>")
        with pytest.raises(ProviderError, match="malformed JSON"):
            await provider.search_flights(_flights_query())


# ── Locations ──────────────────────────────────────────────────


@pytest.mark.anyio
async def test_search_locations_passes_type_filter(provider):
    places = [{"code": "AMS", "name": "Amsterdam", "type": "city"}]
    with respx.mock() as router:
        route = router.get(PLACES_URL).respond(200, json=places)
        result = await provider.search_locations(parse_locations_query({"q": "amst", "type": "city"}))

    params = route.calls.last.request.url.params
    assert params["term"] == "amst"
    assert params["locale"] == "en"
    assert params["types[]"] == "city"
    assert result == places


@pytest.mark.anyio
async def test_search_locations_all_types_sends_no_filter(provider):
    with respx.mock() as router:
        route = router.get(PLACES_URL).respond(200, json=[])
        await provider.search_locations(parse_locations_query({"q": "ams"}))

    assert "types[]" not in route.calls.last.request.url.params


@pytest.mark.anyio
async def test_search_locations_non_array_is_empty(provider):
    with respx.mock() as router:
        router.get(PLACES_URL).respond(200, json={"error": "nope"})
        assert await provider.search_locations(parse_locations_query({"q": "ams"})) == []


@pytest.mark.anyio
async def test_search_locations_truncates_to_limit(provider):
    places = [{"code": f"C{i:02d}", "name": f"City {i}"} for i in range(8)]
    with respx.mock() as router:
        router.get(PLACES_URL).respond(200, json=places)
        result = await provider.search_locations(parse_locations_query({"q": "c", "limit": "3"}))

    assert len(result) == 3


# ── Hotels ─────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "params, expected",
    [
        ({"locationId": "555"}, 555),
        ({"location": "Amsterdam"}, 12679),
        ({"location": "Barcelona, Spain"}, 10947),
        ({"location": "bcn"}, 10947),
        ({"location": "Atlantis"}, None),
        ({"lat": "52.3", "lon": "4.9"}, None),
    ],
)
def test_resolve_city_id(provider_sync, params, expected):
    assert provider_sync.resolve_city_id(_hotels_query(**params)) == expected


@pytest.mark.anyio
async def test_search_hotels_queries_cache_endpoint(provider):
    hotels = [{"hotelId": 1, "hotelName": "A"}, "junk"]
    with respx.mock() as router:
        route = router.get(HOTELS_URL).respond(200, json=hotels)
        result = await provider.search_hotels(_hotels_query(location="Amsterdam", guests="3"))

    params = route.calls.last.request.url.params
    assert params["locationId"] == "12679"
    assert params["checkIn"] == "2025-06-01"
    assert params["checkOut"] == "2025-06-05"
    assert params["adults"] == "3"
    assert result == [{"hotelId": 1, "hotelName": "A"}]


@pytest.mark.anyio
async def test_search_hotels_accepts_wrapped_payload(provider):
    with respx.mock() as router:
        router.get(HOTELS_URL).respond(200, json={"hotels": [{"hotelId": 2}]})
        result = await provider.search_hotels(_hotels_query(location="Paris"))

    assert result == [{"hotelId": 2}]


@pytest.mark.anyio
async def test_search_hotels_unknown_city_makes_no_request(provider):
    with respx.mock(assert_all_called=False) as router:
        route = router.get(HOTELS_URL).respond(200, json=[])
        result = await provider.search_hotels(_hotels_query(location="Atlantis"))

    assert result == []
    assert not route.called


@pytest.mark.anyio
async def test_search_hotels_disabled_makes_no_request(test_settings):
    disabled = TravelpayoutsClient(test_settings.model_copy(update={"hotels_enabled": False}))
    with respx.mock(assert_all_called=False) as router:
        route = router.get(HOTELS_URL).respond(200, json=[{"hotelId": 1}])
        result = await disabled.search_hotels(_hotels_query(location="Amsterdam"))

    assert result == []
    assert not route.called
    await disabled.close()


@pytest.mark.anyio
async def test_injected_http_client_is_used(test_settings):
    with respx.mock() as router:
        router.get(PLACES_URL).respond(200, json=[])
        async with httpx.AsyncClient() as http:
            client = TravelpayoutsClient(test_settings, client=http)
            assert await client.search_locations(parse_locations_query({"q": "ams"})) == []

"""Travelpayouts record → canonical DTO mapping.

Pure functions. Every provider field name and unit difference is resolved
here through explicit fallback chains; missing optional fields become
``None`` instead of raising.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode, urlsplit

from traveller.schemas.travel import (
    FlightItinerary,
    FlightLeg,
    FlightSegment,
    Hotel,
    HotelLocation,
    HotelRating,
    Location,
    Money,
)

AVIASALES_DOMAIN = "https://www.aviasales.com"
HOTEL_PHOTO_URL = "https://photo.hotellook.com/image_v2/limit/{hotel_id}/800/520.auto"
HOTEL_BOOKING_URL = "https://www.hotellook.com/hotels/{city_slug}/hotel/{hotel_id}"

# Used when the provider omits the flight time altogether
DEFAULT_DURATION_MIN = 180

_LOCATION_TYPES = {"airport", "city", "hotel"}


def _first(record: dict, *keys: str) -> Any:
    """Return the first non-empty value among ``keys``."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _parse_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def add_minutes(timestamp: str, minutes: int) -> str:
    """Return ``timestamp + minutes`` as a UTC ``YYYY-MM-DDTHH:MM:SSZ`` string."""
    arrival = _parse_timestamp(timestamp) + timedelta(minutes=minutes)
    return arrival.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def slugify(name: str | None) -> str:
    if not name or not name.strip():
        return "city"
    return re.sub(r"\s+", "-", name.strip().lower())


# ── Locations ──────────────────────────────────────────────────


def map_location(raw: dict) -> Location:
    raw_type = str(raw.get("type") or "").lower()
    coordinates = raw.get("coordinates") or {}

    return Location(
        id=str(_first(raw, "id", "code") or ""),
        type=raw_type if raw_type in _LOCATION_TYPES else "city",
        code=_first(raw, "code", "city_code"),
        name=_first(raw, "name", "city_name") or "",
        country=_first(raw, "country_code"),
        lat=_as_float(_first(coordinates, "lat", "latitude")),
        lon=_as_float(_first(coordinates, "lon", "lng", "longitude")),
    )


# ── Flights ────────────────────────────────────────────────────


def _leg(origin: str, destination: str, departure: str, duration: int, carrier: str, flight_number: str) -> FlightLeg:
    arrival = add_minutes(departure, duration)
    return FlightLeg(
        from_=origin,
        to=destination,
        dep_time=departure,
        arr_time=arrival,
        duration_min=duration,
        segments=[
            FlightSegment(
                carrier=carrier,
                flight_number=flight_number,
                from_=origin,
                to=destination,
                dep_time=departure,
                arr_time=arrival,
            )
        ],
    )


def flight_booking_url(link: str | None, marker: str | None = None, domain: str = AVIASALES_DOMAIN) -> str | None:
    if not link:
        return None
    url = link if urlsplit(link).scheme else f"{domain.rstrip('/')}/{link.lstrip('/')}"
    if marker and "marker=" not in url:
        url += ("&" if "?" in url else "?") + urlencode({"marker": marker})
    return url


def map_flight(
    raw: dict,
    currency: str = "EUR",
    *,
    marker: str | None = None,
    domain: str = AVIASALES_DOMAIN,
) -> FlightItinerary:
    origin = _first(raw, "origin") or ""
    destination = _first(raw, "destination") or ""
    from_airport = _first(raw, "origin_airport", "origin") or ""
    to_airport = _first(raw, "destination_airport", "destination") or ""
    departure = raw["departure_at"]
    price = _as_float(raw.get("price")) or 0.0

    carrier_code = _first(raw, "airline")
    carrier = carrier_code or "Unknown"
    flight_number = str(_first(raw, "flight_number") or "")

    outbound_duration = _as_int(_first(raw, "duration_to", "duration")) or DEFAULT_DURATION_MIN
    legs = [_leg(from_airport, to_airport, departure, outbound_duration, carrier, flight_number)]

    return_at = _first(raw, "return_at")
    return_duration = _as_int(_first(raw, "duration_back", "duration"))
    if return_at and return_duration:
        legs.append(_leg(to_airport, from_airport, return_at, return_duration, carrier, flight_number))

    return FlightItinerary(
        id=f"{origin}-{destination}-{departure}-{_format_number(price)}",
        price=Money(amount=price, currency=currency),
        legs=legs,
        carriers=[carrier_code] if carrier_code else [],
        booking_url=flight_booking_url(_first(raw, "link"), marker, domain),
    )


# ── Hotels ─────────────────────────────────────────────────────


def map_hotel(raw: dict, currency: str = "EUR", city: str | None = None) -> Hotel:
    hotel_id = _first(raw, "hotelId", "id")
    location = raw.get("location") or {}
    geo = location.get("geo") or {}

    city_name = _first(location, "name") or city
    price = _as_float(_first(raw, "priceFrom", "priceAvg", "price"))
    score = _as_float(_first(raw, "rating"))
    reviews = _as_int(_first(raw, "reviews"))

    lat = _first(geo, "lat", "latitude")
    if lat is None:
        lat = _first(raw, "lat", "latitude")
    lon = _first(geo, "lon", "lng", "longitude")
    if lon is None:
        lon = _first(raw, "lon", "lng", "longitude")

    return Hotel(
        id=str(hotel_id) if hotel_id is not None else "",
        name=_first(raw, "hotelName", "name") or "Unknown Hotel",
        location=HotelLocation(
            lat=_as_float(lat),
            lon=_as_float(lon),
            address=_first(raw, "address"),
            city=city_name,
            country=_first(location, "country"),
        ),
        rating=HotelRating(score=score, reviews=reviews) if score is not None or reviews is not None else None,
        stars=_as_int(_first(raw, "stars")),
        price=Money(amount=price, currency=currency) if price else None,
        thumbnail=HOTEL_PHOTO_URL.format(hotel_id=hotel_id) if hotel_id is not None else None,
        booking_url=(
            HOTEL_BOOKING_URL.format(city_slug=slugify(city_name), hotel_id=hotel_id)
            if hotel_id is not None
            else None
        ),
    )

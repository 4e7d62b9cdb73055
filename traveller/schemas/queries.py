"""Query validation: raw, string-keyed parameter bags into typed queries.

The ``parse_*`` helpers are the public entry points. They accept a mapping as
it arrives from a URL query string and either return a frozen query object
with defaults applied or raise ``QueryValidationError`` listing every
violated constraint.
"""

import datetime as dt
import re
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from traveller.errors import QueryValidationError

_IATA_RE = re.compile(r"^[A-Za-z]{3}$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CURRENCY_RE = re.compile(r"^[A-Za-z]{3}$")

HOTEL_TARGET_MESSAGE = "Either location, locationId, or both lat and lon must be provided"
PRICE_RANGE_MESSAGE = "priceMin must not exceed priceMax"


def _check_date(value: str, label: str) -> str:
    if not _DATE_RE.match(value):
        raise ValueError(f"{label} must be in YYYY-MM-DD format")
    try:
        dt.date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"{label} is not a valid calendar date") from None
    return value


def _check_currency(value: str) -> str:
    if not _CURRENCY_RE.match(value):
        raise ValueError("Currency must be a 3-letter ISO code")
    return value.upper()


def _has_search_target(location: Any, location_id: Any, lat: Any, lon: Any) -> bool:
    return bool(location) or location_id is not None or (lat is not None and lon is not None)


def _as_number(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _cross_field_problems(
    location: Any, location_id: Any, lat: Any, lon: Any, price_min: float | None, price_max: float | None
) -> list[str]:
    problems = []
    if not _has_search_target(location, location_id, lat, lon):
        problems.append(HOTEL_TARGET_MESSAGE)
    if price_min is not None and price_max is not None and price_min > price_max:
        problems.append(PRICE_RANGE_MESSAGE)
    return problems


class QueryModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class LocationsQuery(QueryModel):
    q: str = Field(min_length=1)
    type: Literal["airport", "city", "hotel", "all"] = "all"
    limit: int = Field(10, ge=1, le=20)


class FlightsQuery(QueryModel):
    origin: str
    destination: str
    date: str
    return_date: str | None = None
    adults: int = Field(1, ge=1, le=9)
    children: int = Field(0, ge=0, le=8)
    infants: int = Field(0, ge=0, le=8)
    cabin: Literal["economy", "premium_economy", "business", "first"] = "economy"
    nonstop: bool = False
    currency: str = "EUR"
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=50)

    @field_validator("origin", "destination")
    @classmethod
    def _iata_code(cls, v: str, info: ValidationInfo) -> str:
        if not _IATA_RE.match(v):
            raise ValueError(f"{info.field_name.capitalize()} must be a 3-letter IATA code")
        return v.upper()

    @field_validator("date")
    @classmethod
    def _departure_date(cls, v: str) -> str:
        return _check_date(v, "Date")

    @field_validator("return_date")
    @classmethod
    def _return_date(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is None:
            return v
        _check_date(v, "Return date")
        departure = info.data.get("date")
        if departure and v < departure:
            raise ValueError("Return date must not be before the departure date")
        return v

    @field_validator("currency")
    @classmethod
    def _currency(cls, v: str) -> str:
        return _check_currency(v)


class HotelsQuery(QueryModel):
    location: str | None = None
    location_id: int | None = None
    lat: float | None = Field(None, ge=-90, le=90)
    lon: float | None = Field(None, ge=-180, le=180)
    check_in: str
    check_out: str
    guests: int = Field(2, ge=1)
    rooms: int = Field(1, ge=1)
    stars: int | None = Field(None, ge=1, le=5)
    price_min: float | None = Field(None, ge=0)
    price_max: float | None = Field(None, ge=0)
    currency: str = "EUR"
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=50)

    @field_validator("check_in")
    @classmethod
    def _check_in(cls, v: str) -> str:
        return _check_date(v, "Check-in date")

    @field_validator("check_out")
    @classmethod
    def _check_out(cls, v: str, info: ValidationInfo) -> str:
        _check_date(v, "Check-out date")
        check_in = info.data.get("check_in")
        if check_in and v <= check_in:
            raise ValueError("Check-out date must be after the check-in date")
        return v

    @field_validator("currency")
    @classmethod
    def _currency(cls, v: str) -> str:
        return _check_currency(v)

    @model_validator(mode="after")
    def _cross_field_rules(self) -> "HotelsQuery":
        problems = _cross_field_problems(
            self.location, self.location_id, self.lat, self.lon, self.price_min, self.price_max
        )
        if problems:
            raise ValueError("; ".join(problems))
        return self


def _clean(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Drop absent values: URL query strings send ``""`` for unset fields."""
    cleaned = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        cleaned[key] = value
    return cleaned


def _format_errors(exc: PydanticValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "query"
        message = err["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "message": message})
    return errors


def _validate(model: type[QueryModel], raw: Mapping[str, Any]) -> Any:
    try:
        return model.model_validate(_clean(raw))
    except PydanticValidationError as exc:
        raise QueryValidationError(_format_errors(exc)) from None


def parse_locations_query(raw: Mapping[str, Any]) -> LocationsQuery:
    return _validate(LocationsQuery, raw)


def parse_flights_query(raw: Mapping[str, Any]) -> FlightsQuery:
    return _validate(FlightsQuery, raw)


def parse_hotels_query(raw: Mapping[str, Any]) -> HotelsQuery:
    params = _clean(raw)
    try:
        return HotelsQuery.model_validate(params)
    except PydanticValidationError as exc:
        # Field errors short-circuit the model validator, so cross-field rules
        # are re-checked against the cleaned bag and reported alongside them.
        errors = [e for e in _format_errors(exc) if e["field"] != "query"]

    problems = _cross_field_problems(
        params.get("location"),
        params.get("locationId", params.get("location_id")),
        params.get("lat"),
        params.get("lon"),
        _as_number(params.get("priceMin", params.get("price_min"))),
        _as_number(params.get("priceMax", params.get("price_max"))),
    )
    errors.extend({"field": "query", "message": message} for message in problems)
    raise QueryValidationError(errors)

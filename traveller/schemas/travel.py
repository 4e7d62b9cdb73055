"""Canonical, provider-agnostic DTOs returned to callers.

JSON field names are camelCase; optional fields are omitted when absent.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LocationType = Literal["airport", "city", "hotel"]


class CanonicalModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Money(CanonicalModel):
    amount: float
    currency: str


class Location(CanonicalModel):
    id: str
    type: LocationType = "city"
    code: str | None = None
    name: str
    country: str | None = None
    lat: float | None = None
    lon: float | None = None


class FlightSegment(CanonicalModel):
    carrier: str
    flight_number: str = ""
    from_: str = Field(alias="from")
    to: str
    dep_time: str
    arr_time: str


class FlightLeg(CanonicalModel):
    from_: str = Field(alias="from")
    to: str
    dep_time: str
    arr_time: str
    duration_min: int
    segments: list[FlightSegment] = []


class FlightItinerary(CanonicalModel):
    id: str
    price: Money
    legs: list[FlightLeg]
    carriers: list[str] = []
    booking_url: str | None = None


class HotelLocation(CanonicalModel):
    lat: float | None = None
    lon: float | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None


class HotelRating(CanonicalModel):
    score: float | None = None
    reviews: int | None = None


class Hotel(CanonicalModel):
    id: str
    name: str
    location: HotelLocation = HotelLocation()
    rating: HotelRating | None = None
    stars: int | None = None
    price: Money | None = None
    thumbnail: str | None = None
    booking_url: str | None = None

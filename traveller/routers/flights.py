"""Flight search router."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from traveller.dependencies import get_flight_service
from traveller.schemas.envelope import NO_STORE_HEADERS, success_envelope
from traveller.schemas.queries import parse_flights_query
from traveller.services.flight_service import FlightService

router = APIRouter()


@router.get("")
async def search_flights(
    request: Request,
    service: FlightService = Depends(get_flight_service),
):
    """Search priced itineraries, cheapest first.

    Reads origin, destination, date, return_date, adults, children, infants,
    cabin, nonstop, currency, page and pageSize from the query string.
    """
    query = parse_flights_query(request.query_params)
    flights = await service.search(query)

    return JSONResponse(
        success_envelope([f.to_json() for f in flights], request.state.request_id),
        headers=NO_STORE_HEADERS,
    )

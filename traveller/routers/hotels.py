"""Hotel search router."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from traveller.dependencies import get_hotel_service
from traveller.schemas.envelope import NO_STORE_HEADERS, success_envelope
from traveller.schemas.queries import parse_hotels_query
from traveller.services.hotel_service import HotelService

router = APIRouter()


@router.get("")
async def search_hotels(
    request: Request,
    service: HotelService = Depends(get_hotel_service),
):
    """Search hotels by location name, Hotellook location id, or coordinates."""
    query = parse_hotels_query(request.query_params)
    hotels = await service.search(query)

    return JSONResponse(
        success_envelope([h.to_json() for h in hotels], request.state.request_id),
        headers=NO_STORE_HEADERS,
    )

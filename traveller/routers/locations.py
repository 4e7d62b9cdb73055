"""Location autocomplete router."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from traveller.dependencies import get_location_service
from traveller.schemas.envelope import success_envelope
from traveller.schemas.queries import parse_locations_query
from traveller.services.location_service import LocationService

router = APIRouter()


@router.get("")
async def search_locations(
    request: Request,
    service: LocationService = Depends(get_location_service),
):
    """Autocomplete airports and cities by name or code (q, type, limit)."""
    query = parse_locations_query(request.query_params)
    locations = await service.search(query)

    return JSONResponse(
        success_envelope([loc.to_json() for loc in locations], request.state.request_id),
        headers={"Cache-Control": "public, max-age=86400"},
    )

"""Location endpoints for the Civic Commons API."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from civic_commons.api.v1.dependencies import CurrentUserDep, LocationServiceDep
from civic_commons.schemas.location import LocationCreate, LocationView

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/", response_model=list[LocationView])
def list_locations(
    service: LocationServiceDep,
    city: str | None = None,
    country: str | None = None,
) -> list[LocationView]:
    """List locations with their coordinates, optionally by city and country."""
    return service.list_locations(city=city, country=country)


@router.post("/", response_model=LocationView, status_code=status.HTTP_201_CREATED)
def create_location(
    payload: LocationCreate,
    current_user: CurrentUserDep,
    service: LocationServiceDep,
    response: Response,
) -> LocationView:
    """Create a location, or return the one already stored for that city and country."""
    location, created = service.get_or_create_location(payload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return location

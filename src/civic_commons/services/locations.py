"""Lookup and registration of the places communities belong to."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from civic_commons.models import Coordinates, Location
from civic_commons.repositories.location_repo import LocationRepository
from civic_commons.schemas.location import LocationCreate, LocationView

logger = logging.getLogger(__name__)


class LocationService:
    """List locations and register new ones, reusing city/country matches."""

    def __init__(self, db: Session, repository: LocationRepository | None = None) -> None:
        self.db = db
        self.locations = repository or LocationRepository(db)

    def list_locations(
        self,
        city: str | None = None,
        country: str | None = None,
    ) -> list[LocationView]:
        return [
            LocationView.model_validate(location)
            for location in self.locations.list_all(city=city, country=country)
        ]

    def get_or_create_location(self, payload: LocationCreate) -> tuple[LocationView, bool]:
        """Return the location matching ``payload``'s city and country.

        A new location with its coordinates is stored when none matches.
        The boolean is ``True`` when a row was created.
        """
        existing = self.locations.find_by_city_country(payload.city, payload.country)
        if existing is not None:
            return LocationView.model_validate(existing), False

        location = Location(
            city=payload.city,
            state=payload.state,
            country=payload.country,
            address=payload.address,
            coordinates=Coordinates(latitude=payload.latitude, longitude=payload.longitude),
        )
        self.db.add(location)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Location %s created for %s, %s", location.id, location.city, location.country)
        return LocationView.model_validate(location), True

"""Data access helpers for locations."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from civic_commons.models.location import Location

__all__ = ["LocationRepository"]


class LocationRepository:
    """Query helpers for ``Location`` rows and their coordinates."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, location_id: str) -> Location | None:
        return self.session.get(Location, location_id)

    def list_all(self, city: str | None = None, country: str | None = None) -> list[Location]:
        """Return locations, filtered by exact city and/or country when given."""
        stmt = select(Location).options(selectinload(Location.coordinates))
        if city:
            stmt = stmt.where(Location.city == city)
        if country:
            stmt = stmt.where(Location.country == country)
        stmt = stmt.order_by(Location.country, Location.city, Location.id)
        return list(self.session.execute(stmt).scalars())

    def find_by_city_country(self, city: str, country: str) -> Location | None:
        stmt = (
            select(Location)
            .options(selectinload(Location.coordinates))
            .where(Location.city == city, Location.country == country)
            .order_by(Location.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

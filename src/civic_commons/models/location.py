"""SQLAlchemy models for places communities are scoped to."""

from __future__ import annotations

from sqlalchemy import Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from civic_commons.db.session import Base
from civic_commons.db.time import new_id


class Coordinates(Base):
    """A latitude/longitude pair in decimal degrees."""

    __tablename__ = "coordinates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class Location(Base):
    """City-level location, optionally pinned to coordinates."""

    __tablename__ = "location"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    city: Mapped[str] = mapped_column(Text, nullable=False, default="Unknown")
    state: Mapped[str] = mapped_column(Text, nullable=False, default="")
    country: Mapped[str] = mapped_column(Text, nullable=False, default="Unknown")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    coordinates_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("coordinates.id"), nullable=True
    )

    coordinates: Mapped[Coordinates | None] = relationship("Coordinates")

    @property
    def display_name(self) -> str:
        """Return "city, state, country" skipping empty parts."""
        return ", ".join(part for part in (self.city, self.state, self.country) if part)

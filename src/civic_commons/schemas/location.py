"""Location payloads and views."""

from pydantic import BaseModel, ConfigDict, Field


class CoordinatesIn(BaseModel):
    """Decimal-degree coordinates."""

    latitude: float = Field(0.0, ge=-90, le=90)
    longitude: float = Field(0.0, ge=-180, le=180)


class LocationData(BaseModel):
    """Fields used to create a location that does not exist yet."""

    city: str | None = None
    state: str | None = None
    country: str | None = None
    address: str | None = None


class LocationCreate(BaseModel):
    """Body of ``POST /locations``; missing fields fall back to placeholders."""

    city: str = "Unknown"
    state: str = ""
    country: str = "Unknown"
    address: str = ""
    latitude: float = Field(0.0, ge=-90, le=90)
    longitude: float = Field(0.0, ge=-180, le=180)


class CoordinatesView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    latitude: float
    longitude: float


class LocationView(BaseModel):
    """A location together with its coordinates, if any."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    city: str
    state: str
    country: str
    address: str
    display_name: str
    coordinates_id: str | None = None
    coordinates: CoordinatesView | None = None

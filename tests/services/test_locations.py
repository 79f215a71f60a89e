"""Tests for the location service."""

import pytest

from civic_commons.models import Coordinates, Location
from civic_commons.schemas.location import LocationCreate
from civic_commons.services.locations import LocationService


@pytest.fixture()
def location_service(db_session) -> LocationService:
    return LocationService(db_session)


@pytest.fixture()
def paris(db_session) -> Location:
    loc = Location(
        city="Paris",
        state="",
        country="France",
        address="Place de l'Hotel de Ville",
        coordinates=Coordinates(latitude=48.8566, longitude=2.3522),
    )
    db_session.add(loc)
    db_session.commit()
    return loc


class TestListLocations:
    def test_lists_all_with_coordinates(self, location_service, location, paris):
        """Test listing every location along with its coordinates."""
        views = location_service.list_locations()

        assert {view.id for view in views} == {location.id, paris.id}
        by_id = {view.id: view for view in views}
        assert by_id[paris.id].coordinates.latitude == pytest.approx(48.8566)
        assert by_id[location.id].display_name == "New York, NY, USA"

    def test_filters_by_city(self, location_service, location, paris):
        """Test that the city filter matches exactly."""
        views = location_service.list_locations(city="Paris")
        assert [view.id for view in views] == [paris.id]

    def test_filters_by_country(self, location_service, location, paris):
        """Test that the country filter matches exactly."""
        assert [view.id for view in location_service.list_locations(country="USA")] == [location.id]
        assert location_service.list_locations(city="Paris", country="USA") == []


class TestGetOrCreateLocation:
    def test_creates_location_with_coordinates(self, location_service, db_session):
        """Test that an unknown city/country becomes a new location."""
        view, created = location_service.get_or_create_location(
            LocationCreate(
                city="Lyon",
                country="France",
                address="1 Rue de la Republique",
                latitude=45.764,
                longitude=4.8357,
            )
        )

        assert created is True
        assert view.address == "1 Rue de la Republique"
        assert view.coordinates is not None
        assert view.coordinates.longitude == pytest.approx(4.8357)
        assert db_session.get(Location, view.id) is not None

    def test_reuses_existing_city_and_country(self, location_service, db_session, paris):
        """Test that a matching city and country returns the stored location."""
        view, created = location_service.get_or_create_location(
            LocationCreate(city="Paris", country="France", latitude=1.0, longitude=1.0)
        )

        assert created is False
        assert view.id == paris.id
        assert view.coordinates.latitude == pytest.approx(48.8566)
        assert db_session.query(Location).filter_by(city="Paris").count() == 1

    def test_defaults_to_placeholders(self, location_service):
        """Test that missing fields fall back to Unknown and zero coordinates."""
        view, created = location_service.get_or_create_location(LocationCreate())

        assert created is True
        assert (view.city, view.state, view.country, view.address) == ("Unknown", "", "Unknown", "")
        assert view.coordinates.latitude == 0.0

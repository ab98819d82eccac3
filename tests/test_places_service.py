from unittest.mock import Mock

import pytest
import requests

from tripquest.config import settings
from tripquest.models.itinerary import LatLng, Location, TravelInfo
from tripquest.services.places_service import (
    DIRECTIONS_API_URL, PLACES_API_BASE_URL, PlacesService, ProviderError, format_duration
)


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def places(session):
    return PlacesService(api_key='"maps-key"', timeout=5, session=session)


@pytest.mark.parametrize("raw, expected", [
    ("1260s", "21 mins"),
    ("59s", "1 min"),
    ("90s", "2 mins"),
    ("3600s", "60 mins"),
    ("soon", "soon"),
])
def test_format_duration(raw, expected):
    assert format_duration(raw) == expected


def test_key_quotes_are_stripped_and_availability(places):
    assert places.api_key == "maps-key"
    assert places.available is True
    assert PlacesService(api_key="").available is False


async def test_search_text_sends_query_bias_and_headers(places, session):
    session.request.return_value = _response({"places": [{"id": "abc"}, {"id": "def"}]})

    place_id = await places.search_text("Belem Tower, Lisbon", LatLng(lat=38.7, lng=-9.1), "pt")

    assert place_id == "abc"
    method, url = session.request.call_args.args
    kwargs = session.request.call_args.kwargs
    assert (method, url) == ("POST", f"{PLACES_API_BASE_URL}:searchText")
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["X-Goog-Api-Key"] == "maps-key"
    assert kwargs["headers"]["X-Goog-FieldMask"] == "places.id"
    assert kwargs["json"] == {
        "textQuery": "Belem Tower, Lisbon",
        "languageCode": "pt",
        "locationBias": {
            "circle": {
                "center": {"latitude": 38.7, "longitude": -9.1},
                "radius": settings.place_search_radius_m,
            }
        },
    }


async def test_search_without_results_returns_none(places, session):
    session.request.return_value = _response({})
    assert await places.search_text("Nowhere") is None
    assert "locationBias" not in session.request.call_args.kwargs["json"]


async def test_details_are_mapped_to_activity_fields(places, session):
    session.request.return_value = _response({
        "id": "abc",
        "rating": 4.7,
        "userRatingCount": 5321,
        "photos": [{"name": "places/abc/photos/1"}],
        "location": {"latitude": 38.69, "longitude": -9.21},
        "formattedAddress": "Av. Brasilia, Lisbon",
        "websiteUri": "https://example.org",
    })

    details = await places.get_details("abc", "en")

    assert session.request.call_args.args == ("GET", f"{PLACES_API_BASE_URL}/abc")
    assert session.request.call_args.kwargs["headers"]["X-Goog-Language-Code"] == "en"
    assert details == {
        "placeId": "abc",
        "rating": 4.7,
        "userRatingsTotal": 5321,
        "photos": [{"name": "places/abc/photos/1"}],
        "location": Location(latitude=38.69, longitude=-9.21),
        "formattedAddress": "Av. Brasilia, Lisbon",
        "websiteUri": "https://example.org",
    }


async def test_geocode_destination(places, session):
    session.request.return_value = _response({"places": [{"location": {"latitude": 35.01, "longitude": 135.77}}]})

    assert await places.geocode_destination("Kyoto") == LatLng(lat=35.01, lng=135.77)
    assert session.request.call_args.kwargs["headers"]["X-Goog-FieldMask"] == "places.location"


async def test_compute_route_formats_travel_info(places, session):
    session.request.return_value = _response({"routes": [{"duration": "1260s", "distanceMeters": 8200}]})

    travel = await places.compute_route(Location(latitude=1.0, longitude=2.0), Location(latitude=3.0, longitude=4.0))

    assert travel == TravelInfo(duration="21 mins", distanceMeters=8200)
    kwargs = session.request.call_args.kwargs
    assert session.request.call_args.args == ("POST", DIRECTIONS_API_URL)
    assert kwargs["json"]["origin"] == {"location": {"latLng": {"latitude": 1.0, "longitude": 2.0}}}
    assert kwargs["json"]["travelMode"] == "DRIVE"


async def test_no_route_returns_none(places, session):
    session.request.return_value = _response({"routes": []})
    assert await places.compute_route(Location(latitude=1, longitude=2), Location(latitude=3, longitude=4)) is None


async def test_transport_errors_become_provider_errors(places, session):
    session.request.side_effect = requests.ConnectionError("unreachable")

    with pytest.raises(ProviderError):
        await places.search_text("Belem Tower")


async def test_http_errors_become_provider_errors(places, session):
    response = _response({})
    response.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
    session.request.return_value = response

    with pytest.raises(ProviderError):
        await places.get_details("abc")

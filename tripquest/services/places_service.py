"""
Google Maps Platform adapters used to enrich generated activities.

Endpoints:
- Places API (New) text search:  POST places:searchText
- Places API (New) details:      GET  places/{placeId}
- Routes API:                    POST directions/v2:computeRoutes

All requests authenticate with the ``X-Goog-Api-Key`` header and restrict the
response with ``X-Goog-FieldMask``. ``requests`` is blocking, so every call is
pushed to a worker thread and awaited.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from tripquest.config import settings
from tripquest.models.itinerary import LatLng, Location, TravelInfo

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

PLACES_API_BASE_URL = "https://places.googleapis.com/v1/places"
DIRECTIONS_API_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"

DETAIL_FIELDS = ["id", "rating", "userRatingCount", "photos", "location", "formattedAddress", "websiteUri"]


class ProviderError(RuntimeError):
    """Raised when a Google Maps Platform request fails"""


def format_duration(duration: str) -> str:
    """Turn a Routes API duration such as ``"1260s"`` into ``"21 mins"``."""
    try:
        seconds = int(float(str(duration).rstrip("s")))
    except ValueError:
        return str(duration)
    minutes = max(1, round(seconds / 60))
    return f"{minutes} min" if minutes == 1 else f"{minutes} mins"


class PlacesService:
    """Thin client for place search, place details and driving routes"""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        key = settings.google_maps_api_key if api_key is None else api_key
        self.api_key = key.replace('"', "")
        self.timeout = timeout or settings.http_timeout_seconds
        self.session = session or requests.Session()

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _headers(self, field_mask: str, language: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": field_mask,
        }
        if language:
            headers["X-Goog-Language-Code"] = language
        return headers

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"{method} {url} failed: {e}") from e

    # -------------------------
    # Places
    # -------------------------
    def _search_text(self, query: str, location_bias: Optional[LatLng], language: Optional[str],
                     field_mask: str) -> Dict[str, Any]:
        body: Dict[str, Any] = {"textQuery": query}
        if language:
            body["languageCode"] = language
        if location_bias:
            body["locationBias"] = {
                "circle": {
                    "center": {"latitude": location_bias.lat, "longitude": location_bias.lng},
                    "radius": settings.place_search_radius_m,
                }
            }
        return self._request(
            "POST", f"{PLACES_API_BASE_URL}:searchText",
            json=body, headers=self._headers(field_mask)
        )

    async def search_text(self, query: str, location_bias: Optional[LatLng] = None,
                          language: Optional[str] = None) -> Optional[str]:
        """Return the id of the best text-search match, or None."""
        data = await asyncio.to_thread(self._search_text, query, location_bias, language, "places.id")
        places = data.get("places") or []
        return places[0].get("id") if places else None

    async def get_details(self, place_id: str, language: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Fetch rating, photos, location, address and website for a place id."""
        data = await asyncio.to_thread(
            self._request, "GET", f"{PLACES_API_BASE_URL}/{place_id}",
            headers=self._headers(",".join(DETAIL_FIELDS), language)
        )
        if not data:
            return None

        location = data.get("location")
        return {
            "placeId": data.get("id", place_id),
            "rating": data.get("rating"),
            "userRatingsTotal": data.get("userRatingCount"),
            "photos": data.get("photos"),
            "location": Location(**location) if location else None,
            "formattedAddress": data.get("formattedAddress"),
            "websiteUri": data.get("websiteUri"),
        }

    async def geocode_destination(self, destination: str) -> Optional[LatLng]:
        data = await asyncio.to_thread(self._search_text, destination, None, None, "places.location")
        places = data.get("places") or []
        location = places[0].get("location") if places else None
        if not location:
            return None
        return LatLng(lat=location["latitude"], lng=location["longitude"])

    # -------------------------
    # Routes
    # -------------------------
    async def compute_route(self, origin: Location, destination: Location) -> Optional[TravelInfo]:
        """Driving duration and distance between two points, or None when no route exists."""
        body = {
            "origin": {"location": {"latLng": origin.model_dump()}},
            "destination": {"location": {"latLng": destination.model_dump()}},
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
        }
        data = await asyncio.to_thread(
            self._request, "POST", DIRECTIONS_API_URL,
            json=body, headers=self._headers("routes.duration,routes.distanceMeters")
        )
        routes = data.get("routes") or []
        if not routes:
            return None
        route = routes[0]
        return TravelInfo(
            duration=format_duration(route.get("duration", "0s")),
            distanceMeters=int(route.get("distanceMeters", 0))
        )


_places_service_instance = None

def get_places_service() -> PlacesService:
    global _places_service_instance
    if _places_service_instance is None:
        _places_service_instance = PlacesService()
    return _places_service_instance

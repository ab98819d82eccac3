import random
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, TypeVar, Union

from tripquest.models.itinerary import (
    Activity, EnrichedActivity, Location, TravelInfo, TripPlanningRequest
)
from tripquest.services.places_service import PlacesService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

T = TypeVar("T")


async def resolve_or_fallback(
    primary: Callable[[], Awaitable[Optional[T]]],
    fallback: Callable[[], Union[Optional[T], Awaitable[Optional[T]]]],
    label: str = "provider call",
) -> Optional[T]:
    """
    Await ``primary``; when it returns None or raises, use ``fallback`` instead.

    ``fallback`` may be a plain value function or another coroutine function,
    which lets callers chain a broader lookup behind a narrow one. Errors from
    ``primary`` are logged and never propagate.
    """
    try:
        result = await primary()
    except Exception as e:
        logger.warning(f"{label} failed, using fallback: {e}")
        result = None

    if result is not None:
        return result

    value = fallback()
    if inspect.isawaitable(value):
        value = await value
    return value


def mock_place_id(activity: Activity) -> str:
    return "mock_place_id_for_" + "_".join(activity.activityName.split())


def mock_travel_info(rng: Any = random) -> TravelInfo:
    return TravelInfo(
        duration=f"{rng.randint(15, 59)} mins",
        distanceMeters=rng.randint(1000, 20999)
    )


class EnrichmentService:
    """Attach place data and travel times to generated activities"""

    def __init__(self, places: PlacesService, rng: Any = None):
        self.places = places
        self.rng = rng or random

    async def find_place_id(self, activity: Activity, trip: TripPlanningRequest) -> Optional[str]:
        if not self.places.available:
            logger.warning("GOOGLE_MAPS_API_KEY not set. Skipping place search. Returning mock data.")
            return mock_place_id(activity)

        async def specific():
            return await self.places.search_text(
                f"{activity.activityName}, {trip.destination}", trip.destinationLatLng, trip.language
            )

        async def broad():
            logger.info(f'Fallback search for "{activity.activityName}" in "{trip.destination}"')
            return await resolve_or_fallback(
                lambda: self.places.search_text(activity.activityName, trip.destinationLatLng, trip.language),
                lambda: None,
                label=f'place search "{activity.activityName}"'
            )

        return await resolve_or_fallback(
            specific, broad, label=f'place search "{activity.activityName}, {trip.destination}"'
        )

    async def enrich_activity(self, activity: Activity, trip: TripPlanningRequest) -> EnrichedActivity:
        enriched = EnrichedActivity(**activity.model_dump())

        place_id = await self.find_place_id(activity, trip)
        if not place_id:
            return enriched
        enriched.placeId = place_id

        if not self.places.available:
            return enriched

        details = await resolve_or_fallback(
            lambda: self.places.get_details(place_id, trip.language),
            lambda: None,
            label=f'place details "{place_id}"'
        )
        if details:
            enriched = enriched.model_copy(
                update={key: value for key, value in details.items() if value is not None}
            )
        return enriched

    async def get_travel_time(self, origin: Location, destination: Location) -> Optional[TravelInfo]:
        if not self.places.available:
            logger.warning("GOOGLE_MAPS_API_KEY not set. Synthesizing travel time.")
            return mock_travel_info(self.rng)

        return await resolve_or_fallback(
            lambda: self.places.compute_route(origin, destination),
            lambda: None,
            label="route computation"
        )

    async def enrich_itinerary_day(
        self, activities: List[Activity], trip: TripPlanningRequest
    ) -> List[EnrichedActivity]:
        """
        Enrich a day's activities in order and link consecutive ones with travel times.

        Never raises: provider failures keep the generated activity as-is.
        """
        enriched_activities = []
        for activity in activities:
            enriched_activities.append(await self.enrich_activity(activity, trip))

        for current, following in zip(enriched_activities, enriched_activities[1:]):
            if current.location and following.location:
                travel = await self.get_travel_time(current.location, following.location)
                if travel:
                    current.travelToNext = travel

        return enriched_activities

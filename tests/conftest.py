import random
from datetime import date

import pytest

from tripquest.config import settings
from tripquest.models.itinerary import TripPlanningRequest
from tripquest.services.catalog_service import Catalog, load_catalog_from_file
from tripquest.services.enrichment_service import EnrichmentService
from tripquest.services.places_service import PlacesService

ARRIVAL = settings.arrival_module_id
DEPARTURE = settings.departure_module_id


def _module(module_id, seasons=("all",)):
    return {
        "id": module_id,
        "name": module_id.replace("-", " ").title(),
        "narrative": f"Narrative for {module_id}.",
        "activities": [
            {"type": "morning", "prompt_text": f"suggest a morning for {module_id}.", "keywords": ["walk"]},
            {"type": "evening", "prompt_text": f"suggest an evening for {module_id}.", "keywords": ["dinner"]},
        ],
        "applicable_seasons": list(seasons),
    }


@pytest.fixture
def catalog() -> Catalog:
    return load_catalog_from_file(settings.catalog_path)


@pytest.fixture
def small_catalog() -> Catalog:
    return Catalog.from_dict({
        "personas": [
            {
                "id": "tester",
                "name": "Tester",
                "introduction": "Off we go.",
                "conclusion": "Until next time.",
                "available_modules": [ARRIVAL, "module-a", "module-b", DEPARTURE],
            },
            {
                "id": "snowbird",
                "name": "Snowbird",
                "available_modules": [ARRIVAL, "module-snow", DEPARTURE],
            },
        ],
        "itinerary_modules": [
            _module(ARRIVAL),
            _module("module-a"),
            _module("module-b"),
            _module("module-snow", seasons=("winter",)),
            _module(DEPARTURE),
        ],
        "quiz_questions": [],
    })


@pytest.fixture
def trip() -> TripPlanningRequest:
    return TripPlanningRequest(
        destination="Lisbon",
        startDate=date(2025, 4, 10),
        endDate=date(2025, 4, 12),
        budget=900,
        currency="EUR",
        theme="urban-explorer",
        groupSize=2,
        transport="public transport",
    )


@pytest.fixture
def five_day_trip() -> TripPlanningRequest:
    return TripPlanningRequest(
        destination="Kyoto",
        startDate=date(2025, 1, 6),
        endDate=date(2025, 1, 10),
        budget=1000,
        currency="USD",
        theme="tester",
    )


@pytest.fixture
def offline_places() -> PlacesService:
    return PlacesService(api_key="")


@pytest.fixture
def offline_enrichment(offline_places) -> EnrichmentService:
    return EnrichmentService(offline_places, rng=random.Random(7))

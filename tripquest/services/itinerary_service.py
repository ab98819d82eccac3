import re
import uuid
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from tripquest.config import settings
from tripquest.models.catalog import ItineraryModule, Persona
from tripquest.models.itinerary import (
    CostBreakdown, Destination, EnrichedActivity, Itinerary, ItineraryDay,
    PersonaSnapshot, TripPlanningRequest
)
from tripquest.services.catalog_service import Catalog, get_catalog
from tripquest.services.enrichment_service import EnrichmentService, resolve_or_fallback
from tripquest.services.itinerary_parser import parse_itinerary_day
from tripquest.services.llm_service import LLMConfig, SystemInstructions
from tripquest.services.module_selector import select_itinerary_modules
from tripquest.services.places_service import PlacesService
from tripquest.services.prompt_service import construct_day_prompt
from tripquest.services.season import get_season
from tripquest.services.translation_service import TranslationService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# activity category (lower-cased) -> CostBreakdown field
# Miscellaneous counts toward the total; whether it should is an open product
# question. Categories outside this map are dropped from the breakdown.
CATEGORY_FIELDS = {
    "food": "food",
    "transport": "transport",
    "accommodation": "accommodation",
    "activity": "activities",
    "miscellaneous": "miscellaneous",
}

_NON_NUMERIC = re.compile(r"[^0-9.\-]+")
_LEADING_NUMBER = re.compile(r"-?(\d+(\.\d*)?|\.\d+)")


class ItineraryTimeoutError(TimeoutError):
    """Raised when a whole itinerary does not finish within the configured deadline"""


def parse_cost(value: Any) -> float:
    """
    Read a number out of a free-text cost such as ``"$1,250"`` or ``"50-80 EUR"``.
    Non-numeric characters are dropped and the leading number is used; text
    without digits counts as 0.
    """
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", str(value)))
    return float(match.group()) if match else 0.0


def compute_day_cost(activities: Iterable[EnrichedActivity]) -> float:
    return sum(parse_cost(activity.approximateCost) for activity in activities)


def compute_cost_breakdown(days: Iterable[ItineraryDay], budget: float) -> CostBreakdown:
    """
    Fold every activity cost into its category total. Activities whose category
    is not one of the five known ones are left out of the breakdown and total.
    """
    totals = {field: 0.0 for field in CATEGORY_FIELDS.values()}
    for day in days:
        for activity in day.activities:
            field = CATEGORY_FIELDS.get((activity.category or "").strip().lower())
            if field is None:
                continue
            totals[field] += parse_cost(activity.approximateCost)

    total = sum(totals.values())
    return CostBreakdown(
        **totals,
        total=total,
        isOverBudget=total > budget,
        overageAmount=max(0.0, total - budget)
    )


@dataclass
class DayResult:
    """Outcome of generating one day"""
    day: ItineraryDay
    day_cost: float
    remaining_budget: float
    attempts: int
    blocked: bool = False


class ItineraryService:
    """Generate persona-driven itineraries day by day under a soft budget constraint"""

    def __init__(
        self,
        llm_service,
        enrichment: EnrichmentService,
        translation: Optional[TranslationService] = None,
        places: Optional[PlacesService] = None,
        catalog: Optional[Catalog] = None,
        llm_config: Optional[LLMConfig] = None,
        rng=None,
    ):
        self.llm_service = llm_service
        self.enrichment = enrichment
        self.translation = translation
        self.places = places
        self.catalog = catalog or get_catalog()
        self.llm_config = llm_config or LLMConfig(model=settings.gemini_model, json_output=True)
        self.rng = rng
        self.max_attempts = settings.max_generation_attempts
        self.retry_threshold = settings.budget_retry_threshold

    async def generate_single_day(
        self,
        day_number: int,
        module: ItineraryModule,
        trip: TripPlanningRequest,
        persona: Persona,
        remaining_budget: float,
        total_days: int,
    ) -> DayResult:
        """
        Generate, parse and enrich one day, retrying once with a stricter prompt
        when the day costs more than ``retry_threshold`` times the average daily
        budget.

        A blocked or empty model response ends the day immediately. After the
        last attempt the day is accepted even if it is still over budget.
        """
        average_daily_budget = trip.budget / total_days
        activities: List[EnrichedActivity] = []
        day_cost = 0.0
        attempts = 0
        blocked = False

        while attempts < self.max_attempts:
            attempts += 1
            prompt = construct_day_prompt(
                persona, trip, module, day_number, remaining_budget, total_days,
                is_retry=attempts > 1
            )
            logger.info(f"Generating day {day_number} (attempt {attempts}/{self.max_attempts}) with {module.id}")

            response = await self.llm_service.generate_content(
                user_message=prompt,
                system_instruction=SystemInstructions.trip_planner(),
                config=self.llm_config
            )

            if not response.success or response.blocked or not response.content:
                reason = response.error or response.block_reason or "empty response"
                logger.warning(f"Prompt for day {day_number} was blocked or empty ({reason}). Skipping day.")
                blocked = True
                break

            parsed = parse_itinerary_day(response.content)
            activities = await self.enrichment.enrich_itinerary_day(parsed, trip)
            day_cost = compute_day_cost(activities)

            if day_cost <= average_daily_budget * self.retry_threshold:
                break
            logger.warning(
                f"Day {day_number} is over budget (Cost: {day_cost}, Avg Daily: {average_daily_budget:.2f})."
                + (" Retrying..." if attempts < self.max_attempts else " Accepting anyway.")
            )

        day = ItineraryDay(
            day=day_number,
            moduleId=module.id,
            moduleName=module.name,
            narrative=module.narrative,
            activities=activities
        )
        return DayResult(
            day=day,
            day_cost=day_cost,
            remaining_budget=remaining_budget - day_cost,
            attempts=attempts,
            blocked=blocked
        )

    async def _build_title(self, persona: Persona, trip: TripPlanningRequest) -> str:
        title = f"A {persona.name}'s trip to {trip.destination}"
        if not self.translation or trip.language == "en":
            return title
        translated = await resolve_or_fallback(
            lambda: self.translation.translate([title], trip.language),
            lambda: [title],
            label=f"title translation to '{trip.language}'"
        )
        if not translated or translated == [title]:
            logger.warning("Trip title left untranslated")
            return title
        return translated[0]

    async def _resolve_destination(self, trip: TripPlanningRequest) -> TripPlanningRequest:
        if trip.destinationLatLng or not self.places or not self.places.available:
            return trip
        lat_lng = await resolve_or_fallback(
            lambda: self.places.geocode_destination(trip.destination),
            lambda: None,
            label=f'geocoding "{trip.destination}"'
        )
        if lat_lng is None:
            logger.warning(f'Could not geocode "{trip.destination}", place searches will not be location-biased')
            return trip
        return trip.model_copy(update={"destinationLatLng": lat_lng})

    async def generate_itinerary(self, trip: TripPlanningRequest, persona: Persona) -> Itinerary:
        """
        Run the full pipeline: pick a module per day, generate the days in
        order while carrying the remaining budget forward, then total the costs.
        """
        trip = await self._resolve_destination(trip)
        total_days = trip.duration_in_days
        season = get_season(trip.startDate)

        module_sequence = select_itinerary_modules(
            persona, self.catalog.all_modules(), total_days, trip.startDate, rng=self.rng
        )
        logger.info(f"Selected module sequence for {season}: {module_sequence}")

        days: List[ItineraryDay] = []
        day_attempts: Dict[int, int] = {}
        remaining_budget = trip.budget

        for index, module_id in enumerate(module_sequence):
            day_number = index + 1
            module = self.catalog.get_module(module_id)
            if module is None:
                logger.warning(f"Module with id '{module_id}' not found. Skipping day {day_number}.")
                continue

            result = await self.generate_single_day(
                day_number, module, trip, persona, remaining_budget, total_days
            )
            remaining_budget = result.remaining_budget
            day_attempts[day_number] = result.attempts
            days.append(result.day)

        cost_breakdown = compute_cost_breakdown(days, trip.budget)
        title = await self._build_title(persona, trip)

        return Itinerary(
            title=title,
            request=trip,
            destination=Destination(name=trip.destination, latLng=trip.destinationLatLng),
            personaSnapshot=PersonaSnapshot(
                personaId=persona.id,
                primaryPersona=persona.name,
                moduleDNA=module_sequence,
                introduction=persona.introduction,
                conclusion=persona.conclusion
            ),
            costBreakdown=cost_breakdown,
            days=days,
            meta={
                "generatedAt": datetime.now(timezone.utc).isoformat(),
                "generatedBy": "ItineraryService",
                "llmTraceId": f"trace_{uuid.uuid4().hex[:12]}",
                "model": self.llm_config.model,
                "season": season,
                "dayAttempts": day_attempts,
                "remainingBudget": remaining_budget
            }
        )

    async def plan_trip(self, trip: TripPlanningRequest, deadline_seconds: Optional[float] = None) -> Itinerary:
        """Resolve the persona for ``trip.theme`` and generate within the overall deadline."""
        persona = self.catalog.get_persona(trip.theme)
        deadline = deadline_seconds or settings.itinerary_deadline_seconds

        logger.info(
            f"Generating itinerary for {trip.destination}, {trip.duration_in_days} days, "
            f"budget: {trip.budget} {trip.currency}, persona: {persona.id}"
        )
        try:
            return await asyncio.wait_for(self.generate_itinerary(trip, persona), timeout=deadline)
        except asyncio.TimeoutError as e:
            raise ItineraryTimeoutError(f"Itinerary generation exceeded {deadline}s") from e

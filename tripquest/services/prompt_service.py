from typing import List

from tripquest.models.catalog import ItineraryModule, Persona
from tripquest.models.itinerary import TripPlanningRequest

ACTIVITY_CATEGORIES = ["Food", "Activity", "Transport", "Accommodation", "Miscellaneous"]

RETRY_INSTRUCTION = (
    " PREVIOUS ATTEMPT WAS OVER BUDGET. BE MORE STRICT WITH COSTS AND FIND CHEAPER ALTERNATIVES."
)


def _role_and_persona(persona: Persona, trip: TripPlanningRequest) -> str:
    return (
        f"You are a travel expert for a {persona.name} visiting {trip.destination}. "
        "Your goal is to provide a narrative-driven itinerary. All recommendations must be "
        "authentic and culturally significant. The user has requested all output to be in "
        f"the following language: {trip.language}."
    )


def _trip_context(
    trip: TripPlanningRequest,
    day_number: int,
    remaining_budget: float,
    total_days: int,
    is_retry: bool,
) -> str:
    parts: List[str] = [
        f"The destination is {trip.destination}.",
        f"The trip is for {total_days} days, and today is Day {day_number}.",
        f"The total trip budget was {trip.budget:g} {trip.currency}, and the remaining budget "
        f"for the rest of the trip is approximately {remaining_budget:.2f} {trip.currency}.",
        f"The group size is {trip.groupSize}.",
        f"The preferred transport is {trip.transport or 'no particular preference'}.",
    ]
    if trip.accommodation:
        parts.append(f"The preferred accommodation is {trip.accommodation}.")
    parts.append(f"All cost estimates must be in {trip.currency}.")
    parts.append("Plan today's activities wisely within this remaining budget context.")

    context = " ".join(parts)
    if is_retry:
        context += RETRY_INSTRUCTION
    return context


def _output_instructions(day_number: int, language: str) -> str:
    categories = ", ".join(f'"{c}"' for c in ACTIVITY_CATEGORIES)
    return (
        "Provide the structured data for the itinerary as a single JSON object. "
        f'The top-level key must be "Day{day_number}". Inside this object, create nested objects '
        'for the time of day. The keys for these nested objects MUST be the translation of '
        f'"Morning", "Afternoon", and "Evening" into {language}. Each of these nested objects must '
        'contain the following keys: "activityName", "description", "approximateCost", '
        '"suggestedDuration", and "category". '
        f"All text values in the JSON object MUST be in {language}.\n\n"
        f'The "category" must be one of the following strings: {categories}.\n\n'
        "Do not provide any other information or introductory text. Only the JSON object."
    )


def construct_day_prompt(
    persona: Persona,
    trip: TripPlanningRequest,
    module: ItineraryModule,
    day_number: int,
    remaining_budget: float,
    total_days: int,
    is_retry: bool = False,
) -> str:
    """
    Build the generation prompt for a single itinerary day.

    The prompt is made of five blocks: persona framing, trip context (with the
    remaining budget and, on a retry, a stricter cost instruction), the module
    narrative, the module's activity prompts and the JSON output contract.
    """
    module_narrative = f"Today's narrative is: '{module.narrative.strip()}'"
    activity_prompts = " ".join(
        f"For the {activity.type}, {activity.prompt_text}" for activity in module.activities
    )

    return "\n\n".join([
        _role_and_persona(persona, trip),
        _trip_context(trip, day_number, remaining_budget, total_days, is_retry),
        module_narrative,
        activity_prompts,
        _output_instructions(day_number, trip.language),
    ])

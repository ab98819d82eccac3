import random
import logging
from datetime import date
from typing import Iterable, List, Optional

from tripquest.config import settings
from tripquest.models.catalog import ItineraryModule, Persona
from tripquest.services.season import get_season

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def select_itinerary_modules(
    persona: Persona,
    all_modules: Iterable[ItineraryModule],
    duration_in_days: int,
    start_date: date,
    rng: Optional[random.Random] = None,
    arrival_module: Optional[str] = None,
    departure_module: Optional[str] = None,
) -> List[str]:
    """
    Select one module id per trip day for a persona.

    Day 1 is always the arrival module and the last day the departure module.
    Interior days are drawn at random from the persona's modules that apply to
    the season of ``start_date``, never picking the same pool entry twice in a
    row when the pool has more than one module.

    Args:
        persona: Persona whose ``available_modules`` bound the selection
        all_modules: Full module catalog
        duration_in_days: Number of trip days
        start_date: Trip start date, used for the seasonal filter
        rng: Random source (defaults to the ``random`` module)
        arrival_module: Override for the arrival bookend id
        departure_module: Override for the departure bookend id

    Returns:
        Module ids in day order
    """
    if duration_in_days <= 0:
        return []

    rng = rng or random
    arrival = arrival_module or settings.arrival_module_id
    departure = departure_module or settings.departure_module_id

    if duration_in_days == 1:
        return [arrival]
    if duration_in_days == 2:
        return [arrival, departure]

    season = get_season(start_date)
    persona_ids = list(persona.available_modules)
    bookends = {arrival, departure}

    pool = [
        module for module in all_modules
        if module.id in persona_ids
        and module.id not in bookends
        and module.applies_to(season)
    ]

    days_to_fill = duration_in_days - 2

    if not pool:
        fallback = next((mid for mid in persona_ids if mid not in bookends), None)
        if fallback is None:
            fallback = persona_ids[0] if persona_ids else arrival
        logger.warning(
            f"No {season} modules for persona '{persona.id}', repeating '{fallback}' for {days_to_fill} days"
        )
        return [arrival] + [fallback] * days_to_fill + [departure]

    sequence = [arrival]
    last_index = -1
    for _ in range(days_to_fill):
        index = rng.randrange(len(pool))
        # repetition guard: step to the neighbour when the draw repeats
        if len(pool) > 1 and index == last_index:
            index = (index + 1) % len(pool)
        sequence.append(pool[index].id)
        last_index = index
    sequence.append(departure)

    return sequence

import json
import logging
from typing import List

from tripquest.models.itinerary import Activity

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

ACTIVITY_FIELDS = ("activityName", "description", "approximateCost", "suggestedDuration", "category")


def _strip_code_fence(raw_text: str) -> str:
    content = raw_text.strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def parse_itinerary_day(raw_text: str) -> List[Activity]:
    """
    Parse a model response of the form ``{"DayN": {"<time of day>": {...}}}``.

    Returns one Activity per time-of-day entry, in the order the model emitted
    them. Missing fields default to "N/A". Anything that is not a JSON object
    with an object under its first key yields an empty list.
    """
    try:
        day_data = json.loads(_strip_code_fence(raw_text or ""))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse itinerary day JSON: {e}")
        return []

    if not isinstance(day_data, dict) or not day_data:
        logger.error("Itinerary day JSON is not a non-empty object")
        return []

    day_key = next(iter(day_data))
    time_of_day_activities = day_data[day_key]
    if not isinstance(time_of_day_activities, dict):
        logger.error(f"Value under '{day_key}' is not an object")
        return []

    activities = []
    for time_of_day, activity_data in time_of_day_activities.items():
        if not isinstance(activity_data, dict):
            activity_data = {}
        fields = {}
        for field in ACTIVITY_FIELDS:
            value = activity_data.get(field)
            fields[field] = str(value) if value not in (None, "") else "N/A"
        activities.append(Activity(timeOfDay=time_of_day, **fields))

    return activities

from datetime import date
from typing import Union

SEASONS = ("spring", "summer", "monsoon", "autumn", "winter")


def get_season(when: Union[date, int]) -> str:
    """
    Map a trip start date (or a 1-12 calendar month) to a coarse season.

    The bands follow a South Asian calendar: Mar-May spring, Jun-Jul summer,
    Aug-Sep monsoon, Oct-Nov autumn, Dec-Feb winter.
    """
    month = when.month if isinstance(when, date) else when
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 7:
        return "summer"
    if 8 <= month <= 9:
        return "monsoon"
    if 10 <= month <= 11:
        return "autumn"
    return "winter"

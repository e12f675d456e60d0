"""Month names and calendar validation shared by the date extractors."""

from pydantic import ValidationError

from ..errors import MalformedDateError
from ..models.fact import MAX_YEAR, MIN_YEAR, MONTH_NAMES, CalendarDate

MONTH_PATTERN = "(" + "|".join(MONTH_NAMES) + ")"

_MONTH_NUMBERS = {name.lower(): index for index, name in enumerate(MONTH_NAMES)}


def month_number(name: str) -> int:
    """Map a month name to its zero-based index.

    Raises:
        MalformedDateError: If the name is not a month
    """
    try:
        return _MONTH_NUMBERS[name.strip().lower()]
    except KeyError:
        raise MalformedDateError(f"Unknown month name: {name!r}")


def build_calendar_date(
    year: int,
    month: int,
    day: int,
    min_year: int = MIN_YEAR,
    max_year: int = MAX_YEAR,
) -> CalendarDate:
    """Build a validated date or raise ``MalformedDateError``.

    Checks the configured year bounds, then leaves the real-date check
    (February 30 and friends) to ``CalendarDate`` itself.
    """
    if not min_year <= year <= max_year:
        raise MalformedDateError(f"Year {year} outside {min_year}-{max_year}")
    try:
        return CalendarDate(year=year, month=month, day=day)
    except ValidationError as e:
        raise MalformedDateError(f"Invalid date {year}-{month + 1}-{day}: {e}")

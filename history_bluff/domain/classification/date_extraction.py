"""Date extraction from descriptive text.

Extractors run in priority order and the first one whose pattern matches
decides: its date is validated and either returned or rejected, later
extractors are not consulted. Ranges resolve to their start date and mark
the title with "Start of".
"""

import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Callable, List, Optional, Tuple

from ..models.fact import MAX_YEAR, MIN_YEAR, CalendarDate
from .calendar_dates import MONTH_PATTERN, build_calendar_date, month_number

START_PREFIX = "Start of"

DASH = r"[-–—]"
RELEASE_VERB = r"\b(?:released|published|premiered|launched)\b"

YearMonthDay = Tuple[int, int, int]


@dataclass(frozen=True)
class DateExtractor:
    """A named pattern plus the groups that make up its date."""

    name: str
    pattern: Pattern
    build: Callable[[Match], YearMonthDay]
    title_prefix: Optional[str] = None


@dataclass(frozen=True)
class DateMatch:
    """A validated date and the extractor that produced it."""

    calendar_date: CalendarDate
    extractor: str
    title_prefix: Optional[str] = None

    def apply_prefix(self, title: str) -> str:
        return f"{self.title_prefix} {title}" if self.title_prefix else title


def _month_day_year(month: int, day: int, year: int) -> Callable[[Match], YearMonthDay]:
    """Builder reading (year, month, day) from the given group numbers."""
    def build(match: Match) -> YearMonthDay:
        return (
            int(match.group(year)),
            month_number(match.group(month)),
            int(match.group(day)),
        )
    return build


def _january_first(year: int) -> Callable[[Match], YearMonthDay]:
    def build(match: Match) -> YearMonthDay:
        return int(match.group(year)), 0, 1
    return build


def _compile(pattern: str) -> Pattern:
    return re.compile(pattern, re.IGNORECASE)


EXTRACTORS: List[DateExtractor] = [
    # "January 5-8, 1942"
    DateExtractor(
        name="month_day_range",
        pattern=_compile(rf"\b{MONTH_PATTERN}\s+(\d{{1,2}})\s*{DASH}\s*(\d{{1,2}}),?\s+(\d{{3,4}})\b"),
        build=_month_day_year(month=1, day=2, year=4),
        title_prefix=START_PREFIX,
    ),
    # "5-8 January 1942"
    DateExtractor(
        name="day_range_month",
        pattern=_compile(rf"\b(\d{{1,2}})\s*{DASH}\s*(\d{{1,2}})\s+{MONTH_PATTERN}\s+(\d{{3,4}})\b"),
        build=_month_day_year(month=3, day=1, year=4),
        title_prefix=START_PREFIX,
    ),
    # "January 5 to February 8, 1942"
    DateExtractor(
        name="cross_month_range",
        pattern=_compile(
            rf"\b{MONTH_PATTERN}\s+(\d{{1,2}})\s+(?:to|{DASH})\s+{MONTH_PATTERN}\s+(\d{{1,2}}),?\s+(\d{{3,4}})\b"
        ),
        build=_month_day_year(month=1, day=2, year=5),
        title_prefix=START_PREFIX,
    ),
    # "was released from January 5-8, 1942"
    DateExtractor(
        name="release_month_day_range",
        pattern=_compile(
            rf"{RELEASE_VERB}.*?\b(?:from|on)\s+{MONTH_PATTERN}\s+(\d{{1,2}})\s*{DASH}\s*(\d{{1,2}}),?\s+(\d{{4}})\b"
        ),
        build=_month_day_year(month=1, day=2, year=4),
        title_prefix=START_PREFIX,
    ),
    # "published on 5-8 January 1942"
    DateExtractor(
        name="release_day_range_month",
        pattern=_compile(
            rf"{RELEASE_VERB}.*?\b(?:from|on)\s+(\d{{1,2}})\s*{DASH}\s*(\d{{1,2}})\s+{MONTH_PATTERN}\s+(\d{{4}})\b"
        ),
        build=_month_day_year(month=3, day=1, year=4),
        title_prefix=START_PREFIX,
    ),
    # "was released on January 15, 1942"
    DateExtractor(
        name="release_date",
        pattern=_compile(rf"{RELEASE_VERB}.*?\b(?:in|on)\s+{MONTH_PATTERN}\s+(\d{{1,2}}),?\s+(\d{{4}})\b"),
        build=_month_day_year(month=1, day=2, year=3),
    ),
    # "January 15, 1942"
    DateExtractor(
        name="month_day_year",
        pattern=_compile(rf"\b{MONTH_PATTERN}\s+(\d{{1,2}}),?\s+(\d{{3,4}})\b"),
        build=_month_day_year(month=1, day=2, year=3),
    ),
    # "15 January 1942"
    DateExtractor(
        name="day_month_year",
        pattern=_compile(rf"\b(\d{{1,2}})\s+{MONTH_PATTERN}\s+(\d{{3,4}})\b"),
        build=_month_day_year(month=2, day=1, year=3),
    ),
    # "1939-1945": war durations and other long events
    DateExtractor(
        name="year_range",
        pattern=_compile(rf"\b(\d{{4}})\s*{DASH}\s*(\d{{4}})\b"),
        build=_january_first(year=1),
        title_prefix=START_PREFIX,
    ),
    # "began in 1873"
    DateExtractor(
        name="year_near_start_verb",
        pattern=_compile(r"\b(?:began|started|commenced|fought|took place|occurred)\b.*?\b(\d{4})\b"),
        build=_january_first(year=1),
    ),
]


def extract_event_date(
    text: str,
    min_year: int = MIN_YEAR,
    max_year: int = MAX_YEAR,
    extractors: Optional[List[DateExtractor]] = None,
) -> Optional[DateMatch]:
    """Find the date an event took place.

    Args:
        text: Descriptive text of the page
        min_year: Earliest acceptable year
        max_year: Latest acceptable year
        extractors: Extractor table, defaults to ``EXTRACTORS``

    Returns:
        The match of the first extractor that fires, or None

    Raises:
        MalformedDateError: If the first firing extractor yields an invalid date
    """
    if not text:
        return None

    for extractor in extractors or EXTRACTORS:
        match = extractor.pattern.search(text)
        if not match:
            continue
        year, month, day = extractor.build(match)
        calendar_date = build_calendar_date(year, month, day, min_year, max_year)
        return DateMatch(
            calendar_date=calendar_date,
            extractor=extractor.name,
            title_prefix=extractor.title_prefix,
        )

    return None

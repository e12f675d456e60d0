"""Biographical pages: turn a person into their birth or death event."""

import re
from dataclasses import dataclass
from typing import List, Optional

from ..models.fact import MAX_YEAR, MIN_YEAR, CalendarDate, Fact
from ..ports.fact_source import PageDetails
from .calendar_dates import MONTH_PATTERN, build_calendar_date, month_number
from .event_gate import has_event_indicator

PERSON_ROLES = (
    "person|politician|writer|author|artist|musician|actor|actress|scientist"
    "|philosopher|composer|director|inventor|explorer|emperor|empress|king|queen"
    "|president|general|painter|poet|polymath|mathematician|physicist|chemist"
    "|monarch|pope|saint|statesman|military leader|singer|songwriter|athlete"
)

PERSON_PHRASE = re.compile(
    rf"\b(?:was|is) an? (?:[\w'-]+ ){{0,3}}?(?:{PERSON_ROLES})\b", re.IGNORECASE
)
BIRTH_LANGUAGE = re.compile(r"\b(?:was born|born in|born on)\b", re.IGNORECASE)
DEATH_LANGUAGE = re.compile(r"\b(?:died|death)\b", re.IGNORECASE)

DMY = rf"(\d{{1,2}})\s+{MONTH_PATTERN}\s+(\d{{3,4}})"
MDY = rf"{MONTH_PATTERN}\s+(\d{{1,2}}),?\s+(\d{{3,4}})"
DASH = r"\s*[-–—]\s*"

# "Leonardo da Vinci (15 April 1452 – 2 May 1519) was ..."
LIFESPAN = re.compile(rf"\([^()]*?\b(?:{DMY}|{MDY}){DASH}[^()]*\)", re.IGNORECASE)


@dataclass(frozen=True)
class _LifePattern:
    label: str
    pattern: re.Pattern
    day_first: bool


LIFE_PATTERNS: List[_LifePattern] = [
    _LifePattern("Birth", re.compile(rf"\b(?:was )?born\s+(?:on\s+)?{DMY}\b", re.IGNORECASE), True),
    _LifePattern("Birth", re.compile(rf"\b(?:was )?born\s+(?:on\s+)?{MDY}\b", re.IGNORECASE), False),
    _LifePattern("Birth", re.compile(rf"\([^()]*?\b{DMY}{DASH}", re.IGNORECASE), True),
    _LifePattern("Birth", re.compile(rf"\([^()]*?\b{MDY}{DASH}", re.IGNORECASE), False),
    _LifePattern("Death", re.compile(rf"\b(?:died|death)\s+(?:on\s+)?{DMY}\b", re.IGNORECASE), True),
    _LifePattern("Death", re.compile(rf"\b(?:died|death)\s+(?:on\s+)?{MDY}\b", re.IGNORECASE), False),
    _LifePattern("Death", re.compile(rf"{DASH}{DMY}\s*\)", re.IGNORECASE), True),
    _LifePattern("Death", re.compile(rf"{DASH}{MDY}\s*\)", re.IGNORECASE), False),
]


def looks_biographical(text: str) -> bool:
    """Check whether a page describes a person.

    Person phrasing is enough, and so is birth or death wording; a
    battle page that mentions a king's death is treated as a biography.
    A lifespan in parentheses only counts when the text has no event
    wording: a war also opens with "(1 September 1939 – 2 September 1945)".
    """
    if not text:
        return False
    if PERSON_PHRASE.search(text) or BIRTH_LANGUAGE.search(text) or DEATH_LANGUAGE.search(text):
        return True
    if has_event_indicator(text):
        return False
    return bool(LIFESPAN.search(text))


def extract_life_event(
    text: str,
    min_year: int = MIN_YEAR,
    max_year: int = MAX_YEAR,
) -> Optional[tuple]:
    """Find a complete birth date, falling back to a death date.

    Returns:
        ("Birth" | "Death", CalendarDate), or None when no complete date

    Raises:
        MalformedDateError: If the first matching date is not a real date
    """
    for life in LIFE_PATTERNS:
        match = life.pattern.search(text)
        if not match:
            continue
        if life.day_first:
            day, month_name, year = match.group(1), match.group(2), match.group(3)
        else:
            month_name, day, year = match.group(1), match.group(2), match.group(3)
        calendar_date: CalendarDate = build_calendar_date(
            int(year), month_number(month_name), int(day), min_year, max_year
        )
        return life.label, calendar_date
    return None


def biographical_fact(
    details: PageDetails,
    min_year: int = MIN_YEAR,
    max_year: int = MAX_YEAR,
) -> Optional[Fact]:
    """Turn a person's page into "Birth of X", or "Death of X" as fallback.

    Args:
        details: Page already known to look biographical
        min_year: Earliest acceptable year
        max_year: Latest acceptable year

    Returns:
        The life event as a fact, or None when no complete date is found

    Raises:
        MalformedDateError: If the first matching date is not a real date
    """
    life_event = extract_life_event(details.extract or "", min_year, max_year)
    if life_event is None:
        return None
    label, calendar_date = life_event
    return Fact(
        title=f"{label} of {details.title}",
        calendar_date=calendar_date,
        source_url=details.url,
        summary=(details.extract or "")[:1000] or None,
    )

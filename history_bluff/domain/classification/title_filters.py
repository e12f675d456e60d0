"""Title and query filters applied before any page is fetched."""

import re

from .calendar_dates import MONTH_PATTERN

BARE_YEAR_QUERY = re.compile(r"^\d+\s*(BC|AD|BCE|CE)?$", re.IGNORECASE)

# Titles naming calendrical groupings or meta pages rather than an occurrence,
# e.g. "21st century", "1990s", "January 2020", "List of wars".
META_TITLE_PATTERNS = [
    re.compile(r"^(List of|Timeline of|Category:|Index of)", re.IGNORECASE),
    re.compile(r"^\d+(st|nd|rd|th) century$", re.IGNORECASE),
    re.compile(r"^\d+(st|nd|rd|th) millennium$", re.IGNORECASE),
    re.compile(r"^\d{1,4}s?$", re.IGNORECASE),
    re.compile(rf"^{MONTH_PATTERN} \d{{4}}$", re.IGNORECASE),
    re.compile(rf"^{MONTH_PATTERN} \d{{1,2}}$", re.IGNORECASE),
    re.compile(r"^(AD|BC) \d+$", re.IGNORECASE),
    re.compile(r"^\d+ (AD|BC|BCE|CE)$", re.IGNORECASE),
    re.compile(r"^\d{4}s? in ", re.IGNORECASE),
]


def is_bare_year_query(text: str) -> bool:
    """Check whether player input is only a year, e.g. "1066" or "250 BC"."""
    return bool(BARE_YEAR_QUERY.match(text.strip()))


def is_time_period_or_meta_title(title: str) -> bool:
    """Check whether a title denotes a time period or a meta page."""
    title = title.strip()
    return any(pattern.search(title) for pattern in META_TITLE_PATTERNS)

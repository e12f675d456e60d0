"""Decide whether a page describes an occurrence rather than a thing.

The gate needs positive evidence (an event indicator in the text or an
event-like type label) and no negative evidence (time-period overview,
geographic entity, abstract concept, product, technology or list page).
Biographical pages never reach the gate.
"""

import re
from typing import Iterable, List

from ..ports.fact_source import PageDetails

TIME_PERIOD_PATTERNS = [
    re.compile(r"\bis an? (decade|century|millennium|era|period|age)\b", re.IGNORECASE),
    re.compile(r"\bthis article is about the (decade|century|year)\b", re.IGNORECASE),
    re.compile(r"\bfollowing (decades?|centuries|years?) (are|were)\b", re.IGNORECASE),
    re.compile(r"\byears? in the \d+(st|nd|rd|th) century\b", re.IGNORECASE),
    re.compile(r"\bevents in the year \d{4}\b", re.IGNORECASE),
]

NON_EVENT_PATTERNS = [
    # Places and abstractions
    re.compile(r"\bis an? (country|city|town|village|state|province|region|continent)\b", re.IGNORECASE),
    re.compile(r"\bis an? (language|religion|ideology|philosophy|theory)\b", re.IGNORECASE),
    # Vehicles and products
    re.compile(
        r"\bis an? (turboprop|engine|aircraft|airplane|helicopter|ship|boat|vessel"
        r"|vehicle|car|automobile|tank|submarine)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\bis an? (family|series|line) of (aircraft|engines?|vehicles?|products?)\b", re.IGNORECASE),
    re.compile(r"\b(developed|manufactured|produced) by\b", re.IGNORECASE),
    # Technology
    re.compile(r"\bis an? (software|hardware|device|product|brand|model|prototype)\b", re.IGNORECASE),
    re.compile(r"\bis an? (computer|processor|chip|component)\b", re.IGNORECASE),
    # Lists and meta pages
    re.compile(r"\b(list|timeline) of\b", re.IGNORECASE),
    re.compile(r"\bcategory:", re.IGNORECASE),
]

EVENT_PATTERNS = [
    re.compile(r"\b(battle|war|conflict|siege|invasion|conquest)\b", re.IGNORECASE),
    re.compile(r"\b(treaty|agreement|pact|accord|convention)\b", re.IGNORECASE),
    re.compile(r"\b(revolution|uprising|rebellion|revolt)\b", re.IGNORECASE),
    re.compile(r"\b(assassination|murder|execution)\b", re.IGNORECASE),
    re.compile(r"\b(disaster|earthquake|flood|fire|explosion)\b", re.IGNORECASE),
    re.compile(r"\b(discovery|invention|founded|established)\b", re.IGNORECASE),
    re.compile(r"\b(occurred|took place|happened)\b", re.IGNORECASE),
    re.compile(r"\bwas a (military|major|significant|historical) (event|operation|campaign)\b", re.IGNORECASE),
    re.compile(r"\b(coronation|abdication|election)\b", re.IGNORECASE),
    re.compile(r"\b(declaration|proclamation|announcement)\b", re.IGNORECASE),
    # Cultural releases count as events
    re.compile(r"\b(released|published|premiered|launched)\b", re.IGNORECASE),
    re.compile(r"\bis an? \d{4} (book|novel|film|movie|album|video game)\b", re.IGNORECASE),
]

# Wikipedia category names that mark geographic pages
NON_EVENT_CATEGORIES = ("countries", "cities")

# Instance-of labels from knowledge-base sources
NON_EVENT_TYPES = (
    "country", "city", "town", "village", "state", "province", "continent",
    "river", "mountain", "language", "religion", "political party",
    "organization", "company", "business",
)

EVENT_TYPES = (
    "battle", "war", "conflict", "treaty", "disaster", "earthquake",
    "revolution", "assassination", "controversy", "scandal", "incident",
    "protest", "ceremony", "trial", "election", "coup", "invasion", "siege",
    "rebellion", "uprising", "attack", "explosion", "fire", "flood",
    "hurricane", "tornado", "volcanic eruption", "accident", "crash",
    "collision", "performance", "concert", "sporting event", "competition",
    "championship",
)


def _any_label_contains(labels: Iterable[str], needles: Iterable[str]) -> bool:
    # Whole words only: "United States election" is not a "state"
    lowered: List[str] = [label.lower() for label in labels]
    return any(
        re.search(rf"\b{re.escape(needle)}\b", label)
        for needle in needles
        for label in lowered
    )


def describes_time_period(text: str) -> bool:
    """Check whether the text presents itself as a period overview."""
    return any(pattern.search(text) for pattern in TIME_PERIOD_PATTERNS)


def has_event_indicator(text: str) -> bool:
    """Check the text alone for wording that signals an occurrence."""
    return any(pattern.search(text) for pattern in EVENT_PATTERNS)


def has_negative_evidence(details: PageDetails) -> bool:
    text = details.extract or ""
    if describes_time_period(text):
        return True
    if any(pattern.search(text) for pattern in NON_EVENT_PATTERNS):
        return True
    if _any_label_contains(details.categories, NON_EVENT_CATEGORIES):
        return True
    return _any_label_contains(details.type_labels, NON_EVENT_TYPES)


def has_positive_evidence(details: PageDetails) -> bool:
    if has_event_indicator(details.extract or ""):
        return True
    return _any_label_contains(details.type_labels, EVENT_TYPES)


def passes_event_gate(details: PageDetails) -> bool:
    """Check that a page denotes an occurrence.

    Args:
        details: Page to check

    Returns:
        True when there is positive and no negative evidence
    """
    if not details.extract and not details.type_labels:
        return False
    if has_negative_evidence(details):
        return False
    return has_positive_evidence(details)

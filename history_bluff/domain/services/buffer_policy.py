"""Era-dependent chronological tolerance."""

import calendar
import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..models.fact import Fact
from ..models.game import DEFAULT_BUFFER_RULES, BufferRule

logger = logging.getLogger(__name__)

# Used when no rule covers a year; unreachable under the default rules
DEFAULT_TOLERANCE = 1


class BufferPolicy:
    """Map an anchor year to the number of years a follow-up may lie after it."""

    def __init__(self, rules: Optional[Sequence[BufferRule]] = None):
        self.rules: List[BufferRule] = list(rules if rules is not None else DEFAULT_BUFFER_RULES)

    def tolerance_for(self, year: int) -> int:
        """Return the tolerance of the first rule containing ``year``.

        Args:
            year: Anchor year

        Returns:
            Tolerance in years, ``DEFAULT_TOLERANCE`` when no rule matches
        """
        for rule in self.rules:
            if rule.contains(year):
                return rule.tolerance_years
        logger.debug(f"No buffer rule covers year {year}, using {DEFAULT_TOLERANCE}")
        return DEFAULT_TOLERANCE

    def validate_rules(self, span_start: int, span_end: int) -> List[str]:
        """Check that the rules cover ``span_start..span_end`` exactly once.

        Rules are clipped to the span, so a rule reaching past either end is
        not a problem.

        Returns:
            Problems found, empty when the rules tile the span
        """
        problems: List[str] = []
        ordered = sorted(self.rules, key=lambda rule: rule.from_year)
        expected = span_start
        for rule in ordered:
            if rule.to_year < span_start or rule.from_year > span_end:
                continue
            from_year = max(rule.from_year, span_start)
            if from_year > expected:
                problems.append(f"Gap: years {expected}-{from_year - 1} have no rule")
            elif from_year < expected:
                problems.append(
                    f"Overlap: {rule.from_year}-{rule.to_year} starts before {expected}"
                )
            expected = max(expected, rule.to_year + 1)
        if expected <= span_end:
            problems.append(f"Gap: years {expected}-{span_end} have no rule")
        return problems


def is_event_within_buffer(anchor: Fact, candidate: Fact, tolerance: int) -> Tuple[bool, int]:
    """Check the chronological rule for a follow-up event.

    The candidate must not precede the anchor and may lie at most
    ``tolerance`` years after it.

    Returns:
        (is_valid, year_difference) where the difference is candidate minus anchor
    """
    year_difference = candidate.year - anchor.year
    return 0 <= year_difference <= tolerance, year_difference


def calculate_time_difference(first: date, second: date) -> Tuple[int, int, int]:
    """Calendar difference between two dates as (years, months, days).

    Order of the arguments does not matter. Month ends clamp, so
    January 31 plus one month is the last day of February.
    """
    start, end = sorted((first, second))
    total_months = (end.year - start.year) * 12 + end.month - start.month
    if end.day < start.day:
        total_months -= 1

    year = start.year + (start.month - 1 + total_months) // 12
    month = (start.month - 1 + total_months) % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    days = (end - date(year, month, day)).days
    return total_months // 12, total_months % 12, days

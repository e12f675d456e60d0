"""Tests for era-dependent tolerance."""

from datetime import date

import pytest

from history_bluff.domain.models.fact import MAX_YEAR, MIN_YEAR, CalendarDate, Fact
from history_bluff.domain.models.game import DEFAULT_BUFFER_RULES, BufferRule
from history_bluff.domain.services.buffer_policy import (
    DEFAULT_TOLERANCE,
    BufferPolicy,
    calculate_time_difference,
    is_event_within_buffer,
)


def _fact(year: int) -> Fact:
    return Fact(title=f"Event {year}", calendar_date=CalendarDate(year=year, month=0, day=1))


@pytest.mark.parametrize(
    "year,tolerance",
    [
        (1, 50), (999, 50),
        (1000, 25), (1150, 25), (1499, 25),
        (1500, 10), (1799, 10),
        (1800, 5), (1899, 5),
        (1900, 3), (1949, 3),
        (1950, 2), (1999, 2),
        (2000, 1), (2100, 1),
    ],
)
def test_default_tolerances(year, tolerance):
    assert BufferPolicy().tolerance_for(year) == tolerance


def test_default_rules_cover_the_plausible_span_once():
    """The fallback tolerance is unreachable under the default rules."""
    policy = BufferPolicy(DEFAULT_BUFFER_RULES)

    assert policy.validate_rules(0, 9999) == []
    assert policy.validate_rules(MIN_YEAR, MAX_YEAR) == []


def test_validate_rules_reports_gaps_and_overlaps():
    policy = BufferPolicy([
        BufferRule(from_year=0, to_year=999, tolerance_years=50),
        BufferRule(from_year=1200, to_year=1500, tolerance_years=10),
        BufferRule(from_year=1400, to_year=1600, tolerance_years=5),
    ])

    problems = policy.validate_rules(0, 2000)

    assert any(problem.startswith("Gap: years 1000-1199") for problem in problems)
    assert any(problem.startswith("Overlap") for problem in problems)
    assert any(problem.startswith("Gap: years 1601-2000") for problem in problems)


def test_uncovered_year_uses_default():
    policy = BufferPolicy([BufferRule(from_year=1000, to_year=1099, tolerance_years=30)])

    assert policy.tolerance_for(1500) == DEFAULT_TOLERANCE


def test_first_matching_rule_wins():
    policy = BufferPolicy([
        BufferRule(from_year=1000, to_year=1999, tolerance_years=7),
        BufferRule(from_year=1500, to_year=1599, tolerance_years=2),
    ])

    assert policy.tolerance_for(1550) == 7


@pytest.mark.parametrize(
    "anchor,candidate,tolerance,expected",
    [
        (1150, 1170, 25, (True, 20)),
        (1150, 1175, 25, (True, 25)),
        (1150, 1176, 25, (False, 26)),
        (1150, 1150, 25, (True, 0)),
        (1150, 1149, 25, (False, -1)),
        (1150, 1400, 25, (False, 250)),
    ],
)
def test_is_event_within_buffer(anchor, candidate, tolerance, expected):
    assert is_event_within_buffer(_fact(anchor), _fact(candidate), tolerance) == expected


def test_negative_difference_is_never_valid_even_with_huge_tolerance():
    assert is_event_within_buffer(_fact(1900), _fact(1899), 10_000) == (False, -1)


@pytest.mark.parametrize(
    "first,second,expected",
    [
        (date(1066, 10, 14), date(1066, 10, 14), (0, 0, 0)),
        (date(1939, 9, 1), date(1945, 9, 2), (6, 0, 1)),
        (date(2020, 1, 31), date(2020, 3, 1), (0, 1, 1)),
        (date(1945, 9, 2), date(1939, 9, 1), (6, 0, 1)),
        (date(1999, 12, 25), date(2000, 1, 5), (0, 0, 11)),
    ],
)
def test_calculate_time_difference(first, second, expected):
    assert calculate_time_difference(first, second) == expected


def test_validate_rules_clips_to_the_span():
    policy = BufferPolicy([
        BufferRule(from_year=-100, to_year=999, tolerance_years=50),
        BufferRule(from_year=1000, to_year=9999, tolerance_years=5),
        BufferRule(from_year=10_000, to_year=20_000, tolerance_years=1),
    ])

    assert policy.validate_rules(1, 2100) == []

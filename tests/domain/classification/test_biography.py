"""Tests for the biographical shortcut."""

import pytest

from history_bluff.domain.classification.biography import (
    biographical_fact,
    extract_life_event,
    looks_biographical,
)
from history_bluff.domain.errors import MalformedDateError
from history_bluff.domain.ports.fact_source import PageDetails


@pytest.mark.parametrize(
    "text",
    [
        "Ada Lovelace was an English mathematician and writer.",
        "He was born in Stratford-upon-Avon.",
        "Leonardo da Vinci (15 April 1452 – 2 May 1519) painted the Mona Lisa.",
        "She died on 3 March 1703 in London.",
        "The Battle of Hastings ended with the death of King Harold.",
    ],
)
def test_person_signals(text):
    assert looks_biographical(text)


@pytest.mark.parametrize(
    "text",
    [
        "World War II (1 September 1939 – 2 September 1945) was a global conflict.",
        "The Treaty of Paris was signed in 1783.",
        "",
    ],
)
def test_events_are_not_biographies(text):
    assert not looks_biographical(text)


def test_birth_is_preferred_over_death():
    label, date = extract_life_event("Shakespeare was born 23 April 1564 and died 23 April 1616.")

    assert label == "Birth"
    assert (date.year, date.month, date.day) == (1564, 3, 23)


def test_month_first_birth():
    label, date = extract_life_event("Lincoln was born on February 12, 1809 in Kentucky.")

    assert label == "Birth"
    assert (date.year, date.month, date.day) == (1809, 1, 12)


def test_death_when_birth_date_is_incomplete():
    label, date = extract_life_event("Born around 1330, the poet died on 25 October 1400.")

    assert label == "Death"
    assert (date.year, date.month, date.day) == (1400, 9, 25)


def test_lifespan_parentheses():
    label, date = extract_life_event("Leonardo da Vinci (15 April 1452 – 2 May 1519) was a polymath.")

    assert label == "Birth"
    assert (date.year, date.month, date.day) == (1452, 3, 15)


def test_no_complete_date():
    assert extract_life_event("Homer was a Greek poet born sometime in antiquity.") is None


def test_invalid_birth_date_is_malformed():
    with pytest.raises(MalformedDateError):
        extract_life_event("She was born 31 February 1900.")


def test_biographical_fact_titles_and_links():
    details = PageDetails(
        title="Leonardo da Vinci",
        extract="Leonardo da Vinci (15 April 1452 – 2 May 1519) was an Italian polymath.",
        url="https://en.wikipedia.org/wiki/Leonardo_da_Vinci",
    )

    fact = biographical_fact(details)

    assert fact.title == "Birth of Leonardo da Vinci"
    assert fact.year == 1452
    assert fact.source_url == details.url
    assert fact.summary == details.extract


def test_biographical_fact_without_date_is_none():
    details = PageDetails(title="Homer", extract="Homer was a Greek poet.")

    assert biographical_fact(details) is None

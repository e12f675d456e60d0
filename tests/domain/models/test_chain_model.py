"""Tests for the event chain and anchor tracking."""

import pytest

from history_bluff.domain.errors import DuplicateEventError, PreconditionViolation
from history_bluff.domain.models.chain import SYSTEM_PLAYER_ID, EventChain
from history_bluff.domain.models.fact import CalendarDate, Fact


def _fact(title: str, year: int) -> Fact:
    return Fact(title=title, calendar_date=CalendarDate(year=year, month=0, day=1))


@pytest.fixture
def seeded_chain() -> EventChain:
    return EventChain.seeded(_fact("Seed", 1150))


def test_empty_chain_has_no_anchor():
    chain = EventChain()

    assert len(chain) == 0
    assert chain.anchor_index == -1
    assert chain.anchor() is None
    assert chain.pending() is None


def test_seeded_chain_anchors_on_resolved_seed(seeded_chain: EventChain):
    seed = seeded_chain.anchor()

    assert seeded_chain.anchor_index == 0
    assert seed.submitting_player_id == SYSTEM_PLAYER_ID
    assert seed.is_resolved and seed.was_valid
    assert seeded_chain.pending() is None


def test_append_leaves_anchor_and_marks_pending(seeded_chain: EventChain):
    chain = seeded_chain.append_submission("alice", "Alice", _fact("First", 1170))

    assert len(chain) == 2
    assert chain.anchor_index == 0
    assert chain.pending().fact.title == "First"
    # The original chain is untouched
    assert len(seeded_chain) == 1


def test_append_rejects_second_pending(seeded_chain: EventChain):
    chain = seeded_chain.append_submission("alice", "Alice", _fact("First", 1170))

    with pytest.raises(PreconditionViolation):
        chain.append_submission("bob", "Bob", _fact("Second", 1175))


def test_append_rejects_duplicate_title_case_insensitively(seeded_chain: EventChain):
    with pytest.raises(DuplicateEventError) as exc_info:
        seeded_chain.append_submission("alice", "Alice", _fact("seed", 1160))

    assert "already been submitted" in str(exc_info.value)
    assert isinstance(exc_info.value, PreconditionViolation)


def test_resolve_valid_moves_anchor_to_last(seeded_chain: EventChain):
    chain = seeded_chain.append_submission("alice", "Alice", _fact("First", 1170))

    resolved = chain.resolve_last(True)

    assert resolved.anchor_index == 1
    assert resolved.entries[1].is_resolved
    assert resolved.entries[1].was_valid is True
    assert resolved.entries[1].was_challenged is True
    assert resolved.pending() is None


def test_resolve_invalid_falls_back_to_previous_entry(seeded_chain: EventChain):
    chain = (
        seeded_chain
        .append_submission("alice", "Alice", _fact("First", 1170))
        .resolve_last(True, challenged=False)
        .append_submission("bob", "Bob", _fact("Second", 1400))
    )

    resolved = chain.resolve_last(False)

    assert resolved.anchor_index == 1
    assert resolved.entries[2].was_valid is False
    # Disputed entry stays in the history
    assert len(resolved) == 3


def test_resolve_invalid_on_second_entry_anchors_seed(seeded_chain: EventChain):
    chain = seeded_chain.append_submission("alice", "Alice", _fact("First", 1400))

    assert chain.resolve_last(False).anchor_index == 0


def test_resolve_invalid_skips_earlier_invalid_entries(seeded_chain: EventChain):
    chain = (
        seeded_chain
        .append_submission("alice", "Alice", _fact("First", 1400))
        .resolve_last(False)
        .append_submission("bob", "Bob", _fact("Second", 1500))
    )

    resolved = chain.resolve_last(False)

    assert resolved.anchor_index == 0
    assert resolved.anchor().was_valid


def test_resolve_twice_is_rejected(seeded_chain: EventChain):
    with pytest.raises(PreconditionViolation):
        seeded_chain.resolve_last(True)


def test_resolve_empty_chain_is_rejected():
    with pytest.raises(PreconditionViolation):
        EventChain().resolve_last(True)


def test_seedless_single_entry_invalid_has_no_anchor():
    chain = EventChain().append_submission("alice", "Alice", _fact("Only", 1100))

    resolved = chain.resolve_last(False)

    assert resolved.anchor_index == -1
    assert resolved.anchor() is None

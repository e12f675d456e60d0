"""Tests for players, settings and game state."""

import pytest
from pydantic import ValidationError

from history_bluff.domain.models.game import (
    DEFAULT_BUFFER_RULES,
    BufferRule,
    GamePhase,
    GameSettings,
    GameState,
    Player,
)


def test_default_settings():
    settings = GameSettings()

    assert settings.starting_century == 12
    assert settings.max_players == 8
    assert settings.buffer_rules == DEFAULT_BUFFER_RULES
    assert settings.starting_year_range == (1100, 1199)


def test_settings_reject_overlapping_rules():
    with pytest.raises(ValidationError):
        GameSettings(buffer_rules=[
            BufferRule(from_year=0, to_year=1000, tolerance_years=10),
            BufferRule(from_year=1000, to_year=2000, tolerance_years=5),
        ])


def test_settings_reject_empty_rules():
    with pytest.raises(ValidationError):
        GameSettings(buffer_rules=[])


def test_settings_reject_rules_with_gaps():
    with pytest.raises(ValidationError) as exc_info:
        GameSettings(buffer_rules=[
            BufferRule(from_year=0, to_year=999, tolerance_years=50),
            BufferRule(from_year=1500, to_year=9999, tolerance_years=10),
        ])

    assert "Gap: years 1000-1499" in str(exc_info.value)


def test_settings_reject_rules_ending_early():
    with pytest.raises(ValidationError):
        GameSettings(buffer_rules=[BufferRule(from_year=1, to_year=2000, tolerance_years=5)])


def test_settings_accept_rules_reaching_past_the_span():
    settings = GameSettings(buffer_rules=[BufferRule(from_year=-500, to_year=5000, tolerance_years=5)])

    assert settings.buffer_rules[0].tolerance_years == 5


@pytest.mark.parametrize("century", [0, 22])
def test_settings_bound_starting_century(century):
    with pytest.raises(ValidationError):
        GameSettings(starting_century=century)


def test_buffer_rule_range_is_inclusive():
    rule = BufferRule(from_year=1000, to_year=1499, tolerance_years=25)

    assert rule.contains(1000)
    assert rule.contains(1499)
    assert not rule.contains(1500)


def test_buffer_rule_rejects_inverted_range():
    with pytest.raises(ValidationError):
        BufferRule(from_year=1500, to_year=1000, tolerance_years=5)


def test_player_elimination_returns_new_player():
    player = Player(id="p1", name="Alice")

    eliminated = player.eliminated()

    assert player.is_alive
    assert not eliminated.is_alive


def test_game_state_lookups():
    state = GameState(
        id="ABC123",
        players=[Player(id="a", name="Alice", is_host=True), Player(id="b", name="Bob", is_alive=False)],
    )

    assert state.phase == GamePhase.LOBBY
    assert state.anchor_index == -1
    assert state.anchor is None
    assert state.current_player.name == "Alice"
    assert state.player_index("b") == 1
    assert state.player_index("zed") == -1
    assert state.get_player("zed") is None
    assert [player.id for player in state.alive_players] == ["a"]

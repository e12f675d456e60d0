"""End-to-end test of the terminal hot-seat game."""

import pytest

from history_bluff import main as terminal
from history_bluff.domain.models.fact import CalendarDate, Fact
from history_bluff.domain.services.game_service import GameService


class SeedFinder:
    async def find_seed(self, century: int) -> Fact:
        return Fact(title="Siege of Lisbon", calendar_date=CalendarDate(year=1147, month=6, day=1))


class Container:
    """Just enough of the service container for ``play``."""

    def __init__(self, service: GameService):
        self.service = service

    async def get_game_service(self) -> GameService:
        return self.service


def _feed(monkeypatch, answers):
    answers = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))


@pytest.mark.asyncio
async def test_bluff_is_called_out(monkeypatch, capsys, classifier):
    _feed(monkeypatch, [
        "Alice, Bob",
        "12",
        "1066",                # rejected, a bare year
        "Battle of Hastings",  # Alice picks a 1066 event after a 1147 anchor
        "1",
        "call Bob",            # Bob calls it out
    ])

    await terminal.play(Container(GameService(classifier, seed_finder=SeedFinder())))

    output = capsys.readouterr().out
    assert "Starting event: Siege of Lisbon (July 1, 1147)" in output
    assert "not just a year" in output
    assert "1. Battle of Hastings (October 14, 1066)" in output
    assert "Event was incorrect!" in output
    assert "Bob wins!" in output


@pytest.mark.asyncio
async def test_quit_and_bad_century(monkeypatch, capsys, classifier):
    service = GameService(classifier, seed_finder=SeedFinder())
    _feed(monkeypatch, ["Alice, Bob", "99"])

    await terminal.play(Container(service))

    assert "Invalid settings" in capsys.readouterr().out

    _feed(monkeypatch, ["Alice, Bob", "", "quit"])
    await terminal.play(Container(service))

    assert "Siege of Lisbon" in capsys.readouterr().out

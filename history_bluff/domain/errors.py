"""Domain errors for event lookup and game-state transitions."""


class HistoryBluffError(Exception):
    """Base class for all domain errors."""


class PreconditionViolation(HistoryBluffError, ValueError):
    """An operation was invoked in a state that does not allow it.

    Raised synchronously before any state is touched.
    """


class BareYearQueryError(PreconditionViolation):
    """The player typed a year instead of an event."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(
            'Please enter a historical event, not just a year. '
            'Try "Battle of Hastings" instead of "1066".'
        )


class DuplicateEventError(PreconditionViolation):
    """The event title is already part of the chain."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(
            "This event has already been submitted! Try a different one."
        )


class EventNotFoundError(HistoryBluffError):
    """No usable candidate was found for a query."""


class ExternalUnavailableError(HistoryBluffError, ConnectionError):
    """The external fact source could not be reached."""


class MalformedDateError(HistoryBluffError, ValueError):
    """An extracted date is not a real calendar date within bounds."""


class GameNotFoundError(HistoryBluffError, KeyError):
    """No game is registered under the given id."""

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")

    def __str__(self) -> str:
        return self.args[0]

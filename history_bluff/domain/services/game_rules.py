"""Pure transitions of the game state machine.

Every function takes a ``GameState`` and returns a new one; nothing is
mutated in place. Preconditions are checked before any new value is built
and raise ``PreconditionViolation``.
"""

import secrets
import string
import uuid
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..errors import DuplicateEventError, PreconditionViolation
from ..models.chain import EventChain
from ..models.fact import Fact
from ..models.game import GamePhase, GameSettings, GameState, Player
from ..models.results import ChallengeOutcome
from .buffer_policy import BufferPolicy
from .challenge_resolver import resolve_challenge

GAME_CODE_ALPHABET = string.ascii_uppercase + string.digits
GAME_CODE_LENGTH = 6
MIN_PLAYERS = 2


def new_game_code() -> str:
    return "".join(secrets.choice(GAME_CODE_ALPHABET) for _ in range(GAME_CODE_LENGTH))


def new_player_id() -> str:
    return uuid.uuid4().hex


def _require_phase(state: GameState, phase: GamePhase, action: str) -> None:
    if state.phase != phase:
        raise PreconditionViolation(
            f"Cannot {action} while the game is {state.phase.value}"
        )


def _tolerance(state: GameState, year: int) -> int:
    return BufferPolicy(state.buffer_rules).tolerance_for(year)


def create_game(
    host_name: str,
    game_id: Optional[str] = None,
    settings: Optional[GameSettings] = None,
) -> GameState:
    """Create a game in the lobby with its host as the only player."""
    if not host_name or not host_name.strip():
        raise PreconditionViolation("Host name cannot be empty")
    host = Player(id=new_player_id(), name=host_name.strip(), is_host=True)
    return GameState(
        id=game_id or new_game_code(),
        players=[host],
        settings=settings or GameSettings(),
    )


def join_game(state: GameState, player_name: str) -> Tuple[GameState, Player]:
    """Add a player to the lobby.

    Returns:
        The new state and the player that joined
    """
    _require_phase(state, GamePhase.LOBBY, "join")
    name = (player_name or "").strip()
    if not name:
        raise PreconditionViolation("Player name cannot be empty")
    if len(state.players) >= state.settings.max_players:
        raise PreconditionViolation(f"Game is full ({state.settings.max_players} players)")
    if any(player.name.casefold() == name.casefold() for player in state.players):
        raise PreconditionViolation(f"Name '{name}' is already taken")

    player = Player(id=new_player_id(), name=name)
    return state.model_copy(update={"players": [*state.players, player]}), player


def set_players(state: GameState, names: Sequence[str]) -> GameState:
    """Replace the lobby roster with the given names; the first one hosts.

    Used by hot-seat play where every name is typed on one device.
    """
    _require_phase(state, GamePhase.LOBBY, "set players")
    cleaned = [name.strip() for name in names if name and name.strip()]
    if len(cleaned) > state.settings.max_players:
        raise PreconditionViolation(f"At most {state.settings.max_players} players allowed")
    if len({name.casefold() for name in cleaned}) != len(cleaned):
        raise PreconditionViolation("Player names must be unique")

    players = [
        Player(id=new_player_id(), name=name, is_host=index == 0)
        for index, name in enumerate(cleaned)
    ]
    return state.model_copy(update={"players": players, "current_player_index": 0})


def update_settings(state: GameState, **changes: Any) -> GameState:
    """Change lobby settings such as ``starting_century`` or ``buffer_rules``.

    Raises:
        PreconditionViolation: Outside the lobby, or when the new settings
            are invalid or too small for the current roster
    """
    _require_phase(state, GamePhase.LOBBY, "change settings")
    unknown = set(changes) - set(GameSettings.model_fields)
    if unknown:
        raise PreconditionViolation(f"Unknown settings: {', '.join(sorted(unknown))}")

    try:
        settings = GameSettings(**{**state.settings.model_dump(), **changes})
    except ValidationError as e:
        raise PreconditionViolation(f"Invalid settings: {e}")

    if settings.max_players < len(state.players):
        raise PreconditionViolation(
            f"{len(state.players)} players already joined, max_players cannot be {settings.max_players}"
        )
    return state.model_copy(update={"settings": settings})


def start_game(
    state: GameState,
    seed_fact: Fact,
    players: Optional[Sequence[str]] = None,
) -> GameState:
    """Seed the chain and move from the lobby into play.

    Args:
        state: Game in the lobby
        seed_fact: Starting event, accepted without a challenge
        players: Optional roster replacing the lobby's players

    Returns:
        The playing state with anchor 0 and the seed's tolerance
    """
    _require_phase(state, GamePhase.LOBBY, "start")
    if players is not None:
        state = set_players(state, players)
    if len(state.players) < MIN_PLAYERS:
        raise PreconditionViolation(f"At least {MIN_PLAYERS} players are needed to start")

    return state.model_copy(
        update={
            "phase": GamePhase.PLAYING,
            "chain": EventChain.seeded(seed_fact),
            "current_player_index": 0,
            "current_tolerance": _tolerance(state, seed_fact.year),
        }
    )


def next_alive_index(players: List[Player], from_index: int) -> int:
    """Index of the next alive player after ``from_index``, wrapping around.

    When nobody else is alive the current index is kept.
    """
    count = len(players)
    for step in range(1, count + 1):
        index = (from_index + step) % count
        if index != from_index and players[index].is_alive:
            return index
    return from_index


def submit_fact(state: GameState, fact: Fact, player_id: Optional[str] = None) -> GameState:
    """Append the current player's fact and pass the turn.

    A previous submission nobody called out is accepted at this point:
    it is resolved as valid and becomes the anchor.

    Raises:
        PreconditionViolation: If the game is not playing or it is not
            ``player_id``'s turn
        DuplicateEventError: If the title was already submitted
    """
    _require_phase(state, GamePhase.PLAYING, "submit an event")
    current = state.current_player
    if current is None or not current.is_alive:
        raise PreconditionViolation("No alive player is up")
    if player_id is not None and player_id != current.id:
        raise PreconditionViolation(f"It is {current.name}'s turn")
    if state.chain.contains_title(fact.title):
        raise DuplicateEventError(fact.title)

    chain = state.chain
    if chain.pending() is not None:
        chain = chain.resolve_last(True, challenged=False)
    chain = chain.append_submission(current.id, current.name, fact)

    return state.model_copy(
        update={
            "chain": chain,
            "current_tolerance": _tolerance(state, fact.year),
            "current_player_index": next_alive_index(state.players, state.current_player_index),
        }
    )


def challenge(state: GameState, challenger_id: str) -> Tuple[GameState, ChallengeOutcome]:
    """Call out the latest submission and apply the elimination.

    Returns:
        The new state and the outcome that produced it

    Raises:
        PreconditionViolation: If nothing is pending, or the challenger is
            unknown, eliminated or the submitter
    """
    _require_phase(state, GamePhase.PLAYING, "call out an event")
    pending = state.chain.pending()
    if pending is None:
        raise PreconditionViolation("There is no event to call out")
    challenger = state.get_player(challenger_id)
    if challenger is None:
        raise PreconditionViolation(f"Unknown player: {challenger_id}")
    if not challenger.is_alive:
        raise PreconditionViolation(f"{challenger.name} has been eliminated")
    if challenger.id == pending.submitting_player_id:
        raise PreconditionViolation("You cannot call out your own event")

    outcome = resolve_challenge(state, challenger_id)
    chain = state.chain.resolve_last(outcome.was_event_correct, challenged=True)

    players = list(state.players)
    eliminated_index = state.player_index(outcome.eliminated_player_id) if outcome.eliminated_player_id else -1
    if eliminated_index >= 0:
        players[eliminated_index] = players[eliminated_index].eliminated()

    anchor = chain.anchor()
    tolerance = _tolerance(state, anchor.fact.year) if anchor else state.current_tolerance

    update = {"chain": chain, "players": players, "current_tolerance": tolerance}
    if sum(1 for player in players if player.is_alive) <= 1:
        update["phase"] = GamePhase.FINISHED
    elif eliminated_index == state.current_player_index:
        update["current_player_index"] = next_alive_index(players, state.current_player_index)

    return state.model_copy(update=update), outcome


def is_game_over(state: GameState) -> bool:
    return state.phase == GamePhase.FINISHED or (
        state.phase == GamePhase.PLAYING and len(state.alive_players) <= 1
    )


def winner(state: GameState) -> Optional[Player]:
    """The last player standing, once the game is over."""
    if not is_game_over(state):
        return None
    alive = state.alive_players
    return alive[0] if len(alive) == 1 else None

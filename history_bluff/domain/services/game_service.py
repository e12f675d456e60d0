"""Service owning live games and serializing their transitions."""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..errors import GameNotFoundError, HistoryBluffError, PreconditionViolation
from ..models.fact import Fact
from ..models.game import GamePhase, GameSettings, GameState
from ..models.results import ChallengeOutcome, OperationResult
from . import game_rules
from .fact_classifier import FactClassifier
from .seed_events import SeedEventFinder

logger = logging.getLogger(__name__)

# Seconds a finished game stays readable before it is dropped
DEFAULT_FINISHED_TTL = 3600.0

Transition = Callable[[GameState], Tuple[GameState, str, Optional[ChallengeOutcome]]]


class GameService:
    """Coordinate games, the classifier and seed acquisition.

    Each game has its own ``asyncio.Lock``; every mutation runs under it,
    so a submit and a challenge against the same game never interleave.
    A transition builds a new state and the service swaps it in only when
    the transition succeeds.

    Finished games stay readable for ``finished_ttl`` seconds so clients
    can show the result; after that the next ``create_game`` drops them.
    """

    def __init__(
        self,
        classifier: FactClassifier,
        seed_finder: Optional[SeedEventFinder] = None,
        finished_ttl: float = DEFAULT_FINISHED_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the service.

        Args:
            classifier: Classifier used for event lookup
            seed_finder: Finder for starting events, built from the classifier by default
            finished_ttl: Seconds a finished game is kept
            clock: Monotonic time source
        """
        self.classifier = classifier
        self.seed_finder = seed_finder or SeedEventFinder(classifier)
        self.finished_ttl = finished_ttl
        self._clock = clock
        self._games: Dict[str, GameState] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._finished_at: Dict[str, float] = {}
        logger.info("🔧 GameService initialized")

    def _lock_for(self, game_id: str) -> asyncio.Lock:
        self.require_game(game_id)
        return self._locks.setdefault(game_id, asyncio.Lock())

    def get_state(self, game_id: str) -> Optional[GameState]:
        return self._games.get(game_id)

    def require_game(self, game_id: str) -> GameState:
        """Return the game's state.

        Raises:
            GameNotFoundError: If the id is unknown
        """
        state = self._games.get(game_id)
        if state is None:
            raise GameNotFoundError(game_id)
        return state

    @property
    def game_ids(self) -> List[str]:
        return list(self._games)

    async def _apply(self, game_id: str, action: str, transition: Transition) -> OperationResult:
        async with self._lock_for(game_id):
            state = self.require_game(game_id)
            try:
                new_state, message, outcome = transition(state)
            except HistoryBluffError as e:
                logger.info(f"🚫 {action} rejected in game {game_id}: {e}")
                return OperationResult(success=False, message=str(e), state=state)

            self._games[game_id] = new_state
            if new_state.phase == GamePhase.FINISHED:
                self._finished_at.setdefault(game_id, self._clock())
            logger.info(f"✅ {action} in game {game_id}: {message}")
            return OperationResult(success=True, message=message, state=new_state, outcome=outcome)

    async def create_game(self, host_name: str, settings: Optional[GameSettings] = None) -> OperationResult:
        """Create a game in the lobby with its host."""
        self.prune_finished()
        try:
            state = game_rules.create_game(host_name, settings=settings)
        except PreconditionViolation as e:
            return OperationResult(success=False, message=str(e))

        while state.id in self._games:
            state = state.model_copy(update={"id": game_rules.new_game_code()})
        self._games[state.id] = state
        logger.info(f"🎮 Game {state.id} created by {host_name}")
        return OperationResult(success=True, message=f"Game {state.id} created", state=state)

    async def join_game(self, game_id: str, player_name: str) -> OperationResult:
        def transition(state: GameState):
            new_state, player = game_rules.join_game(state, player_name)
            return new_state, f"{player.name} joined", None

        return await self._apply(game_id, "Join", transition)

    async def set_players(self, game_id: str, names: Sequence[str]) -> OperationResult:
        def transition(state: GameState):
            new_state = game_rules.set_players(state, names)
            return new_state, f"{len(new_state.players)} players ready", None

        return await self._apply(game_id, "Set players", transition)

    async def update_settings(self, game_id: str, **changes: Any) -> OperationResult:
        def transition(state: GameState):
            return game_rules.update_settings(state, **changes), "Settings updated", None

        return await self._apply(game_id, "Settings update", transition)

    async def start_game(self, game_id: str, players: Optional[Sequence[str]] = None) -> OperationResult:
        """Find a seed event for the starting century and start play.

        The lock is held across the seed search so no other mutation can
        slip in between the lobby check and the transition.
        """
        async with self._lock_for(game_id):
            state = self.require_game(game_id)
            try:
                if state.phase != GamePhase.LOBBY:
                    raise PreconditionViolation("The game has already started")
                # Settle the roster first so a bad one never costs a seed search
                lobby = game_rules.set_players(state, players) if players is not None else state
                if len(lobby.players) < game_rules.MIN_PLAYERS:
                    raise PreconditionViolation(
                        f"At least {game_rules.MIN_PLAYERS} players are needed to start"
                    )
                seed = await self.seed_finder.find_seed(state.settings.starting_century)
                new_state = game_rules.start_game(lobby, seed)
            except HistoryBluffError as e:
                logger.warning(f"⚠️ Could not start game {game_id}: {e}")
                return OperationResult(success=False, message=str(e), state=state)

            self._games[game_id] = new_state
            logger.info(f"🚀 Game {game_id} started with seed '{seed.title}' ({seed.year})")
            return OperationResult(
                success=True,
                message=f"Starting event: {seed.title} ({seed.calendar_date.display()})",
                state=new_state,
            )

    async def lookup_event(self, query: str) -> OperationResult:
        """Classify free text into candidate facts for the player to choose from.

        Runs outside any game lock; classification does not touch game state.
        """
        try:
            candidates = await self.classifier.classify(query)
        except PreconditionViolation as e:
            return OperationResult(success=False, message=str(e))

        if not candidates:
            return OperationResult(
                success=False,
                message="No matching historical event found. Try a different description.",
            )
        return OperationResult(
            success=True,
            message=f"Found {len(candidates)} matching events",
            candidates=candidates,
        )

    async def submit_fact(self, game_id: str, fact: Fact, player_id: Optional[str] = None) -> OperationResult:
        def transition(state: GameState):
            new_state = game_rules.submit_fact(state, fact, player_id=player_id)
            up_next = new_state.current_player
            message = f"{fact.title} ({fact.calendar_date.display()}) submitted"
            if up_next is not None:
                message += f", {up_next.name} is up"
            return new_state, message, None

        return await self._apply(game_id, "Submission", transition)

    async def challenge(self, game_id: str, challenger_id: str) -> OperationResult:
        def transition(state: GameState):
            new_state, outcome = game_rules.challenge(state, challenger_id)
            message = outcome.explanation
            champion = game_rules.winner(new_state)
            if champion is not None:
                message += f" {champion.name} wins!"
            return new_state, message, outcome

        return await self._apply(game_id, "Challenge", transition)

    def prune_finished(self) -> List[str]:
        """Drop games that finished more than ``finished_ttl`` seconds ago.

        Returns:
            Ids of the dropped games
        """
        now = self._clock()
        expired = [
            game_id for game_id, finished_at in self._finished_at.items()
            if now - finished_at >= self.finished_ttl
        ]
        for game_id in expired:
            self._games.pop(game_id, None)
            self._locks.pop(game_id, None)
            del self._finished_at[game_id]
        if expired:
            logger.info(f"🧹 Dropped {len(expired)} finished games")
        return expired

    async def reset_game(self, game_id: str) -> OperationResult:
        """Drop a game entirely."""
        async with self._lock_for(game_id):
            self.require_game(game_id)
            del self._games[game_id]
        self._locks.pop(game_id, None)
        self._finished_at.pop(game_id, None)
        logger.info(f"🗑️ Game {game_id} removed")
        return OperationResult(success=True, message=f"Game {game_id} removed")

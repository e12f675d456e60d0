"""Domain models for players, settings and the game state."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .chain import ChainEntry, EventChain
from .fact import MAX_YEAR, MIN_YEAR


class GamePhase(str, Enum):
    """Game phases; transitions only move forward."""

    LOBBY = "lobby"
    PLAYING = "playing"
    FINISHED = "finished"


class Player(BaseModel):
    """A participant in a game."""

    id: str = Field(..., description="Unique player identifier")
    name: str = Field(..., min_length=1, description="Display name")
    is_alive: bool = Field(default=True, description="False once eliminated")
    is_host: bool = Field(default=False, description="Whether this player created the game")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    def eliminated(self) -> "Player":
        return self.model_copy(update={"is_alive": False})


class BufferRule(BaseModel):
    """Tolerance in years for an inclusive range of anchor years."""

    from_year: int
    to_year: int
    tolerance_years: int = Field(..., ge=0)

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @model_validator(mode="after")
    def _check_range(self) -> "BufferRule":
        if self.from_year > self.to_year:
            raise ValueError(
                f"Rule starts after it ends: {self.from_year} > {self.to_year}"
            )
        return self

    def contains(self, year: int) -> bool:
        return self.from_year <= year <= self.to_year


DEFAULT_BUFFER_RULES: List[BufferRule] = [
    BufferRule(from_year=0, to_year=999, tolerance_years=50),
    BufferRule(from_year=1000, to_year=1499, tolerance_years=25),
    BufferRule(from_year=1500, to_year=1799, tolerance_years=10),
    BufferRule(from_year=1800, to_year=1899, tolerance_years=5),
    BufferRule(from_year=1900, to_year=1949, tolerance_years=3),
    BufferRule(from_year=1950, to_year=1999, tolerance_years=2),
    BufferRule(from_year=2000, to_year=9999, tolerance_years=1),
]


class GameSettings(BaseModel):
    """Tunable rules of a game."""

    starting_century: int = Field(
        default=12, ge=1, le=21, description="Century the seed event is drawn from"
    )
    buffer_rules: List[BufferRule] = Field(
        default_factory=lambda: list(DEFAULT_BUFFER_RULES),
        description="Ordered era-to-tolerance rules, first match wins",
    )
    max_players: int = Field(default=8, ge=2, description="Lobby capacity")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @field_validator("buffer_rules")
    @classmethod
    def _check_rules(cls, rules: List[BufferRule]) -> List[BufferRule]:
        if not rules:
            raise ValueError("At least one buffer rule is required")
        ordered = sorted(rules, key=lambda rule: rule.from_year)
        for previous, current in zip(ordered, ordered[1:]):
            if current.from_year <= previous.to_year:
                raise ValueError(
                    f"Buffer rules overlap: {previous.from_year}-{previous.to_year} "
                    f"and {current.from_year}-{current.to_year}"
                )
        # Every plausible year needs a rule
        from ..services.buffer_policy import BufferPolicy

        problems = BufferPolicy(rules).validate_rules(MIN_YEAR, MAX_YEAR)
        if problems:
            raise ValueError("Buffer rules do not cover every year: " + "; ".join(problems))
        return rules

    @property
    def starting_year_range(self) -> tuple:
        """Inclusive (start, end) years of the starting century."""
        start = (self.starting_century - 1) * 100
        return start, start + 99


class GameState(BaseModel):
    """Complete snapshot of one game.

    Immutable: every transition in ``game_rules`` returns a new state.
    """

    id: str = Field(..., description="Short game code")
    phase: GamePhase = Field(default=GamePhase.LOBBY)
    players: List[Player] = Field(default_factory=list)
    current_player_index: int = Field(default=0)
    chain: EventChain = Field(default_factory=EventChain)
    settings: GameSettings = Field(default_factory=GameSettings)
    current_tolerance: int = Field(default=1, description="Tolerance shown to the next player")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def anchor_index(self) -> int:
        return self.chain.anchor_index

    @property
    def buffer_rules(self) -> List[BufferRule]:
        return self.settings.buffer_rules

    @property
    def anchor(self) -> Optional[ChainEntry]:
        return self.chain.anchor()

    @property
    def current_player(self) -> Optional[Player]:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def alive_players(self) -> List[Player]:
        return [player for player in self.players if player.is_alive]

    def player_index(self, player_id: str) -> int:
        """Return the index of a player, or -1 when absent."""
        for index, player in enumerate(self.players):
            if player.id == player_id:
                return index
        return -1

    def get_player(self, player_id: str) -> Optional[Player]:
        index = self.player_index(player_id)
        return self.players[index] if index >= 0 else None

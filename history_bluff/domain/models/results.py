"""Result payloads handed to the presentation layer."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .fact import Fact
from .game import GameState


class ChallengeOutcome(BaseModel):
    """Decision reached for a challenge against the latest submission."""

    eliminated_player_id: Optional[str] = Field(
        None, description="Player to eliminate, None when nothing was checked"
    )
    was_event_correct: bool = Field(..., description="Whether the disputed event stood")
    explanation: str = Field(..., description="Human readable reason")
    year_difference: Optional[int] = Field(None, description="Disputed year minus anchor year")
    tolerance: Optional[int] = Field(None, description="Tolerance applied at the anchor year")

    class Config:
        """Pydantic model configuration."""
        frozen = True


@dataclass
class OperationResult:
    """Outcome of a game operation."""

    success: bool
    message: str
    candidates: List[Fact] = field(default_factory=list)
    state: Optional[GameState] = None
    outcome: Optional[ChallengeOutcome] = None

    def __post_init__(self):
        """Validate the result."""
        if not self.message:
            raise ValueError("Operation message cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for API responses."""
        return {
            'success': self.success,
            'message': self.message,
            'candidates': [fact.model_dump(mode="json") for fact in self.candidates],
            'state': self.state.model_dump(mode="json") if self.state else None,
            'outcome': self.outcome.model_dump(mode="json") if self.outcome else None,
        }

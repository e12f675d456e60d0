"""Domain model for the event chain and its anchor."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from ..errors import DuplicateEventError, PreconditionViolation
from .fact import Fact

SYSTEM_PLAYER_ID = "system"
SYSTEM_PLAYER_NAME = "Game"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChainEntry(BaseModel):
    """One submitted fact in the chain.

    ``is_resolved`` and ``was_valid`` are set exactly once, when a challenge
    against the entry is decided or a later submission supersedes it.
    """

    submitting_player_id: str = Field(..., description="Who submitted the fact")
    submitting_player_name: str = Field(..., description="Display name of the submitter")
    fact: Fact = Field(..., description="The submitted fact")
    is_resolved: bool = Field(default=False, description="Whether validity is settled")
    was_valid: Optional[bool] = Field(None, description="Outcome once resolved")
    was_challenged: bool = Field(default=False, description="Whether a challenge settled it")
    submitted_at: datetime = Field(default_factory=_utcnow, description="Submission time")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    def resolved(self, was_valid: bool, challenged: bool) -> "ChainEntry":
        """Return the resolved version of this entry.

        Raises:
            PreconditionViolation: If the entry was already resolved
        """
        if self.is_resolved:
            raise PreconditionViolation(
                f"Entry '{self.fact.title}' has already been resolved"
            )
        return self.model_copy(
            update={
                "is_resolved": True,
                "was_valid": was_valid,
                "was_challenged": challenged,
            }
        )


class EventChain(BaseModel):
    """Ordered history of submissions plus the current anchor.

    The anchor is the latest entry whose validity is not in dispute; it is
    the chronological baseline for the next challenge. Every operation
    returns a new chain.
    """

    entries: List[ChainEntry] = Field(default_factory=list)
    anchor_index: int = Field(default=-1, description="Index of the anchor, -1 when empty")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @classmethod
    def seeded(cls, fact: Fact) -> "EventChain":
        """Create a chain whose first entry is an already accepted seed."""
        seed = ChainEntry(
            submitting_player_id=SYSTEM_PLAYER_ID,
            submitting_player_name=SYSTEM_PLAYER_NAME,
            fact=fact,
            is_resolved=True,
            was_valid=True,
        )
        return cls(entries=[seed], anchor_index=0)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def last(self) -> Optional[ChainEntry]:
        return self.entries[-1] if self.entries else None

    def pending(self) -> Optional[ChainEntry]:
        """Return the unresolved latest entry, if any."""
        last = self.last
        if last is not None and not last.is_resolved:
            return last
        return None

    def anchor(self) -> Optional[ChainEntry]:
        """Return the entry at ``anchor_index`` or None."""
        if 0 <= self.anchor_index < len(self.entries):
            return self.entries[self.anchor_index]
        return None

    def contains_title(self, title: str) -> bool:
        wanted = title.casefold()
        return any(entry.fact.title.casefold() == wanted for entry in self.entries)

    def append_submission(
        self,
        player_id: str,
        player_name: str,
        fact: Fact,
    ) -> "EventChain":
        """Append an unresolved entry for a player's fact.

        Raises:
            PreconditionViolation: If an unresolved entry already exists
            DuplicateEventError: If the title is already in the chain
        """
        if self.pending() is not None:
            raise PreconditionViolation(
                "The previous submission must be resolved before another is added"
            )
        if self.contains_title(fact.title):
            raise DuplicateEventError(fact.title)

        entry = ChainEntry(
            submitting_player_id=player_id,
            submitting_player_name=player_name,
            fact=fact,
        )
        return self.model_copy(update={"entries": [*self.entries, entry]})

    def resolve_last(self, was_valid: bool, challenged: bool = True) -> "EventChain":
        """Resolve the latest entry and recompute the anchor.

        A valid entry becomes the new anchor. An invalid entry stays in the
        history but the anchor falls back to the entry before it.

        Raises:
            PreconditionViolation: If the chain is empty or already resolved
        """
        if not self.entries:
            raise PreconditionViolation("There are no events to resolve")

        last_index = len(self.entries) - 1
        entries = list(self.entries)
        entries[last_index] = entries[last_index].resolved(was_valid, challenged)

        if was_valid:
            anchor_index = last_index
        else:
            anchor_index = self._latest_valid_index(entries, before=last_index)

        return self.model_copy(update={"entries": entries, "anchor_index": anchor_index})

    @staticmethod
    def _latest_valid_index(entries: List[ChainEntry], before: int) -> int:
        # Normally the entry right before the disputed one; only an earlier
        # overturned entry pushes the baseline further back.
        for index in range(before - 1, -1, -1):
            entry = entries[index]
            if entry.is_resolved and entry.was_valid:
                return index
        return -1

"""Port interface for the classifier result cache."""

import re
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, Field

from ..models.fact import Fact


def normalize_query(text: str) -> str:
    """Case-fold and collapse whitespace to build a cache key."""
    return re.sub(r"\s+", " ", text.strip()).casefold()


class CachedResult(BaseModel):
    """Classifier output stored for a normalized query."""

    facts: List[Fact] = Field(default_factory=list, description="Ranked candidates")
    cached_at: datetime = Field(..., description="Write time, used for eviction")


class CacheStats(BaseModel):
    """Cache occupancy."""

    size: int
    max_size: int


class ResultCache(Protocol):
    """Protocol for size-bounded classifier caches."""

    def get(self, query: str) -> Optional[List[Fact]]:
        """Return cached facts for a query, if present."""
        ...

    def put(self, query: str, facts: List[Fact]) -> None:
        """Store facts for a query."""
        ...

    def put_many(self, items: Dict[str, List[Fact]]) -> None:
        """Store several queries in one write."""
        ...

    def clear(self) -> None:
        """Remove every entry."""
        ...

    def stats(self) -> CacheStats:
        """Return occupancy figures."""
        ...

"""Port interface for external historical fact sources."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.fact import CalendarDate


class SearchHit(BaseModel):
    """A ranked candidate returned by a text search."""

    title: str = Field(..., description="Page or entity title")
    snippet: str = Field(default="", description="Search snippet")
    source_id: Optional[str] = Field(None, description="Page id or entity id at the source")


class PageDetails(BaseModel):
    """Descriptive data for one candidate."""

    title: str = Field(..., description="Canonical title")
    extract: str = Field(default="", description="Plain-text description")
    categories: List[str] = Field(
        default_factory=list,
        description="Category names, e.g. 'Category:Battles involving England'",
    )
    type_labels: List[str] = Field(
        default_factory=list,
        description="Instance-of type labels from structured sources",
    )
    url: Optional[str] = Field(None, description="Canonical URL")
    structured_date: Optional[CalendarDate] = Field(
        None, description="Date taken from structured claims, when the source has them"
    )


class FactSource(ABC):
    """Abstract interface for fact sources.

    Search returns hits in the source's own ranking order. Transport
    failures are raised as ``ExternalUnavailableError``; the classifier
    treats them like an empty result.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Open connections and verify the source is reachable."""
        pass

    @abstractmethod
    async def search(self, query: str, limit: int = 10) -> List[SearchHit]:
        """Search for candidates matching free text.

        Args:
            query: Free-text query
            limit: Maximum number of hits

        Returns:
            Ranked hits, best first
        """
        pass

    @abstractmethod
    async def get_page_details(self, hit: SearchHit) -> Optional[PageDetails]:
        """Fetch descriptive details for a hit.

        Args:
            hit: Search hit to expand

        Returns:
            Page details, or None when the page does not exist
        """
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Release resources."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name."""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        pass

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider capabilities."""
        return {"text_search": True, "page_details": True, "structured_dates": False}

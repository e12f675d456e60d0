"""Wikipedia adapter implementation of the fact source interface."""

import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from cachetools import TTLCache
from pydantic import BaseModel, Field

from ...domain.errors import ExternalUnavailableError
from ...domain.ports.fact_source import FactSource, PageDetails, SearchHit

logger = logging.getLogger(__name__)

_HTML_TAG = re.compile(r"<[^>]+>")


class WikipediaConfig(BaseModel):
    """Configuration for Wikipedia adapter."""

    api_url: str = Field(
        default="https://en.wikipedia.org/w/api.php",
        description="MediaWiki API endpoint"
    )
    user_agent: str = Field(
        default="HistoryBluff/1.0",
        description="User agent for Wikipedia API"
    )
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")
    extract_sentences: int = Field(
        default=10,
        description="Sentences of plain text requested per page; dates of long wars sit past the intro"
    )
    category_limit: int = Field(default=50, description="Maximum categories requested per page")


class WikipediaAdapter(FactSource):
    """Wikipedia implementation of the fact source interface.

    Talks to the MediaWiki action API directly: ``list=search`` for ranked
    hits and ``prop=extracts|info|categories`` for plain-text page details.
    Responses are cached in memory with a TTL.
    """

    def __init__(
        self,
        config: Optional[WikipediaConfig] = None,
        provider_name: str = "Wikipedia",
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            provider_name: Name of the provider
        """
        self._config = config or WikipediaConfig()
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False
        self._cache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl
        )

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers={"User-Agent": self._config.user_agent},
            )
        self._initialized = True

    async def _get(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self._client:
            raise RuntimeError("Provider not initialized")

        try:
            response = await self._client.get(
                self._config.api_url,
                params={**params, "format": "json", "formatversion": 2},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise ExternalUnavailableError(f"Wikipedia request failed: {e}") from e
        except ValueError as e:
            raise ExternalUnavailableError(f"Wikipedia returned invalid JSON: {e}") from e

    async def search(self, query: str, limit: int = 10) -> List[SearchHit]:
        """Search Wikipedia for pages matching the query.

        Args:
            query: Search query
            limit: Maximum number of results

        Returns:
            Hits in Wikipedia's ranking order
        """
        cache_key = f"search:{query}:{limit}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        data = await self._get({
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": limit,
        })

        hits = [
            SearchHit(
                title=item["title"],
                snippet=_HTML_TAG.sub("", item.get("snippet", "")),
                source_id=str(item["pageid"]) if "pageid" in item else None,
            )
            for item in data.get("query", {}).get("search", [])
        ]
        logger.debug(f"Wikipedia search '{query}' returned {len(hits)} hits")
        self._cache[cache_key] = hits
        return hits

    async def get_page_details(self, hit: SearchHit) -> Optional[PageDetails]:
        """Fetch the plain-text extract, categories and URL of a page.

        Args:
            hit: Search hit naming the page

        Returns:
            Page details, or None if the page is missing
        """
        cache_key = f"page:{hit.title}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        data = await self._get({
            "action": "query",
            "titles": hit.title,
            "prop": "extracts|info|categories",
            "explaintext": 1,
            "exsentences": self._config.extract_sentences,
            "inprop": "url",
            "cllimit": self._config.category_limit,
            "redirects": 1,
        })

        pages = data.get("query", {}).get("pages", [])
        if not pages or pages[0].get("missing") or pages[0].get("invalid"):
            return None

        page = pages[0]
        details = PageDetails(
            title=page.get("title", hit.title),
            extract=page.get("extract", ""),
            categories=[category["title"] for category in page.get("categories", [])],
            url=page.get("fullurl"),
        )
        self._cache[cache_key] = details
        return details

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False
        self._cache.clear()

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available."""
        return self._initialized

"""Wikidata adapter implementation of the fact source interface."""

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from cachetools import TTLCache
from pydantic import BaseModel, Field, ValidationError

from ...domain.errors import ExternalUnavailableError
from ...domain.models.fact import CalendarDate
from ...domain.ports.fact_source import FactSource, PageDetails, SearchHit

logger = logging.getLogger(__name__)

# Point in time, start time, inception; first present claim wins
DATE_PROPERTIES = ("P585", "P580", "P571")
INSTANCE_OF = "P31"

# "+1066-10-14T00:00:00Z"; month or day 00 means the precision is coarser
_WIKIDATA_TIME = re.compile(r"^\+(\d{1,4})-(\d{2})-(\d{2})T")


def parse_wikidata_time(value: str) -> Optional[CalendarDate]:
    """Parse a Wikidata time string into a complete date.

    Returns:
        The date, or None for BCE, partial or impossible dates
    """
    match = _WIKIDATA_TIME.match(value or "")
    if not match:
        return None
    year, month, day = (int(group) for group in match.groups())
    if month == 0 or day == 0:
        return None
    try:
        return CalendarDate(year=year, month=month - 1, day=day)
    except ValidationError:
        return None


def _claim_values(claims: Dict[str, Any], prop: str) -> List[Any]:
    values = []
    for claim in claims.get(prop, []):
        datavalue = claim.get("mainsnak", {}).get("datavalue")
        if datavalue:
            values.append(datavalue.get("value"))
    return values


def structured_date(claims: Dict[str, Any]) -> Optional[CalendarDate]:
    """Date from the first of P585, P580 or P571 that is present."""
    for prop in DATE_PROPERTIES:
        values = _claim_values(claims, prop)
        if values:
            return parse_wikidata_time(values[0].get("time", ""))
    return None


class WikidataConfig(BaseModel):
    """Configuration for Wikidata adapter."""

    api_url: str = Field(
        default="https://www.wikidata.org/w/api.php",
        description="Wikidata API endpoint"
    )
    wiki_base_url: str = Field(
        default="https://en.wikipedia.org/wiki/",
        description="Base URL for article links built from entity labels"
    )
    user_agent: str = Field(default="HistoryBluff/1.0", description="User agent for Wikidata API")
    language: str = Field(default="en", description="Label and search language")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    cache_ttl: int = Field(default=3600, description="Cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum cache size")


class WikidataAdapter(FactSource):
    """Wikidata implementation of the fact source interface.

    Entities carry structured dates and instance-of types, so the
    classifier can skip text extraction and use the types as event hints.
    The entity description stands in for the page extract.
    """

    def __init__(
        self,
        config: Optional[WikidataConfig] = None,
        provider_name: str = "Wikidata",
    ):
        self._config = config or WikidataConfig()
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
                params={**params, "format": "json"},
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise ExternalUnavailableError(f"Wikidata request failed: {e}") from e
        except ValueError as e:
            raise ExternalUnavailableError(f"Wikidata returned invalid JSON: {e}") from e

    async def search(self, query: str, limit: int = 10) -> List[SearchHit]:
        """Search entities by label.

        Returns:
            Hits whose ``source_id`` is the entity id, e.g. "Q83224"
        """
        cache_key = f"search:{query}:{limit}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        data = await self._get({
            "action": "wbsearchentities",
            "search": query,
            "language": self._config.language,
            "limit": limit,
        })

        hits = []
        for item in data.get("search", []):
            label = item.get("label") or item.get("display", {}).get("label", {}).get("value")
            if not label:
                continue
            description = item.get("description") or item.get("display", {}).get("description", {}).get("value", "")
            hits.append(SearchHit(title=label, snippet=description or "", source_id=item["id"]))

        self._cache[cache_key] = hits
        return hits

    async def _get_entities(self, ids: List[str], props: str) -> Dict[str, Any]:
        data = await self._get({
            "action": "wbgetentities",
            "ids": "|".join(ids),
            "props": props,
            "languages": self._config.language,
        })
        return data.get("entities", {})

    async def _type_labels(self, claims: Dict[str, Any]) -> List[str]:
        type_ids = [value["id"] for value in _claim_values(claims, INSTANCE_OF) if value and "id" in value]
        if not type_ids:
            return []
        entities = await self._get_entities(type_ids, props="labels")
        labels = []
        for type_id in type_ids:
            label = entities.get(type_id, {}).get("labels", {}).get(self._config.language, {}).get("value")
            if label:
                labels.append(label)
        return labels

    async def get_page_details(self, hit: SearchHit) -> Optional[PageDetails]:
        """Fetch an entity's label, description, date claims and types.

        Args:
            hit: Hit from ``search``; its ``source_id`` names the entity

        Returns:
            Page details, or None if the entity is missing
        """
        entity_id = hit.source_id
        if not entity_id:
            return None

        cache_key = f"entity:{entity_id}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        entity = (await self._get_entities([entity_id], props="labels|descriptions|claims")).get(entity_id)
        if not entity or "missing" in entity:
            return None

        language = self._config.language
        label = entity.get("labels", {}).get(language, {}).get("value", hit.title)
        description = entity.get("descriptions", {}).get(language, {}).get("value", hit.snippet)
        claims = entity.get("claims", {})

        details = PageDetails(
            title=label,
            extract=description or "",
            type_labels=await self._type_labels(claims),
            url=self._config.wiki_base_url + quote(label.replace(" ", "_")),
            structured_date=structured_date(claims),
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

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider capabilities."""
        return {"text_search": True, "page_details": True, "structured_dates": True}

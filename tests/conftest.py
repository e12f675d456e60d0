"""Test configuration and common fixtures."""

import random
from typing import Dict, List, Optional

import pytest

from history_bluff.domain.errors import ExternalUnavailableError
from history_bluff.domain.ports.fact_source import FactSource, PageDetails, SearchHit
from history_bluff.domain.services.fact_classifier import FactClassifier
from history_bluff.infrastructure.cache.json_result_cache import JsonResultCache


class FakeFactSource(FactSource):
    """In-memory fact source recording every call."""

    def __init__(
        self,
        pages: Optional[List[PageDetails]] = None,
        search_results: Optional[Dict[str, List[str]]] = None,
    ):
        self.pages = {page.title: page for page in pages or []}
        self.search_results = search_results or {}
        self.search_calls: List[str] = []
        self.detail_calls: List[str] = []
        self.fail_search = False
        self._initialized = False

    async def initialize(self) -> None:
        self._initialized = True

    async def search(self, query: str, limit: int = 10) -> List[SearchHit]:
        self.search_calls.append(query)
        if self.fail_search:
            raise ExternalUnavailableError("search is down")
        return [SearchHit(title=title) for title in self.search_results.get(query, [])[:limit]]

    async def get_page_details(self, hit: SearchHit) -> Optional[PageDetails]:
        self.detail_calls.append(hit.title)
        return self.pages.get(hit.title)

    async def shutdown(self) -> None:
        self._initialized = False

    @property
    def provider_name(self) -> str:
        return "Fake"

    @property
    def is_available(self) -> bool:
        return self._initialized


HASTINGS = PageDetails(
    title="Battle of Hastings",
    extract=(
        "The Battle of Hastings was fought on 14 October 1066 between the Norman-French "
        "army of William, the Duke of Normandy, and an English army under the Anglo-Saxon "
        "King Harold Godwinson, beginning the Norman Conquest of England."
    ),
    categories=["Category:Battles involving England"],
    url="https://en.wikipedia.org/wiki/Battle_of_Hastings",
)

STAMFORD_BRIDGE = PageDetails(
    title="Battle of Stamford Bridge",
    extract=(
        "The Battle of Stamford Bridge took place at the village of Stamford Bridge, "
        "East Riding of Yorkshire, in England, on 25 September 1066."
    ),
    url="https://en.wikipedia.org/wiki/Battle_of_Stamford_Bridge",
)

TWENTY_FIRST_CENTURY = PageDetails(
    title="21st century",
    extract="The 21st century is the current century in the Anno Domini era. It began on January 1, 2001.",
)

HASTINGS_TOWN = PageDetails(
    title="Hastings",
    extract="Hastings is a town in East Sussex, England. It was founded in the 9th century.",
    categories=["Category:Towns in East Sussex"],
)

LEONARDO = PageDetails(
    title="Leonardo da Vinci",
    extract=(
        "Leonardo di ser Piero da Vinci (15 April 1452 – 2 May 1519) was an Italian "
        "polymath of the High Renaissance who was active as a painter and engineer."
    ),
    url="https://en.wikipedia.org/wiki/Leonardo_da_Vinci",
)


@pytest.fixture
def fake_source() -> FakeFactSource:
    """Provide a fake source knowing a handful of pages."""
    return FakeFactSource(
        pages=[HASTINGS, STAMFORD_BRIDGE, TWENTY_FIRST_CENTURY, HASTINGS_TOWN, LEONARDO],
        search_results={
            "Battle of Hastings": ["Battle of Hastings", "Hastings", "Battle of Stamford Bridge"],
            "21st century": ["21st century", "Battle of Hastings"],
            "Leonardo": ["Leonardo da Vinci"],
        },
    )


@pytest.fixture
def cache_path(tmp_path) -> str:
    """Provide a cache file path inside a temporary directory."""
    return str(tmp_path / "cache" / "event_cache.json")


@pytest.fixture
def result_cache(cache_path: str) -> JsonResultCache:
    return JsonResultCache(path=cache_path, max_entries=50)


@pytest.fixture
def classifier(fake_source: FakeFactSource, result_cache: JsonResultCache) -> FactClassifier:
    return FactClassifier(fake_source, cache=result_cache)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)

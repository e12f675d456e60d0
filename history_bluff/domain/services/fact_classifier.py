"""Service turning free-text input into validated, dated facts."""

import asyncio
import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from ..classification.biography import biographical_fact, looks_biographical
from ..classification.date_extraction import extract_event_date
from ..classification.event_gate import passes_event_gate
from ..classification.title_filters import is_bare_year_query, is_time_period_or_meta_title
from ..errors import BareYearQueryError, ExternalUnavailableError, MalformedDateError, PreconditionViolation
from ..models.fact import MAX_YEAR, MIN_YEAR, Fact
from ..ports.fact_source import FactSource, PageDetails, SearchHit
from ..ports.result_cache import ResultCache

logger = logging.getLogger(__name__)


class ClassifierConfig(BaseModel):
    """Configuration for the fact classifier."""

    candidate_limit: int = Field(default=3, ge=1, description="Maximum candidates returned per query")
    search_limit: int = Field(default=10, ge=1, description="Search hits requested from the source")
    min_year: int = Field(default=MIN_YEAR, description="Earliest acceptable year")
    max_year: int = Field(default=MAX_YEAR, description="Latest acceptable year")

    class Config:
        """Pydantic model configuration."""
        frozen = True


class FactClassifier:
    """Classify player input into dated historical facts.

    Each search hit goes through an ordered pipeline: meta-title exclusion,
    the biographical shortcut, the event gate, then date extraction and
    calendar validation. Survivors keep the source's ranking order.
    """

    def __init__(
        self,
        fact_source: FactSource,
        cache: Optional[ResultCache] = None,
        config: Optional[ClassifierConfig] = None,
    ):
        """Initialize the classifier.

        Args:
            fact_source: Source used for search and page details
            cache: Optional result cache consulted before the source
            config: Classifier limits and year bounds
        """
        self.source = fact_source
        self.cache = cache
        self.config = config or ClassifierConfig()
        logger.info(f"🔧 FactClassifier initialized with source '{fact_source.provider_name}'")

    async def classify(self, query: str) -> List[Fact]:
        """Classify free text into up to ``candidate_limit`` facts.

        Args:
            query: Player input, e.g. "Battle of Hastings"

        Returns:
            Ranked candidate facts, empty when nothing survives

        Raises:
            BareYearQueryError: If the input is only a year
            PreconditionViolation: If the input is empty
        """
        if is_bare_year_query(query):
            raise BareYearQueryError(query)
        if not query.strip():
            raise PreconditionViolation("Please enter a historical event.")

        if self.cache is not None:
            cached = self.cache.get(query)
            if cached is not None:
                logger.info(f"💾 Cache hit for '{query}' ({len(cached)} candidates)")
                return cached

        try:
            hits = await self.source.search(query, limit=self.config.search_limit)
        except ExternalUnavailableError as e:
            logger.warning(f"⚠️ Search failed for '{query}': {e}")
            return []

        logger.info(f"🔍 {len(hits)} search hits for '{query}'")
        facts = await self.evaluate_hits(hits, limit=self.config.candidate_limit)

        if facts and self.cache is not None:
            # The file cache rewrites its JSON on every put; keep that off the event loop
            await asyncio.to_thread(self.cache.put, query, facts)
        return facts

    async def evaluate_hits(self, hits: List[SearchHit], limit: int) -> List[Fact]:
        """Run hits through the pipeline in order until ``limit`` facts survive."""
        facts: List[Fact] = []
        seen_titles = set()
        for hit in hits:
            if len(facts) >= limit:
                break
            fact = await self.evaluate_hit(hit)
            if fact is None:
                continue
            key = fact.title.casefold()
            if key in seen_titles:
                continue
            seen_titles.add(key)
            facts.append(fact)
        return facts

    async def evaluate_hit(self, hit: SearchHit) -> Optional[Fact]:
        """Fetch one hit's page and classify it.

        Returns:
            The fact, or None when the hit is rejected or unreachable
        """
        if is_time_period_or_meta_title(hit.title):
            logger.debug(f"Skipping meta title '{hit.title}'")
            return None

        try:
            details = await self.source.get_page_details(hit)
        except ExternalUnavailableError as e:
            logger.warning(f"⚠️ Could not fetch '{hit.title}': {e}")
            return None

        if details is None:
            return None
        # Redirects can land on a meta page
        if is_time_period_or_meta_title(details.title):
            logger.debug(f"Skipping meta title '{details.title}' (resolved from '{hit.title}')")
            return None

        return self.classify_page(details)

    def classify_page(self, details: PageDetails) -> Optional[Fact]:
        """Classify fetched page details into a fact.

        Args:
            details: Page to classify

        Returns:
            The fact, or None when the page is rejected
        """
        min_year, max_year = self.config.min_year, self.config.max_year
        try:
            if looks_biographical(details.extract):
                fact = biographical_fact(details, min_year, max_year)
                if fact is None:
                    logger.debug(f"Rejected '{details.title}': biography without a complete date")
                return fact

            if not passes_event_gate(details):
                logger.debug(f"Rejected '{details.title}': not an event")
                return None

            if details.structured_date is not None:
                calendar_date = details.structured_date
                if not min_year <= calendar_date.year <= max_year:
                    raise MalformedDateError(f"Year {calendar_date.year} outside {min_year}-{max_year}")
                title = details.title
            else:
                match = extract_event_date(details.extract, min_year, max_year)
                if match is None:
                    logger.debug(f"Rejected '{details.title}': no date found")
                    return None
                calendar_date = match.calendar_date
                title = match.apply_prefix(details.title)
        except MalformedDateError as e:
            logger.debug(f"Rejected '{details.title}': {e}")
            return None

        return Fact(
            title=title,
            calendar_date=calendar_date,
            source_url=details.url,
            summary=details.extract[:1000] or None,
        )

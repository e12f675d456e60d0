"""Pick the starting event for a game from the configured century."""

import logging
import random
from typing import List, Optional

from ..errors import EventNotFoundError, ExternalUnavailableError
from ..models.fact import Fact
from .fact_classifier import FactClassifier

logger = logging.getLogger(__name__)

SEED_TOPICS = ("battle", "war", "treaty", "revolution", "disaster", "conflict")


def ordinal(number: int) -> str:
    """Format 1 as "1st", 12 as "12th", 21 as "21st"."""
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def century_years(century: int) -> tuple:
    """Inclusive (start, end) years of a century, e.g. 12 -> (1100, 1199)."""
    start = (century - 1) * 100
    return start, start + 99


def era_search_phrases(century: int) -> List[str]:
    """Search phrases targeting events of a century, in a fixed order."""
    start, end = century_years(century)
    middle = start + 50
    label = f"{ordinal(century)} century"
    return [
        f"{label} battle",
        f"{label} war",
        f"{label} treaty",
        f"{label} revolution",
        f"{label} disaster",
        f"battle {start}",
        f"war {middle}",
        f"treaty {middle}",
        f"conflict {end}",
        f"historical event {middle}",
    ]


def pick_seed(candidates: List[Fact], rng: Optional[random.Random] = None) -> Fact:
    """Choose one candidate uniformly at random.

    Raises:
        EventNotFoundError: If there are no candidates
    """
    if not candidates:
        raise EventNotFoundError("No starting event candidates to choose from")
    return (rng or random).choice(candidates)


class SeedEventFinder:
    """Collect validated events from a century and pick one to start with."""

    def __init__(
        self,
        classifier: FactClassifier,
        rng: Optional[random.Random] = None,
        max_candidates: int = 10,
        hits_per_phrase: int = 15,
    ):
        self.classifier = classifier
        self.rng = rng or random.Random()
        self.max_candidates = max_candidates
        self.hits_per_phrase = hits_per_phrase

    async def collect_candidates(self, century: int) -> List[Fact]:
        """Gather up to ``max_candidates`` distinct facts dated inside the century."""
        start, end = century_years(century)
        candidates: List[Fact] = []
        seen_titles = set()

        for phrase in era_search_phrases(century):
            if len(candidates) >= self.max_candidates:
                break
            try:
                hits = await self.classifier.source.search(phrase, limit=self.hits_per_phrase)
            except ExternalUnavailableError as e:
                logger.warning(f"⚠️ Seed search '{phrase}' failed: {e}")
                continue

            for hit in hits:
                if len(candidates) >= self.max_candidates:
                    break
                fact = await self.classifier.evaluate_hit(hit)
                if fact is None or not start <= fact.year <= end:
                    continue
                if fact.title.casefold() in seen_titles:
                    continue
                seen_titles.add(fact.title.casefold())
                candidates.append(fact)

        logger.info(f"🎲 Collected {len(candidates)} seed candidates for the {ordinal(century)} century")
        return candidates

    async def find_seed(self, century: int) -> Fact:
        """Find a random starting event in the century.

        Raises:
            EventNotFoundError: If no candidate could be found
        """
        candidates = await self.collect_candidates(century)
        if not candidates:
            raise EventNotFoundError(
                f"Could not find a starting event in the {ordinal(century)} century. Please try again."
            )
        seed = pick_seed(candidates, self.rng)
        logger.info(f"🌱 Seed event: {seed.title} ({seed.year})")
        return seed

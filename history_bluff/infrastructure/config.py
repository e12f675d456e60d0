"""Runtime configuration loaded from the environment."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = str(Path.home() / ".history_bluff" / "event_cache.json")


class HistoryBluffConfig(BaseModel):
    """Configuration for the lookup adapters, the cache and the classifier."""

    fact_source: str = Field(default="wikipedia", description="Registered fact source name")
    wikipedia_api_url: str = Field(
        default="https://en.wikipedia.org/w/api.php", description="MediaWiki API endpoint"
    )
    wikidata_api_url: str = Field(
        default="https://www.wikidata.org/w/api.php", description="Wikidata API endpoint"
    )
    user_agent: str = Field(default="HistoryBluff/1.0", description="User agent for API requests")
    lookup_timeout: float = Field(default=10.0, gt=0, description="Lookup timeout in seconds")
    cache_path: str = Field(default=DEFAULT_CACHE_PATH, description="Result cache file")
    cache_max_entries: int = Field(default=500, ge=1, description="Result cache capacity")
    candidate_limit: int = Field(default=3, ge=1, description="Candidates returned per query")
    search_limit: int = Field(default=10, ge=1, description="Search hits requested per query")
    finished_game_ttl: float = Field(
        default=3600.0, ge=0, description="Seconds a finished game is kept before it is dropped"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    @classmethod
    def from_env(cls) -> "HistoryBluffConfig":
        """Create configuration from environment variables and an optional .env file."""
        if load_dotenv():
            logger.info("📁 Environment variables loaded from .env file via python-dotenv")

        defaults = cls()
        config = cls(
            fact_source=os.getenv("HISTORY_BLUFF_FACT_SOURCE", defaults.fact_source),
            wikipedia_api_url=os.getenv("WIKIPEDIA_API_URL", defaults.wikipedia_api_url),
            wikidata_api_url=os.getenv("WIKIDATA_API_URL", defaults.wikidata_api_url),
            user_agent=os.getenv("HISTORY_BLUFF_USER_AGENT", defaults.user_agent),
            lookup_timeout=float(os.getenv("HISTORY_BLUFF_LOOKUP_TIMEOUT", defaults.lookup_timeout)),
            cache_path=os.path.expanduser(os.getenv("HISTORY_BLUFF_CACHE_PATH", defaults.cache_path)),
            cache_max_entries=int(os.getenv("HISTORY_BLUFF_CACHE_MAX_ENTRIES", defaults.cache_max_entries)),
            candidate_limit=int(os.getenv("HISTORY_BLUFF_CANDIDATE_LIMIT", defaults.candidate_limit)),
            search_limit=int(os.getenv("HISTORY_BLUFF_SEARCH_LIMIT", defaults.search_limit)),
            finished_game_ttl=float(
                os.getenv("HISTORY_BLUFF_FINISHED_GAME_TTL", defaults.finished_game_ttl)
            ),
            log_level=os.getenv("HISTORY_BLUFF_LOG_LEVEL", defaults.log_level).upper(),
        )
        logger.info(f"⚙️ Fact source: {config.fact_source}, cache: {config.cache_path}")
        return config

"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from ..domain.services.fact_classifier import ClassifierConfig, FactClassifier
from ..domain.services.game_service import GameService
from .cache.json_result_cache import JsonResultCache
from .config import HistoryBluffConfig
from .lookup.factory import FactSourceFactory
from .lookup.wikidata_adapter import WikidataConfig
from .lookup.wikipedia_adapter import WikipediaConfig

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, config: Optional[HistoryBluffConfig] = None):
        """Initialize service container.

        Args:
            config: Runtime configuration, read from the environment by default
        """
        self.config = config or HistoryBluffConfig.from_env()
        self.source_factory = FactSourceFactory()
        self._services: Dict[str, Any] = {}
        self._setup_services()

    def _setup_services(self):
        """Setup services that need no network access."""
        logger.info("🔧 Setting up service container...")
        result_cache = JsonResultCache(
            path=self.config.cache_path,
            max_entries=self.config.cache_max_entries,
        )

        # GameService is created lazily once the fact source is initialized
        self._services = {
            'result_cache': result_cache,
            'game_service': None,
        }
        logger.info("✅ Service container setup completed")

    def _source_kwargs(self) -> Dict[str, Any]:
        name = self.config.fact_source
        if name == "wikipedia":
            return {"config": WikipediaConfig(
                api_url=self.config.wikipedia_api_url,
                user_agent=self.config.user_agent,
                timeout=self.config.lookup_timeout,
            )}
        if name == "wikidata":
            return {"config": WikidataConfig(
                api_url=self.config.wikidata_api_url,
                user_agent=self.config.user_agent,
                timeout=self.config.lookup_timeout,
            )}
        return {}

    async def _ensure_game_service(self) -> GameService:
        """Ensure the game service is created with an initialized fact source."""
        if self._services['game_service'] is None:
            name = self.config.fact_source
            logger.info(f"📚 Setting up fact source '{name}'...")
            source = self.source_factory.get_source(name)
            if source is None:
                source = await self.source_factory.create_source(name, **self._source_kwargs())

            classifier = FactClassifier(
                source,
                cache=self.get_result_cache(),
                config=ClassifierConfig(
                    candidate_limit=self.config.candidate_limit,
                    search_limit=self.config.search_limit,
                ),
            )
            self._services['game_service'] = GameService(
                classifier, finished_ttl=self.config.finished_game_ttl
            )
            logger.info("✅ GameService created")

        return self._services['game_service']

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_result_cache(self) -> JsonResultCache:
        """Get the classifier result cache."""
        return self.get('result_cache')

    async def get_game_service(self) -> GameService:
        """Get the game service with its fact source."""
        return await self._ensure_game_service()

    async def shutdown(self) -> None:
        """Shutdown all fact sources."""
        await self.source_factory.shutdown_all()
        self._services['game_service'] = None


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_result_cache() -> JsonResultCache:
    """FastAPI dependency for the result cache."""
    return get_service_container().get_result_cache()


async def get_game_service() -> GameService:
    """FastAPI dependency for the game service."""
    return await get_service_container().get_game_service()

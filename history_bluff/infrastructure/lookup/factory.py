"""Factory for creating and managing fact sources."""

import logging
from typing import Any, Dict, Optional, Type

from ...domain.ports.fact_source import FactSource
from .wikidata_adapter import WikidataAdapter
from .wikipedia_adapter import WikipediaAdapter

logger = logging.getLogger(__name__)


class FactSourceFactory:
    """Factory for creating and managing fact sources.

    This factory maintains a registry of available fact sources
    and handles their lifecycle (initialization, shutdown).
    """

    def __init__(self):
        """Initialize the factory."""
        self._source_registry: Dict[str, Type[FactSource]] = {}
        self._active_sources: Dict[str, FactSource] = {}

        self.register_source("wikipedia", WikipediaAdapter)
        self.register_source("wikidata", WikidataAdapter)

    def register_source(self, name: str, source_class: Type[FactSource]) -> None:
        """Register a new fact source class.

        Args:
            name: Unique identifier for the source
            source_class: The source class to register

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._source_registry:
            raise ValueError(f"Fact source {name} already registered")
        self._source_registry[name] = source_class

    async def create_source(self, name: str, **config: Any) -> FactSource:
        """Create and initialize a new fact source instance.

        Args:
            name: Name of the source to create
            **config: Source-specific constructor arguments

        Returns:
            Initialized source instance

        Raises:
            ValueError: If the source is not registered
            RuntimeError: If initialization fails
        """
        if name not in self._source_registry:
            raise ValueError(f"Fact source {name} not registered")

        source = self._source_registry[name](**config)
        try:
            await source.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize fact source {name}: {e}") from e

        self._active_sources[name] = source
        logger.info(f"✅ Fact source '{name}' ready")
        return source

    def get_source(self, name: str) -> Optional[FactSource]:
        """Get an active source instance by name, or None."""
        return self._active_sources.get(name)

    async def shutdown_source(self, name: str) -> None:
        source = self._active_sources.pop(name, None)
        if source:
            await source.shutdown()

    async def shutdown_all(self) -> None:
        """Shutdown all active sources."""
        for name in list(self._active_sources):
            await self.shutdown_source(name)

    def list_sources(self) -> Dict[str, bool]:
        """Map registered source names to whether an instance is active."""
        return {name: name in self._active_sources for name in self._source_registry}

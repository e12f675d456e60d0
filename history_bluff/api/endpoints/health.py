"""Health check endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Any]:
    """Check the health of all service components.

    Returns:
        Fact source activity and cache occupancy
    """
    return {
        "status": "healthy",
        "fact_source": container.config.fact_source,
        "fact_sources": container.source_factory.list_sources(),
        "cache": container.get_result_cache().stats().model_dump(),
    }

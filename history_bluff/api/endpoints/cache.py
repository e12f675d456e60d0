"""Result cache endpoints."""

from typing import Dict

from fastapi import APIRouter, Depends

from ...infrastructure.cache.json_result_cache import JsonResultCache
from ...infrastructure.dependencies import get_result_cache

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats")
async def cache_stats(cache: JsonResultCache = Depends(get_result_cache)) -> Dict[str, int]:
    """Get the number of cached queries and the capacity."""
    return cache.stats().model_dump()


@router.delete("")
async def clear_cache(cache: JsonResultCache = Depends(get_result_cache)) -> Dict[str, int]:
    """Remove every cached query."""
    cache.clear()
    return cache.stats().model_dump()

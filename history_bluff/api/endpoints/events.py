"""Event lookup endpoints."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.services.game_service import GameService
from ...infrastructure.dependencies import get_game_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


class LookupRequest(BaseModel):
    """Request model for event lookup."""

    query: str = Field(..., description="Free-text event name, e.g. 'Battle of Hastings'")


@router.post("/lookup")
async def lookup_event(
    request: LookupRequest,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Classify free text into up to three dated candidate events.

    A bare year or an unknown event is not an error: the response carries
    ``success: false`` and a message asking the player to try again.
    """
    try:
        result = await service.lookup_event(request.query)
    except Exception as e:
        logger.error(f"❌ Lookup failed for '{request.query}': {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Lookup failed: {str(e)}",
        )
    return result.to_dict()

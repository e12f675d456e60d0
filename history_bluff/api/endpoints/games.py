"""Game lifecycle endpoints."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ...domain.errors import GameNotFoundError
from ...domain.models.fact import Fact
from ...domain.models.game import BufferRule, GameSettings
from ...domain.models.results import OperationResult
from ...domain.services.game_service import GameService
from ...infrastructure.dependencies import get_game_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])


class CreateGameRequest(BaseModel):
    """Request model for creating a game."""

    host_name: str = Field(..., description="Display name of the host")
    settings: Optional[GameSettings] = Field(None, description="Initial settings")


class JoinGameRequest(BaseModel):
    """Request model for joining a game."""

    name: str = Field(..., description="Display name of the new player")


class SetPlayersRequest(BaseModel):
    """Request model for replacing the roster of a hot-seat game."""

    names: List[str] = Field(..., description="Player names, the first one hosts")


class SettingsUpdateRequest(BaseModel):
    """Request model for updating settings; omitted fields keep their value."""

    starting_century: Optional[int] = None
    buffer_rules: Optional[List[BufferRule]] = None
    max_players: Optional[int] = None


class StartGameRequest(BaseModel):
    """Request model for starting a game."""

    players: Optional[List[str]] = Field(None, description="Optional roster replacing the lobby")


class SubmissionRequest(BaseModel):
    """Request model for submitting a chosen candidate."""

    fact: Fact = Field(..., description="Candidate returned by /events/lookup")
    player_id: Optional[str] = Field(None, description="Submitting player, checked against the turn")


class ChallengeRequest(BaseModel):
    """Request model for calling out the latest event."""

    challenger_id: str = Field(..., description="Player calling it out")


def _respond(result: OperationResult) -> Dict[str, Any]:
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return result.to_dict()


def _not_found(e: GameNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


@router.post("", status_code=201)
async def create_game(
    request: CreateGameRequest,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Create a game in the lobby."""
    return _respond(await service.create_game(request.host_name, settings=request.settings))


@router.get("/{game_id}")
async def get_game(game_id: str, service: GameService = Depends(get_game_service)) -> Dict[str, Any]:
    """Get the full state snapshot of a game."""
    state = service.get_state(game_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return state.model_dump(mode="json")


@router.post("/{game_id}/players")
async def join_game(
    game_id: str,
    request: JoinGameRequest,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Join a game in the lobby."""
    try:
        return _respond(await service.join_game(game_id, request.name))
    except GameNotFoundError as e:
        raise _not_found(e)


@router.put("/{game_id}/players")
async def set_players(
    game_id: str,
    request: SetPlayersRequest,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Replace the lobby roster."""
    try:
        return _respond(await service.set_players(game_id, request.names))
    except GameNotFoundError as e:
        raise _not_found(e)


@router.patch("/{game_id}/settings")
async def update_settings(
    game_id: str,
    request: SettingsUpdateRequest,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Update lobby settings."""
    changes = request.model_dump(exclude_none=True)
    try:
        return _respond(await service.update_settings(game_id, **changes))
    except GameNotFoundError as e:
        raise _not_found(e)


@router.post("/{game_id}/start")
async def start_game(
    game_id: str,
    request: Optional[StartGameRequest] = None,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Find a starting event and begin play."""
    players = request.players if request else None
    try:
        return _respond(await service.start_game(game_id, players=players))
    except GameNotFoundError as e:
        raise _not_found(e)


@router.post("/{game_id}/submissions")
async def submit_fact(
    game_id: str,
    request: SubmissionRequest,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Submit the current player's chosen event."""
    try:
        return _respond(await service.submit_fact(game_id, request.fact, player_id=request.player_id))
    except GameNotFoundError as e:
        raise _not_found(e)


@router.post("/{game_id}/challenges")
async def challenge(
    game_id: str,
    request: ChallengeRequest,
    service: GameService = Depends(get_game_service),
) -> Dict[str, Any]:
    """Call out the latest submission."""
    try:
        return _respond(await service.challenge(game_id, request.challenger_id))
    except GameNotFoundError as e:
        raise _not_found(e)


@router.delete("/{game_id}")
async def reset_game(game_id: str, service: GameService = Depends(get_game_service)) -> Dict[str, Any]:
    """Drop a game."""
    try:
        return _respond(await service.reset_game(game_id))
    except GameNotFoundError as e:
        raise _not_found(e)

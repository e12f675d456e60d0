"""Decide who is eliminated when the latest submission is called out."""

import logging

from ..models.game import GameState
from ..models.results import ChallengeOutcome
from .buffer_policy import BufferPolicy, is_event_within_buffer

logger = logging.getLogger(__name__)


def resolve_challenge(state: GameState, challenger_id: str) -> ChallengeOutcome:
    """Compare the latest submission against the anchor.

    The tolerance comes from the anchor's year, not the disputed event's.
    A correct event eliminates the challenger; an incorrect one eliminates
    whoever submitted it. The state is not modified.

    Args:
        state: Current game state
        challenger_id: Player calling out the latest event

    Returns:
        The challenge outcome
    """
    disputed = state.chain.last
    if disputed is None:
        return ChallengeOutcome(
            eliminated_player_id=None,
            was_event_correct=True,
            explanation="No events to check",
        )

    anchor = state.anchor
    if anchor is None or state.anchor_index == len(state.chain) - 1:
        return ChallengeOutcome(
            eliminated_player_id=challenger_id,
            was_event_correct=True,
            explanation="Cannot call it out on the first event",
        )

    tolerance = BufferPolicy(state.buffer_rules).tolerance_for(anchor.fact.year)
    is_valid, year_difference = is_event_within_buffer(anchor.fact, disputed.fact, tolerance)
    logger.debug(
        f"Challenge on '{disputed.fact.title}' against '{anchor.fact.title}': "
        f"difference {year_difference}, tolerance {tolerance}"
    )

    verdict = "correct" if is_valid else "incorrect"
    return ChallengeOutcome(
        eliminated_player_id=challenger_id if is_valid else disputed.submitting_player_id,
        was_event_correct=is_valid,
        explanation=f"Event was {verdict}! Year difference: {year_difference}, Buffer: {tolerance}",
        year_difference=year_difference,
        tolerance=tolerance,
    )

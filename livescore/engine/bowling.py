"""
Bowler ledger - overs, runs conceded, extras and maidens per bowler.
"""
from typing import Optional

from livescore.engine.errors import ValidationError, RosterError
from livescore.engine.outcomes import OutcomeEffect, ExtraType
from livescore.engine.state import InningsState


def resolve_bowler(state: InningsState, bowler_id: Optional[int]) -> int:
    """
    Acting bowler for this delivery. A new bowler may take over at any point;
    their figures are created on first use and become the current bowler.
    """
    if bowler_id is None:
        bowler_id = state.current_bowler_id
    if bowler_id is None:
        raise ValidationError("Bowler must be provided")
    if state.bowling_squad and bowler_id not in state.bowling_squad:
        raise RosterError(f"Bowler {bowler_id} is not part of the bowling team")

    state.current_bowler_id = bowler_id
    state.ledger(bowler_id)
    if state.over_bowler_id is None:
        state.over_bowler_id = bowler_id
    return bowler_id


def record_delivery(state: InningsState, bowler_id: int, outcome: OutcomeEffect) -> bool:
    """
    Charge one delivery to the bowler. Runs after the score has been
    accumulated, so an over boundary is visible on state.score.
    Returns True when the delivery completed a maiden over.
    """
    ledger = state.ledger(bowler_id)
    ledger.runs_conceded += outcome.bowler_runs
    if outcome.counts_as_ball:
        ledger.balls_bowled += 1
    if outcome.extra_type == ExtraType.WIDE:
        ledger.wides += 1
    elif outcome.extra_type == ExtraType.NO_BALL:
        ledger.no_balls += 1

    state.over_runs_conceded += outcome.bowler_runs

    maiden = False
    if outcome.counts_as_ball and state.score.is_over_complete:
        # Only a bowler who bowled the whole over gets the maiden
        if state.over_runs_conceded == 0 and state.over_bowler_id == bowler_id:
            ledger.maidens += 1
            maiden = True
        state.over_runs_conceded = 0
        state.over_bowler_id = None
    return maiden

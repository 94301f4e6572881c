"""
Completion evaluator - decides when an innings, and the match, is over.
"""
import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from livescore.engine.score import Score, BALLS_PER_OVER
from livescore.engine.state import InningsState
from livescore.models.match import MatchStatus, InningsStatus


class CompletionReason(enum.Enum):
    OVERS_EXHAUSTED = "overs_exhausted"
    ALL_OUT = "all_out"
    TARGET_REACHED = "target_reached"


@dataclass(frozen=True)
class MatchResult:
    winner_id: Optional[int]
    is_tie: bool
    summary: str


def completion_reasons(
    score: Score,
    overs_limit: int,
    max_wickets: int,
    innings_number: int,
    target: Optional[int],
) -> list[CompletionReason]:
    """Every condition that ends the innings on this score, in check order"""
    reasons = []
    if score.balls >= overs_limit * BALLS_PER_OVER:
        reasons.append(CompletionReason.OVERS_EXHAUSTED)
    if score.wickets >= max_wickets:
        reasons.append(CompletionReason.ALL_OUT)
    if innings_number == 2 and target is not None and score.runs >= target:
        reasons.append(CompletionReason.TARGET_REACHED)
    return reasons


def evaluate(state: InningsState) -> list[CompletionReason]:
    return completion_reasons(
        state.score,
        state.match.overs_limit,
        state.max_wickets,
        state.innings_number,
        state.target,
    )


def decide_result(state: InningsState) -> MatchResult:
    """
    Result of the match once the second innings is over: the chasing side
    wins by exceeding the target, falls short and loses, or ties on it.
    """
    target = state.match.target_runs
    runs = state.score.runs
    batting = state.team_names.get(state.batting_team_id, f"Team #{state.batting_team_id}")
    bowling = state.team_names.get(state.bowling_team_id, f"Team #{state.bowling_team_id}")

    if runs > target:
        wickets_left = state.max_wickets - state.score.wickets
        summary = f"{batting} won by {wickets_left} wicket{'s' if wickets_left != 1 else ''}"
        balls_left = state.match.overs_limit * BALLS_PER_OVER - state.score.balls
        if balls_left > 0:
            summary += f" ({balls_left} balls remaining)"
        return MatchResult(state.batting_team_id, False, summary)
    if runs == target:
        return MatchResult(None, True, f"Match tied on {runs} runs")
    margin = target - runs
    return MatchResult(state.bowling_team_id, False, f"{bowling} won by {margin} run{'s' if margin != 1 else ''}")


def settle(state: InningsState, reasons: list[CompletionReason], now: datetime) -> list[str]:
    """
    Close the innings and apply the match level consequences.
    Returns the commentary lines announcing them.
    """
    state.status = InningsStatus.COMPLETED
    state.end_time = now
    score = state.score
    # One announcement however many conditions fired on the same ball
    if CompletionReason.ALL_OUT in reasons:
        headline = f"All out for {score.runs} ({score.overs_display} overs)"
    else:
        headline = f"End of innings: {score.runs}/{score.wickets} ({score.overs_display} overs)"
    lines = []

    if state.innings_number == 1:
        state.match.target_runs = score.runs + 1
        lines.append(f"{headline}. Target {state.match.target_runs}")
    elif state.match.target_runs is not None:
        result = decide_result(state)
        state.match.winner_id = result.winner_id
        state.match.is_tie = result.is_tie
        state.match.result_summary = result.summary
        state.match.status = MatchStatus.COMPLETED
        state.match.end_time = now
        lines.append(f"{headline}. {result.summary}")
    else:
        lines.append(headline)
    return lines

"""
Scoring engine - applies one ball outcome to an innings.

The engine is pure: it reads an InningsState snapshot and returns a BallResult
holding the new state, the entity mutations to persist in one transaction and
the event to broadcast once they are committed. The input snapshot is never
modified, so a rejected ball leaves it exactly as it was.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Optional, Union

from livescore.engine.bowling import resolve_bowler, record_delivery
from livescore.engine.commentary import CommentaryEntry, ball_position, render
from livescore.engine.completion import CompletionReason, completion_reasons, evaluate, settle
from livescore.engine.dismissal import (
    BOWLER_CREDIT, Dismissal, build_dismissal, check_incoming,
    apply_dismissal, describe_dismissal,
)
from livescore.engine.errors import InningsAlreadyCompleted, MatchStateError, NextBatsmanRequired
from livescore.engine.outcomes import OutcomeEffect, resolve_outcome
from livescore.engine.score import accumulate
from livescore.engine.state import InningsState, MatchState, PlayerLedger, LEDGER_FIELDS
from livescore.models.match import MatchStatus
from livescore.models.player_status import DismissalType

INNINGS_UPDATED = "innings-updated"


@dataclass(frozen=True)
class BallRequest:
    """One delivery as submitted by the scorer"""
    outcome: Optional[str] = None
    custom_outcome: Optional[Union[OutcomeEffect, dict]] = None
    bowler_id: Optional[int] = None
    fielder_id: Optional[int] = None
    dismissal_type: Optional[Union[str, DismissalType]] = None
    next_batsman_id: Optional[int] = None
    next_batsman_role: Optional[Union[str, int]] = None


@dataclass(frozen=True)
class ValidatedBall:
    request: BallRequest
    outcome: OutcomeEffect
    dismissal: Optional[Dismissal] = None


def validate_request(request: BallRequest) -> ValidatedBall:
    """Checks that need no innings state; run before any transaction is opened."""
    outcome = resolve_outcome(request.outcome, request.custom_outcome)
    dismissal = None
    if outcome.is_wicket:
        dismissal = build_dismissal(
            request.dismissal_type,
            fielder_id=request.fielder_id,
            next_batsman_id=request.next_batsman_id,
            next_batsman_role=request.next_batsman_role,
        )
    return ValidatedBall(request, outcome, dismissal)


# Mutations, applied together by the persistence layer

@dataclass(frozen=True)
class InningsMutation:
    innings_id: int
    values: dict


@dataclass(frozen=True)
class MatchMutation:
    match_id: int
    values: dict


@dataclass(frozen=True)
class PlayerStatusMutation:
    ledger: PlayerLedger
    created: bool

    @property
    def values(self) -> dict:
        data = {name: getattr(self.ledger, name) for name in LEDGER_FIELDS}
        data["overs_bowled"] = self.ledger.overs_bowled
        return data


Mutation = Union[InningsMutation, MatchMutation, PlayerStatusMutation]


def innings_values(state: InningsState) -> dict:
    score = state.score
    extras = score.extras
    return {
        "runs": score.runs,
        "wickets": score.wickets,
        "balls": score.balls,
        "overs": score.overs,
        "extras_wides": extras.wides,
        "extras_no_balls": extras.no_balls,
        "extras_byes": extras.byes,
        "extras_leg_byes": extras.leg_byes,
        "extras_penalty_runs": extras.penalty_runs,
        "extras_total": extras.total,
        "current_bowler_id": state.current_bowler_id,
        "over_runs_conceded": state.over_runs_conceded,
        "over_bowler_id": state.over_bowler_id,
        "commentary": state.commentary.to_list(),
        "status": state.status,
        "end_time": state.end_time,
    }


def match_values(match: MatchState) -> dict:
    return {
        "status": match.status,
        "target_runs": match.target_runs,
        "winner_id": match.winner_id,
        "is_tie": match.is_tie,
        "result_summary": match.result_summary,
        "end_time": match.end_time,
    }


@dataclass(frozen=True)
class InningsEvent:
    match_id: int
    innings_id: int
    innings: dict
    name: str = INNINGS_UPDATED

    def to_dict(self) -> dict:
        return {
            "event": self.name,
            "match_id": self.match_id,
            "innings_id": self.innings_id,
            "innings": self.innings,
        }


@dataclass
class BallResult:
    state: InningsState
    outcome: OutcomeEffect
    commentary: CommentaryEntry
    bowler_id: int
    striker_id: Optional[int]
    non_striker_id: Optional[int]
    fielder_id: Optional[int] = None
    dismissed_id: Optional[int] = None
    maiden: bool = False
    completion: list[CompletionReason] = field(default_factory=list)
    ledgers: dict[int, PlayerLedger] = field(default_factory=dict)
    mutations: list[Mutation] = field(default_factory=list)
    event: Optional[InningsEvent] = None

    @property
    def innings_completed(self) -> bool:
        return bool(self.completion)

    @property
    def match_completed(self) -> bool:
        return self.state.match.status == MatchStatus.COMPLETED


def _default_description(outcome: OutcomeEffect) -> str:
    if outcome.is_wicket:
        return "{bowler} to {batsman}, OUT"
    if outcome.extras and outcome.extra_type is not None:
        return f"{{bowler}} to {{batsman}}, {outcome.total_runs} ({outcome.extra_type.value})"
    runs = outcome.runs
    return f"{{bowler}} to {{batsman}}, {runs} run{'s' if runs != 1 else ''}" if runs else "{bowler} to {batsman}, no run"


class ApplyBallOutcome:
    """
    Command applying a single ball outcome.

    bowler_credit maps each dismissal type to whether the bowler is credited
    with the wicket; it defaults to BOWLER_CREDIT.
    """

    def __init__(
        self,
        request: BallRequest,
        bowler_credit: Optional[dict[DismissalType, bool]] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.request = request
        self.bowler_credit = bowler_credit if bowler_credit is not None else BOWLER_CREDIT
        self.clock = clock

    def execute(self, state: InningsState, validated: Optional[ValidatedBall] = None) -> BallResult:
        ball = validated or validate_request(self.request)
        outcome = ball.outcome
        dismissal = ball.dismissal

        if state.is_completed:
            raise InningsAlreadyCompleted(f"Innings {state.innings_id} is already completed")
        if state.score.wickets >= state.max_wickets:
            raise InningsAlreadyCompleted(f"Innings {state.innings_id} is all out")
        if state.match.status != MatchStatus.IN_PROGRESS:
            raise MatchStateError(f"Match {state.match_id} is {state.match.status.value}")

        working = state.copy()
        now = self.clock()

        bowler_id = resolve_bowler(working, self.request.bowler_id)
        striker_id = working.crease.striker_id
        if dismissal is not None:
            check_incoming(working, dismissal)

        working.score = accumulate(working.score, outcome)

        striker = working.ledger(striker_id)
        striker.runs += outcome.runs
        if outcome.counts_as_ball:
            striker.balls_faced += 1
        if outcome.is_four:
            striker.fours += 1
        elif outcome.is_six:
            striker.sixes += 1

        maiden = record_delivery(working, bowler_id, outcome)

        dismissed_id = None
        if dismissal is not None:
            # The ball that ends the innings needs no incoming batsman
            ends_innings = bool(completion_reasons(
                replace(working.score, wickets=working.score.wickets + 1),
                working.match.overs_limit,
                working.max_wickets,
                working.innings_number,
                working.target,
            ))
            if not ends_innings and dismissal.next_batsman_id is None:
                raise NextBatsmanRequired("Next batsman ID and strike role must be provided when a wicket falls")
            dismissed_id = apply_dismissal(
                working, dismissal, bowler_id, self.bowler_credit, bring_in_next=not ends_innings
            )
        else:
            working.crease.rotate(outcome.runs, outcome.counts_as_ball, working.score.balls)

        for batsman in working.crease.batsmen:
            working.ledger(batsman.player_id).striking_role = batsman.role

        over, ball_number = ball_position(working.score.balls, outcome.counts_as_ball)
        description = render(
            outcome.description or _default_description(outcome),
            bowler=working.name(bowler_id),
            batsman=working.name(striker_id),
            runs=outcome.runs,
            extras=outcome.extras,
        )
        if dismissal is not None:
            description = f"{description}. {describe_dismissal(working, dismissal, dismissed_id, bowler_id)}"
        if maiden:
            description = f"{description}. Maiden over for {working.name(bowler_id)}"
        entry = working.commentary.add(over, ball_number, description, now)

        reasons = evaluate(working)
        if reasons:
            for line in settle(working, reasons, now):
                working.commentary.add(over, ball_number, line, now)

        touched = {
            pid: ledger for pid, ledger in working.ledgers.items()
            if ledger.is_new or state.ledgers.get(pid) != ledger
        }
        mutations: list[Mutation] = [InningsMutation(working.innings_id, innings_values(working))]
        if working.match != state.match:
            mutations.append(MatchMutation(working.match_id, match_values(working.match)))
        mutations.extend(
            PlayerStatusMutation(ledger, created=ledger.is_new) for ledger in touched.values()
        )

        crease = working.crease
        active = {b.role.value: b.player_id for b in crease.batsmen}
        return BallResult(
            state=working,
            outcome=outcome,
            commentary=entry,
            bowler_id=bowler_id,
            striker_id=active.get("striker"),
            non_striker_id=active.get("non_striker"),
            fielder_id=dismissal.fielder_id if dismissal else None,
            dismissed_id=dismissed_id,
            maiden=maiden,
            completion=reasons,
            ledgers=touched,
            mutations=mutations,
            event=InningsEvent(working.match_id, working.innings_id, working.to_dict()),
        )


def apply_ball_outcome(state: InningsState, request: BallRequest, **kwargs) -> BallResult:
    return ApplyBallOutcome(request, **kwargs).execute(state)

"""
Dismissal handler - validates and applies a wicket.
"""
from dataclasses import dataclass, replace
from typing import Optional

from livescore.engine.errors import (
    InvalidDismissalType, FielderCreditMismatch, FielderRequired,
    NextBatsmanRequired, RosterError,
)
from livescore.engine.state import InningsState
from livescore.engine.strike import parse_role
from livescore.models.player_status import DismissalType, StrikeRole


# Whether the bowler is credited with the wicket, per dismissal type.
# Callers may pass their own table to the engine.
BOWLER_CREDIT: dict[DismissalType, bool] = {
    DismissalType.CAUGHT: True,
    DismissalType.BOWLED: True,
    DismissalType.LBW: True,
    DismissalType.STUMPED: True,
    DismissalType.HIT_WICKET: True,
    DismissalType.RUN_OUT: False,
    DismissalType.OTHER: False,
}

# Fielding stat credited to the named fielder, per dismissal type
FIELDER_CREDIT: dict[DismissalType, str] = {
    DismissalType.CAUGHT: "catches",
    DismissalType.STUMPED: "stumpings",
    DismissalType.RUN_OUT: "run_outs",
}

FIELDER_REQUIRED = {DismissalType.CAUGHT, DismissalType.STUMPED}


@dataclass(frozen=True)
class Dismissal:
    dismissal_type: DismissalType
    fielder_id: Optional[int] = None
    next_batsman_id: Optional[int] = None
    next_batsman_role: Optional[StrikeRole] = None


def parse_dismissal_type(value) -> DismissalType:
    if isinstance(value, DismissalType):
        return value
    if not value:
        raise InvalidDismissalType("Dismissal type must be provided when a wicket falls")
    try:
        return DismissalType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in DismissalType)
        raise InvalidDismissalType(f"Invalid dismissal type '{value}' (expected one of: {allowed})")


def build_dismissal(
    dismissal_type,
    fielder_id: Optional[int] = None,
    next_batsman_id: Optional[int] = None,
    next_batsman_role=None,
) -> Dismissal:
    """Validate the wicket fields of a request that do not depend on innings state"""
    kind = parse_dismissal_type(dismissal_type)

    if fielder_id is not None and kind not in FIELDER_CREDIT:
        raise FielderCreditMismatch(f"A {kind.value} dismissal cannot credit a fielder")
    if fielder_id is None and kind in FIELDER_REQUIRED:
        raise FielderRequired(f"A {kind.value} dismissal must name the fielder")

    role = None
    if next_batsman_id is not None:
        if next_batsman_role is None:
            raise NextBatsmanRequired("Next batsman strike role must be provided with the next batsman")
        role = parse_role(next_batsman_role)

    return Dismissal(kind, fielder_id, next_batsman_id, role)


def check_incoming(state: InningsState, dismissal: Dismissal):
    """Roster checks for the fielder and the incoming batsman"""
    if (
        dismissal.fielder_id is not None
        and state.bowling_squad
        and dismissal.fielder_id not in state.bowling_squad
    ):
        raise RosterError(f"Fielder {dismissal.fielder_id} is not part of the bowling team")
    if (
        dismissal.dismissal_type == DismissalType.STUMPED
        and state.wicket_keeper_id is not None
        and dismissal.fielder_id != state.wicket_keeper_id
    ):
        raise FielderCreditMismatch(
            f"Only the wicket-keeper ({state.wicket_keeper_id}) can be credited with a stumping"
        )

    incoming = dismissal.next_batsman_id
    if incoming is None:
        return
    if incoming not in state.batting_order:
        raise RosterError(f"Player {incoming} is not in the batting order")
    if incoming in state.crease.player_ids:
        raise RosterError(f"Player {incoming} is already batting")
    if state.has_batted(incoming):
        raise RosterError(f"Player {incoming} has already been dismissed")


def apply_dismissal(
    state: InningsState,
    dismissal: Dismissal,
    bowler_id: int,
    bowler_credit: dict[DismissalType, bool],
    bring_in_next: bool,
) -> int:
    """
    Record the wicket on the score, the dismissed batsman, the bowler and the
    fielder, then change the crease. Returns the dismissed player's id.
    """
    kind = dismissal.dismissal_type
    state.score = replace(state.score, wickets=state.score.wickets + 1)

    if bring_in_next and dismissal.next_batsman_id is not None:
        dismissed_id = state.crease.replace_striker(dismissal.next_batsman_id, dismissal.next_batsman_role)
    else:
        dismissed_id = state.crease.retire_striker()

    batsman = state.ledger(dismissed_id)
    batsman.striking_role = StrikeRole.OUT
    batsman.out_type = kind.value
    batsman.bowler_when_out_id = bowler_id
    batsman.dismissed_by_id = dismissal.fielder_id

    if bowler_credit.get(kind, False):
        state.ledger(bowler_id).wickets += 1

    if dismissal.fielder_id is not None:
        stat = FIELDER_CREDIT[kind]
        fielder = state.ledger(dismissal.fielder_id)
        setattr(fielder, stat, getattr(fielder, stat) + 1)

    return dismissed_id


def describe_dismissal(state: InningsState, dismissal: Dismissal, batsman_id: int, bowler_id: int) -> str:
    batsman = state.name(batsman_id)
    bowler = state.name(bowler_id)
    fielder = state.name(dismissal.fielder_id) if dismissal.fielder_id is not None else None
    kind = dismissal.dismissal_type

    if kind == DismissalType.CAUGHT:
        how = f"c & b {bowler}" if dismissal.fielder_id == bowler_id else f"c {fielder} b {bowler}"
    elif kind == DismissalType.BOWLED:
        how = f"b {bowler}"
    elif kind == DismissalType.LBW:
        how = f"lbw b {bowler}"
    elif kind == DismissalType.STUMPED:
        how = f"st {fielder} b {bowler}"
    elif kind == DismissalType.HIT_WICKET:
        how = f"hit wicket b {bowler}"
    elif kind == DismissalType.RUN_OUT:
        how = f"run out ({fielder})" if fielder else "run out"
    else:
        how = "out"

    ledger = state.ledgers.get(batsman_id)
    figures = f" {ledger.runs} ({ledger.balls_faced})" if ledger else ""
    return f"WICKET! {batsman} {how}{figures}"

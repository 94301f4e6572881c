"""
Match lifecycle - toss, status changes, starting innings and scorecards.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from livescore.engine.errors import (
    NotFoundError, MatchStateError, ValidationError, RosterError,
)
from livescore.engine.score import overs_from_balls
from livescore.models.match import Match, MatchStatus, TossDecision, Innings, InningsStatus
from livescore.models.player import Player, PlayerRole
from livescore.models.player_status import PlayerStatus, StrikeRole

logger = logging.getLogger(__name__)

CLOSED_STATUSES = {MatchStatus.COMPLETED, MatchStatus.CANCELLED, MatchStatus.ABANDONED}


def get_match(db: Session, match_id: int) -> Match:
    match = db.get(Match, match_id)
    if match is None:
        raise NotFoundError(f"Match {match_id} not found")
    return match


def get_innings(db: Session, innings_id: int) -> Innings:
    innings = db.get(Innings, innings_id)
    if innings is None:
        raise NotFoundError(f"Innings {innings_id} not found")
    return innings


def list_match_innings(db: Session, match_id: int) -> list[Innings]:
    return list(get_match(db, match_id).innings)


def record_toss(db: Session, match_id: int, winner_id: int, decision) -> Match:
    """Record who won the toss and whether they chose to bat or bowl"""
    match = get_match(db, match_id)
    if match.status in CLOSED_STATUSES:
        raise MatchStateError(f"Match {match_id} is {match.status.value}")
    if match.innings:
        raise MatchStateError("Toss cannot change once an innings has started")
    if winner_id not in match.team_ids:
        raise ValidationError(f"Team {winner_id} is not playing in match {match_id}")
    try:
        decision = TossDecision(decision)
    except ValueError:
        raise ValidationError(f"Toss decision must be 'bat' or 'bowl', got '{decision}'")

    match.toss_winner_id = winner_id
    match.toss_decision = decision
    db.commit()
    db.refresh(match)
    logger.info("Match %s: team %s won the toss and chose to %s", match_id, winner_id, decision.value)
    return match


def update_match_status(db: Session, match_id: int, status) -> Match:
    match = get_match(db, match_id)
    try:
        status = MatchStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in MatchStatus)
        raise ValidationError(f"Invalid match status '{status}' (expected one of: {allowed})")
    if match.status == MatchStatus.COMPLETED and status != MatchStatus.COMPLETED:
        raise MatchStateError(f"Match {match_id} is already completed")

    match.status = status
    if status in CLOSED_STATUSES and match.end_time is None:
        match.end_time = datetime.utcnow()
    db.commit()
    db.refresh(match)
    logger.info("Match %s status set to %s", match_id, status.value)
    return match


def _expected_batting_team(match: Match, innings_number: int) -> int:
    if innings_number == 1:
        if match.toss_winner_id is None or match.toss_decision is None:
            raise MatchStateError("Toss must be recorded before the first innings")
        if match.toss_decision == TossDecision.BAT:
            return match.toss_winner_id
        return match.other_team_id(match.toss_winner_id)

    first = next((i for i in match.innings if i.innings_number == 1), None)
    if first is None or first.status != InningsStatus.COMPLETED:
        raise MatchStateError("First innings must be completed before the second starts")
    if match.target_runs is None:
        raise MatchStateError("Target has not been set")
    return first.bowling_team_id


def start_innings(
    db: Session,
    match_id: int,
    innings_number: int,
    batting_order: list[int],
    initial_bowler_id: int,
    batting_team_id: Optional[int] = None,
    wicket_keeper_id: Optional[int] = None,
) -> Innings:
    """
    Create an innings with its opening pair, first bowler and the fielding
    side's wicket-keeper.

    The batting side follows from the toss (first innings) or the first
    innings (second innings); an explicit batting_team_id must agree with it.
    Without an explicit wicket_keeper_id the bowling side's designated
    keeper is used; a side with no keeper cannot take the field.
    """
    match = get_match(db, match_id)
    if match.status in CLOSED_STATUSES:
        raise MatchStateError(f"Match {match_id} is {match.status.value}")
    if innings_number not in (1, 2):
        raise ValidationError("Innings number must be 1 or 2")
    if any(i.innings_number == innings_number for i in match.innings):
        raise MatchStateError(f"Innings {innings_number} has already started")

    expected = _expected_batting_team(match, innings_number)
    if batting_team_id is not None and batting_team_id != expected:
        raise ValidationError(f"Team {batting_team_id} does not bat in innings {innings_number}")
    batting_team_id = expected
    bowling_team_id = match.other_team_id(batting_team_id)

    if len(batting_order) < 2:
        raise ValidationError("Batting order must include at least two players")
    if len(set(batting_order)) != len(batting_order):
        raise ValidationError("Batting order cannot list a player twice")

    squads: dict[int, set[int]] = {batting_team_id: set(), bowling_team_id: set()}
    keepers = []
    for pid, team_id, role in db.query(Player.id, Player.team_id, Player.role).filter(
        Player.team_id.in_(list(squads))
    ).order_by(Player.id):
        squads[team_id].add(pid)
        if team_id == bowling_team_id and role == PlayerRole.WICKET_KEEPER:
            keepers.append(pid)

    invalid = [pid for pid in batting_order if pid not in squads[batting_team_id]]
    if invalid:
        raise RosterError(f"Players {invalid} are not part of the batting team")
    if initial_bowler_id not in squads[bowling_team_id]:
        raise RosterError(f"Bowler {initial_bowler_id} is not part of the bowling team")
    if wicket_keeper_id is None:
        if not keepers:
            raise RosterError(f"Team {bowling_team_id} has no wicket-keeper")
        wicket_keeper_id = keepers[0]
    elif wicket_keeper_id not in squads[bowling_team_id]:
        raise RosterError(f"Wicket-keeper {wicket_keeper_id} is not part of the bowling team")
    if wicket_keeper_id == initial_bowler_id:
        raise ValidationError("The wicket-keeper cannot open the bowling")

    innings = Innings(
        match_id=match.id,
        innings_number=innings_number,
        batting_team_id=batting_team_id,
        bowling_team_id=bowling_team_id,
        batting_order=list(batting_order),
        current_bowler_id=initial_bowler_id,
        over_bowler_id=initial_bowler_id,
        wicket_keeper_id=wicket_keeper_id,
        commentary=[],
        status=InningsStatus.ONGOING,
    )
    db.add(innings)

    striker_id, non_striker_id = batting_order[0], batting_order[1]
    for pid, role in (
        (striker_id, StrikeRole.STRIKER),
        (non_striker_id, StrikeRole.NON_STRIKER),
        (initial_bowler_id, None),
        (wicket_keeper_id, None),
    ):
        db.add(PlayerStatus(
            player_id=pid,
            match_id=match.id,
            innings_number=innings_number,
            striking_role=role,
        ))

    match.status = MatchStatus.IN_PROGRESS
    db.commit()
    db.refresh(innings)
    logger.info(
        "Match %s: innings %s started, team %s batting (%s and %s opening, %s bowling, %s keeping)",
        match_id, innings_number, batting_team_id, striker_id, non_striker_id, initial_bowler_id, wicket_keeper_id,
    )
    return innings


def innings_statuses(db: Session, innings: Innings) -> list[PlayerStatus]:
    return db.query(PlayerStatus).filter_by(
        match_id=innings.match_id, innings_number=innings.innings_number
    ).all()


def current_batsmen(db: Session, innings: Innings) -> list[PlayerStatus]:
    return [
        row for row in innings_statuses(db, innings)
        if row.striking_role in (StrikeRole.STRIKER, StrikeRole.NON_STRIKER)
    ]


def scorecard(db: Session, innings_id: int) -> dict:
    """Batting, bowling and fielding figures of one innings"""
    innings = get_innings(db, innings_id)
    rows = innings_statuses(db, innings)
    names = dict(db.query(Player.id, Player.name).filter(
        Player.id.in_([row.player_id for row in rows])
    ).all())

    order = {pid: i for i, pid in enumerate(innings.batting_order)}
    batted = sorted(
        (row for row in rows if row.player_id in order and (row.striking_role is not None or row.is_out)),
        key=lambda row: order[row.player_id],
    )
    batting = [{
        "player_id": row.player_id,
        "name": names.get(row.player_id),
        "runs": row.runs,
        "balls": row.balls_faced,
        "fours": row.fours,
        "sixes": row.sixes,
        "strike_rate": round(row.strike_rate, 2),
        "status": row.striking_role.value if row.striking_role else None,
        "out_type": row.out_type,
        "bowler_id": row.bowler_when_out_id,
        "fielder_id": row.dismissed_by_id,
    } for row in batted]

    bowling = [{
        "player_id": row.player_id,
        "name": names.get(row.player_id),
        "overs": overs_from_balls(row.balls_bowled),
        "maidens": row.maidens,
        "runs": row.runs_conceded,
        "wickets": row.wickets,
        "wides": row.wides,
        "no_balls": row.no_balls,
        "economy": round(row.economy, 2),
    } for row in rows if row.balls_bowled > 0 or row.player_id == innings.current_bowler_id]

    fielding = [{
        "player_id": row.player_id,
        "name": names.get(row.player_id),
        "catches": row.catches,
        "stumpings": row.stumpings,
        "run_outs": row.run_outs,
    } for row in rows if row.catches or row.stumpings or row.run_outs]

    return {
        "innings_id": innings.id,
        "match_id": innings.match_id,
        "innings_number": innings.innings_number,
        "batting_team_id": innings.batting_team_id,
        "bowling_team_id": innings.bowling_team_id,
        "wicket_keeper_id": innings.wicket_keeper_id,
        "runs": innings.runs,
        "wickets": innings.wickets,
        "overs": innings.overs,
        "run_rate": round(innings.run_rate, 2),
        "extras": {
            "wides": innings.extras_wides,
            "no_balls": innings.extras_no_balls,
            "byes": innings.extras_byes,
            "leg_byes": innings.extras_leg_byes,
            "penalty_runs": innings.extras_penalty_runs,
            "total": innings.extras_total,
        },
        "status": innings.status.value,
        "batting": batting,
        "bowling": bowling,
        "fielding": fielding,
    }

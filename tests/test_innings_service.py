"""
Tests for the match lifecycle: toss, status changes, innings start and scorecards.
"""
import pytest

from livescore.engine import BallRequest
from livescore.engine.errors import (
    FielderCreditMismatch, MatchStateError, NotFoundError, RosterError, ValidationError,
)
from livescore.models.match import Match, MatchStatus, TossDecision, InningsStatus
from livescore.models.player import PlayerRole
from livescore.models.player_status import PlayerStatus, StrikeRole
from livescore.services import innings as innings_service
from livescore.services.broadcast import Broadcaster
from livescore.services.scoring import ScoringService

from tests.conftest import KEEPER_INDEX


@pytest.fixture
def fresh_match(db, teams):
    """Match with no toss recorded yet"""
    match = Match(team1_id=teams[0].id, team2_id=teams[1].id, overs_limit=20)
    db.add(match)
    db.commit()
    return match


class TestToss:
    def test_record_toss(self, db, fresh_match, teams):
        match = innings_service.record_toss(db, fresh_match.id, teams[1].id, "bowl")
        assert match.toss_winner_id == teams[1].id
        assert match.toss_decision == TossDecision.BOWL

    def test_winner_must_be_playing(self, db, fresh_match):
        with pytest.raises(ValidationError):
            innings_service.record_toss(db, fresh_match.id, 999, "bat")

    def test_decision_must_be_bat_or_bowl(self, db, fresh_match, teams):
        with pytest.raises(ValidationError):
            innings_service.record_toss(db, fresh_match.id, teams[0].id, "field")

    def test_unknown_match(self, db, teams):
        with pytest.raises(NotFoundError):
            innings_service.record_toss(db, 999, teams[0].id, "bat")

    def test_toss_fixed_once_innings_started(self, db, innings, teams):
        with pytest.raises(MatchStateError):
            innings_service.record_toss(db, innings.match_id, teams[1].id, "bat")


class TestMatchStatus:
    def test_cancel_sets_end_time(self, db, fresh_match):
        match = innings_service.update_match_status(db, fresh_match.id, "cancelled")
        assert match.status == MatchStatus.CANCELLED
        assert match.end_time is not None

    def test_invalid_status(self, db, fresh_match):
        with pytest.raises(ValidationError):
            innings_service.update_match_status(db, fresh_match.id, "rained_off")

    def test_completed_match_cannot_reopen(self, db, fresh_match):
        innings_service.update_match_status(db, fresh_match.id, "completed")
        with pytest.raises(MatchStateError):
            innings_service.update_match_status(db, fresh_match.id, "in_progress")


class TestStartInnings:
    """Batting order and bowler are checked against the squads."""

    def test_start_creates_openers_and_bowler(self, db, innings, batting_ids, bowling_ids, teams):
        assert innings.batting_team_id == teams[0].id
        assert innings.bowling_team_id == teams[1].id
        assert innings.status == InningsStatus.ONGOING
        assert innings.current_bowler_id == bowling_ids[-1]

        rows = {row.player_id: row for row in db.query(PlayerStatus).filter_by(match_id=innings.match_id)}
        keeper = bowling_ids[KEEPER_INDEX]
        assert innings.wicket_keeper_id == keeper
        assert set(rows) == {batting_ids[0], batting_ids[1], bowling_ids[-1], keeper}
        assert rows[batting_ids[0]].striking_role == StrikeRole.STRIKER
        assert rows[batting_ids[1]].striking_role == StrikeRole.NON_STRIKER
        assert rows[bowling_ids[-1]].striking_role is None
        assert rows[keeper].striking_role is None
        assert db.get(Match, innings.match_id).status == MatchStatus.IN_PROGRESS

    def test_toss_winner_bowling_first(self, db, fresh_match, teams, batting_ids, bowling_ids):
        innings_service.record_toss(db, fresh_match.id, teams[0].id, "bowl")
        innings = innings_service.start_innings(
            db, fresh_match.id, 1, batting_order=bowling_ids, initial_bowler_id=batting_ids[0],
        )
        assert innings.batting_team_id == teams[1].id

    def test_toss_required(self, db, fresh_match, batting_ids, bowling_ids):
        with pytest.raises(MatchStateError):
            innings_service.start_innings(db, fresh_match.id, 1, batting_ids, bowling_ids[0])

    def test_batsman_from_other_team(self, db, match, batting_ids, bowling_ids):
        with pytest.raises(RosterError):
            innings_service.start_innings(db, match.id, 1, [batting_ids[0], bowling_ids[0]], bowling_ids[1])

    def test_bowler_from_batting_team(self, db, match, batting_ids):
        with pytest.raises(RosterError):
            innings_service.start_innings(db, match.id, 1, batting_ids, batting_ids[5])

    def test_order_needs_two(self, db, match, batting_ids, bowling_ids):
        with pytest.raises(ValidationError):
            innings_service.start_innings(db, match.id, 1, batting_ids[:1], bowling_ids[0])

    def test_order_without_duplicates(self, db, match, batting_ids, bowling_ids):
        with pytest.raises(ValidationError):
            innings_service.start_innings(db, match.id, 1, [batting_ids[0], batting_ids[0]], bowling_ids[0])

    def test_batting_team_must_match_toss(self, db, match, teams, batting_ids, bowling_ids):
        with pytest.raises(ValidationError):
            innings_service.start_innings(
                db, match.id, 1, batting_ids, bowling_ids[0], batting_team_id=teams[1].id,
            )

    def test_innings_started_once(self, db, innings, batting_ids, bowling_ids):
        with pytest.raises(MatchStateError):
            innings_service.start_innings(db, innings.match_id, 1, batting_ids, bowling_ids[0])

    def test_second_innings_waits_for_first(self, db, innings, batting_ids, bowling_ids):
        with pytest.raises(MatchStateError):
            innings_service.start_innings(db, innings.match_id, 2, bowling_ids, batting_ids[0])

    def test_innings_number_range(self, db, match, batting_ids, bowling_ids):
        with pytest.raises(ValidationError):
            innings_service.start_innings(db, match.id, 3, batting_ids, bowling_ids[0])

    def test_list_innings(self, db, innings):
        listed = innings_service.list_match_innings(db, innings.match_id)
        assert [i.id for i in listed] == [innings.id]


class TestWicketKeeper:
    """The fielding side takes the field with a keeper, who alone can stump."""

    def test_explicit_keeper(self, db, match, batting_ids, bowling_ids):
        innings = innings_service.start_innings(
            db, match.id, 1, batting_ids, bowling_ids[-1], wicket_keeper_id=bowling_ids[0],
        )
        assert innings.wicket_keeper_id == bowling_ids[0]
        keeper_row = db.query(PlayerStatus).filter_by(
            match_id=match.id, innings_number=1, player_id=bowling_ids[0]
        ).one()
        assert keeper_row.striking_role is None

    def test_bowling_side_without_keeper(self, db, match, teams, batting_ids, bowling_ids):
        for player in teams[1].players:
            if player.role == PlayerRole.WICKET_KEEPER:
                player.role = PlayerRole.BATSMAN
        db.commit()
        with pytest.raises(RosterError, match="no wicket-keeper"):
            innings_service.start_innings(db, match.id, 1, batting_ids, bowling_ids[-1])
        assert innings_service.list_match_innings(db, match.id) == []

    def test_keeper_from_batting_side(self, db, match, batting_ids, bowling_ids):
        with pytest.raises(RosterError):
            innings_service.start_innings(
                db, match.id, 1, batting_ids, bowling_ids[-1], wicket_keeper_id=batting_ids[KEEPER_INDEX],
            )

    def test_keeper_cannot_open_bowling(self, db, match, batting_ids, bowling_ids):
        keeper = bowling_ids[KEEPER_INDEX]
        with pytest.raises(ValidationError):
            innings_service.start_innings(db, match.id, 1, batting_ids, keeper)

    def test_only_keeper_can_stump(self, db, session_factory, innings, batting_ids, bowling_ids):
        service = ScoringService(session_factory=session_factory, broadcaster=Broadcaster())
        with pytest.raises(FielderCreditMismatch):
            service.apply_ball(innings.id, BallRequest(
                outcome="wicket", dismissal_type="stumped", fielder_id=bowling_ids[0],
                next_batsman_id=batting_ids[2], next_batsman_role="striker",
            ))

        service.apply_ball(innings.id, BallRequest(
            outcome="wicket", dismissal_type="stumped", fielder_id=bowling_ids[KEEPER_INDEX],
            next_batsman_id=batting_ids[2], next_batsman_role="striker",
        ))
        db.expire_all()
        card = innings_service.scorecard(db, innings.id)
        assert card["wicket_keeper_id"] == bowling_ids[KEEPER_INDEX]
        assert card["fielding"][0]["player_id"] == bowling_ids[KEEPER_INDEX]
        assert card["fielding"][0]["stumpings"] == 1


class TestScorecard:
    def test_scorecard_after_some_balls(self, db, session_factory, innings, batting_ids, bowling_ids):
        service = ScoringService(session_factory=session_factory, broadcaster=Broadcaster())
        service.apply_ball(innings.id, BallRequest(outcome="four"))
        service.apply_ball(innings.id, BallRequest(outcome="wide"))
        service.apply_ball(innings.id, BallRequest(
            outcome="wicket", dismissal_type="caught", fielder_id=bowling_ids[2],
            next_batsman_id=batting_ids[2], next_batsman_role="striker",
        ))

        db.expire_all()
        card = innings_service.scorecard(db, innings.id)
        assert card["runs"] == 5
        assert card["wickets"] == 1
        assert card["extras"]["wides"] == 1
        assert card["extras"]["total"] == 1

        batting = {row["player_id"]: row for row in card["batting"]}
        assert [row["player_id"] for row in card["batting"]] == batting_ids[:3]
        assert batting[batting_ids[0]]["runs"] == 4
        assert batting[batting_ids[0]]["balls"] == 2
        assert batting[batting_ids[0]]["fours"] == 1
        assert batting[batting_ids[0]]["out_type"] == "caught"
        assert batting[batting_ids[0]]["fielder_id"] == bowling_ids[2]

        bowling = card["bowling"]
        assert len(bowling) == 1
        assert bowling[0]["player_id"] == bowling_ids[-1]
        assert bowling[0]["runs"] == 5
        assert bowling[0]["wickets"] == 1
        assert bowling[0]["overs"] == 0.2

        assert card["fielding"] == [{
            "player_id": bowling_ids[2],
            "name": "CK Player 3",
            "catches": 1,
            "stumpings": 0,
            "run_outs": 0,
        }]

    def test_unknown_innings(self, db):
        with pytest.raises(NotFoundError):
            innings_service.scorecard(db, 12345)

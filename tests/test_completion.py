"""
Tests for innings completion and match results.
"""
import pytest

from livescore.engine.completion import CompletionReason, completion_reasons, decide_result
from livescore.engine.errors import InningsAlreadyCompleted, MatchStateError
from livescore.engine.score import Score, Extras
from livescore.engine.scoring_engine import BallRequest, apply_ball_outcome
from livescore.models.match import MatchStatus, InningsStatus

from tests.conftest import build_state


class TestCompletionReasons:
    def test_nothing_yet(self):
        assert completion_reasons(Score(runs=50, balls=30), 20, 10, 1, None) == []

    def test_overs_exhausted(self):
        assert completion_reasons(Score(balls=120), 20, 10, 1, None) == [CompletionReason.OVERS_EXHAUSTED]

    def test_all_out_and_overs_on_same_ball(self):
        reasons = completion_reasons(Score(wickets=10, balls=12), 2, 10, 1, None)
        assert reasons == [CompletionReason.OVERS_EXHAUSTED, CompletionReason.ALL_OUT]

    def test_target_only_in_second_innings(self):
        assert completion_reasons(Score(runs=200), 20, 10, 1, 150) == []
        assert completion_reasons(Score(runs=150), 20, 10, 2, 150) == [CompletionReason.TARGET_REACHED]


class TestDecideResult:
    def test_chasing_side_wins_by_wickets(self):
        state = build_state(innings_number=2, target_runs=120, runs=121, wickets=3, balls=100)
        result = decide_result(state)
        assert result.winner_id == 1
        assert result.summary == "Mumbai Titans won by 7 wickets (20 balls remaining)"

    def test_tie_when_runs_equal_target(self):
        state = build_state(innings_number=2, target_runs=120, runs=120, balls=120)
        result = decide_result(state)
        assert result.is_tie
        assert result.winner_id is None
        assert result.summary == "Match tied on 120 runs"

    def test_one_short_of_target_loses(self):
        state = build_state(innings_number=2, target_runs=120, runs=119, balls=120)
        result = decide_result(state)
        assert not result.is_tie
        assert result.winner_id == 2
        assert result.summary == "Chennai Kings won by 1 run"

    def test_defending_side_wins_by_runs(self):
        state = build_state(innings_number=2, target_runs=120, runs=100, balls=120)
        result = decide_result(state)
        assert result.winner_id == 2
        assert result.summary == "Chennai Kings won by 20 runs"


class TestScenarios:
    """End-to-end sequences on a pure snapshot."""

    def test_first_innings_runs_out_of_overs(self):
        state = build_state(overs_limit=2)
        result = None
        for _ in range(12):
            result = apply_ball_outcome(state, BallRequest(outcome="run"))
            state = result.state
        assert state.score.balls == 12
        assert state.score.runs == 12
        assert state.status == InningsStatus.COMPLETED
        assert state.end_time is not None
        assert state.match.target_runs == 13
        assert state.match.status == MatchStatus.IN_PROGRESS
        assert result.completion == [CompletionReason.OVERS_EXHAUSTED]
        assert "Target 13" in state.commentary.latest.description

        with pytest.raises(InningsAlreadyCompleted):
            apply_ball_outcome(state, BallRequest(outcome="run"))

    def test_six_wins_mid_over(self):
        state = build_state(innings_number=2, target_runs=120, runs=115, balls=20)
        result = apply_ball_outcome(state, BallRequest(outcome="six"))
        after = result.state
        assert after.score.runs == 121
        assert after.score.balls == 21
        assert after.status == InningsStatus.COMPLETED
        assert after.match.winner_id == 1
        assert after.match.status == MatchStatus.COMPLETED
        assert after.match.end_time is not None
        assert result.match_completed

    def test_wide_can_reach_target(self):
        state = build_state(innings_number=2, target_runs=100, runs=99, balls=60, extras=Extras(wides=4))
        result = apply_ball_outcome(state, BallRequest(outcome="wide"))
        assert result.state.score.balls == 60
        assert result.completion == [CompletionReason.TARGET_REACHED]
        assert result.state.match.is_tie
        assert result.state.match.winner_id is None

    def test_single_onto_target_ties(self):
        state = build_state(innings_number=2, target_runs=120, runs=119, balls=100)
        result = apply_ball_outcome(state, BallRequest(outcome="run"))
        match = result.state.match
        assert result.state.score.runs == 120
        assert result.match_completed
        assert match.is_tie
        assert match.winner_id is None
        assert match.result_summary == "Match tied on 120 runs"

    def test_dot_on_last_ball_one_short(self):
        state = build_state(innings_number=2, target_runs=120, runs=119, balls=119)
        result = apply_ball_outcome(state, BallRequest(outcome="dot"))
        match = result.state.match
        assert result.completion == [CompletionReason.OVERS_EXHAUSTED]
        assert not match.is_tie
        assert match.winner_id == 2
        assert match.result_summary == "Chennai Kings won by 1 run"

    def test_last_wicket_needs_no_incoming_batsman(self):
        state = build_state(wickets=9, balls=50)
        result = apply_ball_outcome(state, BallRequest(outcome="wicket", dismissal_type="bowled"))
        after = result.state
        assert after.score.wickets == 10
        assert result.completion == [CompletionReason.ALL_OUT]
        assert after.match.target_runs == 1
        assert len(after.crease.batsmen) == 1

    def test_eleventh_wicket_rejected(self):
        state = build_state(wickets=9, balls=50)
        state = apply_ball_outcome(state, BallRequest(outcome="wicket", dismissal_type="bowled")).state
        before = state.to_dict()
        with pytest.raises(InningsAlreadyCompleted):
            apply_ball_outcome(state, BallRequest(
                outcome="wicket", dismissal_type="bowled", next_batsman_id=11, next_batsman_role="striker",
            ))
        assert state.to_dict() == before
        assert state.score.wickets == 10

    def test_short_batting_order_all_out_sooner(self):
        state = build_state(batting_order=[1, 2, 3])
        state = apply_ball_outcome(state, BallRequest(
            outcome="wicket", dismissal_type="bowled", next_batsman_id=3, next_batsman_role="striker",
        )).state
        result = apply_ball_outcome(state, BallRequest(outcome="wicket", dismissal_type="lbw"))
        assert result.state.score.wickets == 2
        assert CompletionReason.ALL_OUT in result.completion

    def test_match_must_be_in_progress(self):
        state = build_state(match_status=MatchStatus.CANCELLED)
        with pytest.raises(MatchStateError):
            apply_ball_outcome(state, BallRequest(outcome="dot"))

"""
Tests for score accumulation and the overs display encoding.
"""
import random

from livescore.engine.outcomes import CATALOG, resolve_outcome
from livescore.engine.score import Score, accumulate, overs_from_balls


class TestOversEncoding:
    def test_whole_and_partial_overs(self):
        assert overs_from_balls(0) == 0.0
        assert overs_from_balls(6) == 1.0
        assert overs_from_balls(13) == 2.1
        assert overs_from_balls(119) == 19.5

    def test_display_string(self):
        assert Score(balls=13).overs_display == "2.1"


class TestAccumulate:
    """One delivery folded into the innings total."""

    def test_legal_run(self):
        score = accumulate(Score(), resolve_outcome("two"))
        assert (score.runs, score.balls) == (2, 1)
        assert score.extras.total == 0

    def test_wide_adds_extra_without_ball(self):
        score = accumulate(Score(runs=10, balls=3), resolve_outcome("wide"))
        assert score.runs == 11
        assert score.balls == 3
        assert score.extras.wides == 1
        assert score.extras.total == 1
        assert score.batting_runs == 10

    def test_no_ball_with_runs_off_bat(self):
        score = accumulate(Score(), resolve_outcome("custom", {
            "runs": 4, "extras": 1, "counts_as_ball": False, "extra_type": "noball",
        }))
        assert score.runs == 5
        assert score.extras.no_balls == 1
        assert score.balls == 0

    def test_wickets_untouched(self):
        score = accumulate(Score(wickets=3), resolve_outcome("wicket"))
        assert score.wickets == 3
        assert score.balls == 1

    def test_over_completion(self):
        assert not Score(balls=5).is_over_complete
        assert accumulate(Score(balls=5), resolve_outcome("dot")).is_over_complete


class TestScoreInvariants:
    """Properties that hold over any sequence of deliveries."""

    def test_random_sequence(self):
        rng = random.Random(42)
        codes = [code for code, effect in CATALOG.items() if not effect.is_wicket]
        score = Score()
        legal = 0
        for _ in range(500):
            effect = CATALOG[rng.choice(codes)]
            previous = score
            score = accumulate(score, effect)
            legal += 1 if effect.counts_as_ball else 0
            if not effect.counts_as_ball:
                assert score.balls == previous.balls

            extras = score.extras
            assert extras.total == (
                extras.wides + extras.no_balls + extras.byes + extras.leg_byes + extras.penalty_runs
            )
        assert score.balls == legal

"""
Tests for the outcome catalog and custom outcome validation.
"""
import pytest

from livescore.engine.errors import InvalidOutcome
from livescore.engine.outcomes import CATALOG, ExtraType, OutcomeEffect, resolve_outcome


class TestCatalog:
    """Catalog codes resolve to their canonical effects."""

    def test_single_run(self):
        effect = resolve_outcome("run")
        assert effect.runs == 1
        assert effect.extras == 0
        assert effect.counts_as_ball is True
        assert effect.is_wicket is False

    def test_wide_and_no_ball_are_not_legal_deliveries(self):
        for code in ("wide", "noball"):
            effect = resolve_outcome(code)
            assert effect.counts_as_ball is False
            assert effect.extras == 1
            assert effect.runs == 0

    def test_byes_are_legal_but_not_charged_to_bowler(self):
        effect = resolve_outcome("bye")
        assert effect.counts_as_ball is True
        assert effect.bowler_runs == 0
        assert effect.total_runs == 1

    def test_wide_is_charged_to_bowler(self):
        assert resolve_outcome("wide").bowler_runs == 1

    def test_boundaries(self):
        assert resolve_outcome("four").is_four
        assert resolve_outcome("six").is_six
        assert not resolve_outcome("five").is_four

    def test_every_extra_names_its_bucket(self):
        for code, effect in CATALOG.items():
            if effect.extras:
                assert effect.extra_type is not None, code

    def test_unknown_code_rejected(self):
        with pytest.raises(InvalidOutcome):
            resolve_outcome("seven")

    def test_missing_outcome_rejected(self):
        with pytest.raises(InvalidOutcome):
            resolve_outcome(None)


class TestCustomOutcome:
    """Caller supplied outcomes are checked before use."""

    def test_custom_from_dict(self):
        effect = resolve_outcome("custom", {"runs": 0, "extras": 5, "counts_as_ball": False, "extra_type": "wide"})
        assert effect.extras == 5
        assert effect.extra_type == ExtraType.WIDE

    def test_custom_without_code(self):
        effect = resolve_outcome(None, OutcomeEffect(runs=4, extras=1, counts_as_ball=False, extra_type=ExtraType.NO_BALL))
        assert effect.total_runs == 5

    def test_custom_code_requires_definition(self):
        with pytest.raises(InvalidOutcome):
            resolve_outcome("custom")

    def test_extras_must_name_type(self):
        with pytest.raises(InvalidOutcome):
            resolve_outcome("custom", {"runs": 0, "extras": 2})

    def test_wide_cannot_count_as_ball(self):
        with pytest.raises(InvalidOutcome):
            resolve_outcome("custom", {"extras": 1, "extra_type": "wide", "counts_as_ball": True})

    def test_negative_runs_rejected(self):
        with pytest.raises(InvalidOutcome):
            resolve_outcome("custom", {"runs": -1})

    def test_unknown_extra_type_rejected(self):
        with pytest.raises(InvalidOutcome):
            resolve_outcome("custom", {"extras": 1, "extra_type": "overthrow"})

    @pytest.mark.parametrize("flags", [
        {"counts_as_ball": "no"},
        {"is_wicket": "false"},
        {"counts_as_ball": 0},
        {"is_wicket": None},
    ])
    def test_flags_must_be_booleans(self, flags):
        with pytest.raises(InvalidOutcome):
            resolve_outcome("custom", {"runs": 1, **flags})

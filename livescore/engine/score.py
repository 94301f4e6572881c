"""
Score accumulator - folds one delivery into the innings total.
"""
from dataclasses import dataclass, field, replace

from livescore.engine.outcomes import OutcomeEffect, ExtraType

BALLS_PER_OVER = 6

# Extras bucket fed by each extra type
EXTRAS_BUCKETS = {
    ExtraType.WIDE: "wides",
    ExtraType.NO_BALL: "no_balls",
    ExtraType.BYE: "byes",
    ExtraType.LEG_BYE: "leg_byes",
    ExtraType.PENALTY: "penalty_runs",
}


def overs_from_balls(balls: int) -> float:
    """Display encoding: whole overs plus balls as tenths (13 balls -> 2.1)"""
    return round(balls // BALLS_PER_OVER + (balls % BALLS_PER_OVER) / 10, 1)


@dataclass(frozen=True)
class Extras:
    wides: int = 0
    no_balls: int = 0
    byes: int = 0
    leg_byes: int = 0
    penalty_runs: int = 0

    @property
    def total(self) -> int:
        return self.wides + self.no_balls + self.byes + self.leg_byes + self.penalty_runs

    def to_dict(self) -> dict:
        return {
            "wides": self.wides,
            "no_balls": self.no_balls,
            "byes": self.byes,
            "leg_byes": self.leg_byes,
            "penalty_runs": self.penalty_runs,
            "total": self.total,
        }


@dataclass(frozen=True)
class Score:
    runs: int = 0
    wickets: int = 0
    balls: int = 0
    extras: Extras = field(default_factory=Extras)

    @property
    def overs(self) -> float:
        return overs_from_balls(self.balls)

    @property
    def batting_runs(self) -> int:
        return self.runs - self.extras.total

    @property
    def overs_display(self) -> str:
        return f"{self.balls // BALLS_PER_OVER}.{self.balls % BALLS_PER_OVER}"

    @property
    def is_over_complete(self) -> bool:
        return self.balls > 0 and self.balls % BALLS_PER_OVER == 0

    def to_dict(self) -> dict:
        return {
            "runs": self.runs,
            "wickets": self.wickets,
            "balls": self.balls,
            "overs": self.overs,
            "extras": self.extras.to_dict(),
        }


def accumulate(score: Score, outcome: OutcomeEffect) -> Score:
    """Return the score after one delivery. Wickets are added by the dismissal handler."""
    extras = score.extras
    if outcome.extras:
        bucket = EXTRAS_BUCKETS.get(outcome.extra_type)
        if bucket is not None:
            extras = replace(extras, **{bucket: getattr(extras, bucket) + outcome.extras})

    balls = score.balls + 1 if outcome.counts_as_ball else score.balls
    return replace(
        score,
        runs=score.runs + outcome.runs + outcome.extras,
        balls=balls,
        extras=extras,
    )

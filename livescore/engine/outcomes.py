"""
Outcome catalog - maps an outcome code to the effect of one delivery.
"""
import enum
from dataclasses import dataclass, asdict
from typing import Optional, Union

from livescore.engine.errors import InvalidOutcome


CUSTOM_CODE = "custom"


class ExtraType(enum.Enum):
    WIDE = "wide"
    NO_BALL = "noball"
    BYE = "bye"
    LEG_BYE = "leg_bye"
    PENALTY = "penalty"


# Extras that can never be part of a legal delivery
ILLEGAL_DELIVERY_EXTRAS = {ExtraType.WIDE, ExtraType.NO_BALL}

# Byes, leg-byes and penalties are not charged to the bowler
UNCHARGED_EXTRAS = {ExtraType.BYE, ExtraType.LEG_BYE, ExtraType.PENALTY}


@dataclass(frozen=True)
class OutcomeEffect:
    """Canonical effect of a delivery"""
    runs: int = 0  # off the bat, credited to the striker
    extras: int = 0
    counts_as_ball: bool = True
    is_wicket: bool = False
    description: str = ""
    extra_type: Optional[ExtraType] = None

    @property
    def total_runs(self) -> int:
        return self.runs + self.extras

    @property
    def bowler_runs(self) -> int:
        """Runs charged against the bowler's figures"""
        if self.extra_type in UNCHARGED_EXTRAS:
            return self.runs
        return self.runs + self.extras

    @property
    def is_four(self) -> bool:
        return self.runs == 4

    @property
    def is_six(self) -> bool:
        return self.runs == 6

    def to_dict(self) -> dict:
        data = asdict(self)
        data["extra_type"] = self.extra_type.value if self.extra_type else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "OutcomeEffect":
        extra_type = data.get("extra_type")
        if extra_type is not None and not isinstance(extra_type, ExtraType):
            try:
                extra_type = ExtraType(extra_type)
            except ValueError:
                raise InvalidOutcome(f"Unknown extra type '{extra_type}'")
        return cls(
            runs=data.get("runs", 0),
            extras=data.get("extras", 0),
            counts_as_ball=data.get("counts_as_ball", True),
            is_wicket=data.get("is_wicket", False),
            description=data.get("description") or "",
            extra_type=extra_type,
        )


CATALOG: dict[str, OutcomeEffect] = {
    "dot": OutcomeEffect(description="{bowler} to {batsman}, no run"),
    "run": OutcomeEffect(runs=1, description="{bowler} to {batsman}, 1 run"),
    "two": OutcomeEffect(runs=2, description="{bowler} to {batsman}, 2 runs"),
    "three": OutcomeEffect(runs=3, description="{bowler} to {batsman}, 3 runs"),
    "four": OutcomeEffect(runs=4, description="{bowler} to {batsman}, FOUR"),
    "five": OutcomeEffect(runs=5, description="{bowler} to {batsman}, 5 runs"),
    "six": OutcomeEffect(runs=6, description="{bowler} to {batsman}, SIX"),
    "wide": OutcomeEffect(
        extras=1, counts_as_ball=False, extra_type=ExtraType.WIDE,
        description="{bowler} to {batsman}, wide",
    ),
    "noball": OutcomeEffect(
        extras=1, counts_as_ball=False, extra_type=ExtraType.NO_BALL,
        description="{bowler} to {batsman}, no ball",
    ),
    "bye": OutcomeEffect(
        extras=1, extra_type=ExtraType.BYE,
        description="{bowler} to {batsman}, 1 bye",
    ),
    "leg_bye": OutcomeEffect(
        extras=1, extra_type=ExtraType.LEG_BYE,
        description="{bowler} to {batsman}, 1 leg bye",
    ),
    "penalty": OutcomeEffect(
        extras=5, counts_as_ball=False, extra_type=ExtraType.PENALTY,
        description="5 penalty runs awarded to the batting side",
    ),
    "wicket": OutcomeEffect(is_wicket=True, description="{bowler} to {batsman}, OUT"),
}


def validate_custom(effect: OutcomeEffect) -> OutcomeEffect:
    """Reject custom outcomes that would break the score invariants"""
    for name in ("runs", "extras"):
        value = getattr(effect, name)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidOutcome(f"Custom outcome {name} must be a non-negative integer")
    for name in ("counts_as_ball", "is_wicket"):
        if not isinstance(getattr(effect, name), bool):
            raise InvalidOutcome(f"Custom outcome {name} must be true or false")
    if effect.extras > 0 and effect.extra_type is None:
        raise InvalidOutcome("Custom outcome with extras must name its extra type")
    if effect.extra_type in ILLEGAL_DELIVERY_EXTRAS and effect.counts_as_ball:
        raise InvalidOutcome(f"A {effect.extra_type.value} cannot count as a legal delivery")
    return effect


def resolve_outcome(
    code: Optional[str],
    custom: Union[OutcomeEffect, dict, None] = None,
) -> OutcomeEffect:
    """Resolve a catalog code, or a caller supplied custom outcome, to its effect."""
    if code and code != CUSTOM_CODE:
        effect = CATALOG.get(code)
        if effect is None:
            raise InvalidOutcome(f"Invalid outcome '{code}'")
        return effect

    if custom is None:
        if code == CUSTOM_CODE:
            raise InvalidOutcome("Custom outcome requires an outcome definition")
        raise InvalidOutcome("Outcome code or custom outcome must be provided")

    if isinstance(custom, dict):
        custom = OutcomeEffect.from_dict(custom)
    return validate_custom(custom)

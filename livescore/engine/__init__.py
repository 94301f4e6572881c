from livescore.engine.scoring_engine import ApplyBallOutcome, BallRequest, BallResult, apply_ball_outcome, validate_request
from livescore.engine.state import InningsState, MatchState, PlayerLedger
from livescore.engine.outcomes import CATALOG, OutcomeEffect, resolve_outcome

__all__ = [
    "ApplyBallOutcome",
    "BallRequest",
    "BallResult",
    "apply_ball_outcome",
    "validate_request",
    "InningsState",
    "MatchState",
    "PlayerLedger",
    "CATALOG",
    "OutcomeEffect",
    "resolve_outcome",
]

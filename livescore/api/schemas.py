"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel
from typing import Optional, Union
from datetime import datetime

from livescore.models.match import MatchStatus, TossDecision, InningsStatus
from livescore.models.player_status import StrikeRole


# Match Schemas
class TossRequest(BaseModel):
    winner_id: int
    decision: str  # "bat" or "bowl"


class MatchStatusRequest(BaseModel):
    status: str


class MatchResponse(BaseModel):
    id: int
    team1_id: int
    team2_id: int
    overs_limit: int
    venue: str
    start_time: Optional[datetime] = None
    toss_winner_id: Optional[int] = None
    toss_decision: Optional[TossDecision] = None
    status: MatchStatus
    target_runs: Optional[int] = None
    winner_id: Optional[int] = None
    is_tie: bool = False
    result_summary: Optional[str] = None
    end_time: Optional[datetime] = None

    class Config:
        from_attributes = True


# Innings Schemas
class StartInningsRequest(BaseModel):
    innings_number: int
    batting_order: list[int]
    initial_bowler_id: int
    batting_team_id: Optional[int] = None
    wicket_keeper_id: Optional[int] = None


class InningsSummary(BaseModel):
    id: int
    match_id: int
    innings_number: int
    batting_team_id: int
    bowling_team_id: int
    wicket_keeper_id: Optional[int] = None
    runs: int
    wickets: int
    overs: float
    extras_total: int
    status: InningsStatus
    end_time: Optional[datetime] = None

    class Config:
        from_attributes = True


class CreaseEntry(BaseModel):
    player_id: int
    role: StrikeRole


class ExtrasResponse(BaseModel):
    wides: int
    no_balls: int
    byes: int
    leg_byes: int
    penalty_runs: int
    total: int


class ScoreResponse(BaseModel):
    runs: int
    wickets: int
    balls: int
    overs: float
    extras: ExtrasResponse


class CommentaryEntryResponse(BaseModel):
    over: int
    ball: int
    description: str
    timestamp: datetime

    class Config:
        from_attributes = True


class InningsStateResponse(BaseModel):
    """Full innings object, same shape as the live feed payload"""
    id: int
    match_id: int
    innings_number: int
    batting_team_id: int
    bowling_team_id: int
    batting_order: list[int]
    current_batsmen: list[CreaseEntry]
    current_bowler_id: Optional[int] = None
    wicket_keeper_id: Optional[int] = None
    score: ScoreResponse
    commentary: list[CommentaryEntryResponse]
    status: InningsStatus
    end_time: Optional[datetime] = None
    target_runs: Optional[int] = None


class PlayerStatusResponse(BaseModel):
    player_id: int
    match_id: int
    innings_number: int
    runs: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    striking_role: Optional[StrikeRole] = None
    out_type: Optional[str] = None
    bowler_when_out_id: Optional[int] = None
    dismissed_by_id: Optional[int] = None
    runs_conceded: int = 0
    balls_bowled: int = 0
    overs_bowled: float = 0.0
    maidens: int = 0
    wickets: int = 0
    wides: int = 0
    no_balls: int = 0
    catches: int = 0
    stumpings: int = 0
    run_outs: int = 0

    class Config:
        from_attributes = True


# Ball Schemas
class CustomOutcome(BaseModel):
    runs: int = 0
    extras: int = 0
    counts_as_ball: bool = True
    is_wicket: bool = False
    description: str = ""
    extra_type: Optional[str] = None  # wide, noball, bye, leg_bye, penalty


class BallRequest(BaseModel):
    outcome: Optional[str] = None  # catalog code, or "custom"
    custom_outcome: Optional[CustomOutcome] = None
    bowler_id: Optional[int] = None
    fielder_id: Optional[int] = None
    dismissal_type: Optional[str] = None
    next_batsman_id: Optional[int] = None
    next_batsman_role: Optional[Union[int, str]] = None  # striker/non_striker, or 1/2


class BallResultResponse(BaseModel):
    innings: InningsStateResponse
    commentary: CommentaryEntryResponse
    bowler: Optional[PlayerStatusResponse] = None
    striker: Optional[PlayerStatusResponse] = None
    non_striker: Optional[PlayerStatusResponse] = None
    fielder: Optional[PlayerStatusResponse] = None
    dismissed: Optional[PlayerStatusResponse] = None
    maiden: bool = False
    innings_completed: bool = False
    match_completed: bool = False
    match_status: MatchStatus
    winner_id: Optional[int] = None
    is_tie: bool = False
    result_summary: Optional[str] = None


# Scorecard Schemas
class BattingCardRow(BaseModel):
    player_id: int
    name: Optional[str] = None
    runs: int
    balls: int
    fours: int
    sixes: int
    strike_rate: float
    status: Optional[str] = None
    out_type: Optional[str] = None
    bowler_id: Optional[int] = None
    fielder_id: Optional[int] = None


class BowlingCardRow(BaseModel):
    player_id: int
    name: Optional[str] = None
    overs: float
    maidens: int
    runs: int
    wickets: int
    wides: int
    no_balls: int
    economy: float


class FieldingCardRow(BaseModel):
    player_id: int
    name: Optional[str] = None
    catches: int
    stumpings: int
    run_outs: int


class ScorecardResponse(BaseModel):
    innings_id: int
    match_id: int
    innings_number: int
    batting_team_id: int
    bowling_team_id: int
    wicket_keeper_id: Optional[int] = None
    runs: int
    wickets: int
    overs: float
    run_rate: float
    extras: ExtrasResponse
    status: str
    batting: list[BattingCardRow]
    bowling: list[BowlingCardRow]
    fielding: list[FieldingCardRow]

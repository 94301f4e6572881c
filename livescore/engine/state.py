"""
In-memory snapshot of an innings, as read by the scoring engine.
"""
import copy
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional

from livescore.engine.commentary import CommentaryLog
from livescore.engine.score import Score, BALLS_PER_OVER
from livescore.engine.strike import Crease
from livescore.models.match import MatchStatus, InningsStatus
from livescore.models.player_status import StrikeRole

MAX_WICKETS = 10


@dataclass
class PlayerLedger:
    """Batting, bowling and fielding figures of one player in one innings"""
    player_id: int
    match_id: int
    innings_number: int

    # Batting
    runs: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    striking_role: Optional[StrikeRole] = None
    out_type: Optional[str] = None
    bowler_when_out_id: Optional[int] = None
    dismissed_by_id: Optional[int] = None

    # Bowling
    runs_conceded: int = 0
    balls_bowled: int = 0
    maidens: int = 0
    wickets: int = 0
    wides: int = 0
    no_balls: int = 0

    # Fielding
    catches: int = 0
    stumpings: int = 0
    run_outs: int = 0

    is_new: bool = field(default=False, compare=False)

    @property
    def overs_bowled(self) -> float:
        return self.balls_bowled / BALLS_PER_OVER

    @property
    def is_out(self) -> bool:
        return self.out_type is not None

    def to_dict(self) -> dict:
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "is_new"}
        data["striking_role"] = self.striking_role.value if self.striking_role else None
        data["overs_bowled"] = round(self.overs_bowled, 4)
        return data


# Columns shared between PlayerLedger and the player_status table
LEDGER_FIELDS = tuple(f.name for f in fields(PlayerLedger) if f.name != "is_new")


@dataclass
class MatchState:
    match_id: int
    team1_id: int
    team2_id: int
    overs_limit: int
    status: MatchStatus = MatchStatus.IN_PROGRESS
    target_runs: Optional[int] = None
    winner_id: Optional[int] = None
    is_tie: bool = False
    result_summary: Optional[str] = None
    end_time: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "match_id": self.match_id,
            "status": self.status.value,
            "overs_limit": self.overs_limit,
            "target_runs": self.target_runs,
            "winner_id": self.winner_id,
            "is_tie": self.is_tie,
            "result_summary": self.result_summary,
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }


@dataclass
class InningsState:
    innings_id: int
    innings_number: int
    batting_team_id: int
    bowling_team_id: int
    match: MatchState
    batting_order: list[int]
    crease: Crease
    score: Score = field(default_factory=Score)
    current_bowler_id: Optional[int] = None
    wicket_keeper_id: Optional[int] = None
    commentary: CommentaryLog = field(default_factory=CommentaryLog)
    ledgers: dict[int, PlayerLedger] = field(default_factory=dict)
    over_runs_conceded: int = 0
    over_bowler_id: Optional[int] = None
    status: InningsStatus = InningsStatus.ONGOING
    end_time: Optional[datetime] = None

    # Directory data, read only
    bowling_squad: frozenset[int] = frozenset()
    player_names: dict[int, str] = field(default_factory=dict)
    team_names: dict[int, str] = field(default_factory=dict)

    @property
    def match_id(self) -> int:
        return self.match.match_id

    @property
    def is_completed(self) -> bool:
        return self.status == InningsStatus.COMPLETED

    @property
    def max_wickets(self) -> int:
        """Wickets that end the innings: ten, or fewer with a short batting order"""
        return min(MAX_WICKETS, max(len(self.batting_order) - 1, 1))

    @property
    def target(self) -> Optional[int]:
        return self.match.target_runs if self.innings_number == 2 else None

    def name(self, player_id: Optional[int]) -> str:
        if player_id is None:
            return "Unknown"
        return self.player_names.get(player_id, f"Player #{player_id}")

    def ledger(self, player_id: int) -> PlayerLedger:
        """Look up a player's figures, creating them on first participation"""
        ledger = self.ledgers.get(player_id)
        if ledger is None:
            ledger = PlayerLedger(
                player_id=player_id,
                match_id=self.match_id,
                innings_number=self.innings_number,
                is_new=True,
            )
            self.ledgers[player_id] = ledger
        return ledger

    def has_batted(self, player_id: int) -> bool:
        ledger = self.ledgers.get(player_id)
        return ledger is not None and (ledger.is_out or ledger.striking_role is not None)

    def copy(self) -> "InningsState":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        """Full innings object, as broadcast to live subscribers"""
        return {
            "id": self.innings_id,
            "match_id": self.match_id,
            "innings_number": self.innings_number,
            "batting_team_id": self.batting_team_id,
            "bowling_team_id": self.bowling_team_id,
            "batting_order": list(self.batting_order),
            "current_batsmen": self.crease.to_list(),
            "current_bowler_id": self.current_bowler_id,
            "wicket_keeper_id": self.wicket_keeper_id,
            "score": self.score.to_dict(),
            "commentary": self.commentary.to_list(),
            "status": self.status.value,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "target_runs": self.target,
        }

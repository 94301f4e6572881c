from typing import Optional, List
from sqlalchemy import String, Integer, Float, ForeignKey, Enum, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from livescore.database import Base


class MatchStatus(enum.Enum):
    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ABANDONED = "abandoned"


class TossDecision(enum.Enum):
    BAT = "bat"
    BOWL = "bowl"


class InningsStatus(enum.Enum):
    ONGOING = "ongoing"
    COMPLETED = "completed"


class Match(Base):
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Teams
    team1_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team2_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team1: Mapped["Team"] = relationship("Team", foreign_keys=[team1_id])
    team2: Mapped["Team"] = relationship("Team", foreign_keys=[team2_id])

    # Match info
    overs_limit: Mapped[int] = mapped_column(Integer, default=20)  # 1-50
    venue: Mapped[str] = mapped_column(String(100), default="")
    start_time: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Toss
    toss_winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    toss_decision: Mapped[Optional[TossDecision]] = mapped_column(Enum(TossDecision), nullable=True)

    # Status
    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.UPCOMING)

    # Result
    target_runs: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    is_tie: Mapped[bool] = mapped_column(default=False)
    result_summary: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    innings: Mapped[List["Innings"]] = relationship(
        "Innings", back_populates="match", order_by="Innings.innings_number", cascade="all, delete-orphan"
    )

    @property
    def team_ids(self) -> tuple[int, int]:
        return (self.team1_id, self.team2_id)

    def other_team_id(self, team_id: int) -> int:
        return self.team2_id if team_id == self.team1_id else self.team1_id

    def __repr__(self):
        return f"<Match {self.team1_id} vs {self.team2_id} ({self.status.value})>"


class Innings(Base):
    __tablename__ = "innings"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), index=True)
    match: Mapped["Match"] = relationship("Match", back_populates="innings")

    innings_number: Mapped[int] = mapped_column(Integer)  # 1 or 2

    batting_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    bowling_team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))

    batting_order: Mapped[list] = mapped_column(JSON, default=list)  # player ids
    current_bowler_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    wicket_keeper_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    # Score
    runs: Mapped[int] = mapped_column(Integer, default=0)
    wickets: Mapped[int] = mapped_column(Integer, default=0)
    balls: Mapped[int] = mapped_column(Integer, default=0)  # legal deliveries
    overs: Mapped[float] = mapped_column(Float, default=0.0)  # display encoding, 13 balls -> 2.1

    # Extras
    extras_wides: Mapped[int] = mapped_column(Integer, default=0)
    extras_no_balls: Mapped[int] = mapped_column(Integer, default=0)
    extras_byes: Mapped[int] = mapped_column(Integer, default=0)
    extras_leg_byes: Mapped[int] = mapped_column(Integer, default=0)
    extras_penalty_runs: Mapped[int] = mapped_column(Integer, default=0)
    extras_total: Mapped[int] = mapped_column(Integer, default=0)

    # Over in progress, for maiden detection
    over_runs_conceded: Mapped[int] = mapped_column(Integer, default=0)
    over_bowler_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Latest entries only, oldest dropped first
    commentary: Mapped[list] = mapped_column(JSON, default=list)

    status: Mapped[InningsStatus] = mapped_column(Enum(InningsStatus), default=InningsStatus.ONGOING)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Optimistic concurrency counter
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("match_id", "innings_number", name="unique_match_innings"),
    )
    __mapper_args__ = {"version_id_col": version}

    @property
    def overs_display(self) -> str:
        return f"{self.balls // 6}.{self.balls % 6}"

    @property
    def run_rate(self) -> float:
        if self.balls == 0:
            return 0.0
        return (self.runs / self.balls) * 6

    def __repr__(self):
        return f"<Innings {self.innings_number}: {self.runs}/{self.wickets} ({self.overs_display})>"

"""
Per-innings player figures: batting, bowling and fielding in one row
"""
from typing import Optional
from sqlalchemy import String, Integer, Float, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
import enum
from livescore.database import Base


class StrikeRole(enum.Enum):
    STRIKER = "striker"
    NON_STRIKER = "non_striker"
    OUT = "out"


class DismissalType(enum.Enum):
    CAUGHT = "caught"
    BOWLED = "bowled"
    RUN_OUT = "run_out"
    STUMPED = "stumped"
    LBW = "lbw"
    HIT_WICKET = "hit_wicket"
    OTHER = "other"


class PlayerStatus(Base):
    __tablename__ = "player_status"

    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), index=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id", ondelete="CASCADE"), index=True)
    innings_number: Mapped[int] = mapped_column(Integer, index=True)

    player: Mapped["Player"] = relationship("Player", foreign_keys=[player_id])

    # Batting
    runs: Mapped[int] = mapped_column(Integer, default=0)
    balls_faced: Mapped[int] = mapped_column(Integer, default=0)
    fours: Mapped[int] = mapped_column(Integer, default=0)
    sixes: Mapped[int] = mapped_column(Integer, default=0)
    striking_role: Mapped[Optional[StrikeRole]] = mapped_column(Enum(StrikeRole), nullable=True)
    out_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bowler_when_out_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    dismissed_by_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    # Bowling
    runs_conceded: Mapped[int] = mapped_column(Integer, default=0)
    balls_bowled: Mapped[int] = mapped_column(Integer, default=0)
    overs_bowled: Mapped[float] = mapped_column(Float, default=0.0)  # fractional, balls / 6
    maidens: Mapped[int] = mapped_column(Integer, default=0)
    wickets: Mapped[int] = mapped_column(Integer, default=0)
    wides: Mapped[int] = mapped_column(Integer, default=0)
    no_balls: Mapped[int] = mapped_column(Integer, default=0)

    # Fielding
    catches: Mapped[int] = mapped_column(Integer, default=0)
    stumpings: Mapped[int] = mapped_column(Integer, default=0)
    run_outs: Mapped[int] = mapped_column(Integer, default=0)

    __table_args__ = (
        UniqueConstraint("match_id", "innings_number", "player_id", name="unique_player_innings"),
    )

    @validates("player_id", "match_id", "innings_number")
    def _freeze_identity(self, key, value):
        current = getattr(self, key)
        if current is not None and current != value:
            raise ValueError(f"{key} cannot change once set")
        return value

    @property
    def is_out(self) -> bool:
        return self.out_type is not None

    @property
    def strike_rate(self) -> float:
        if self.balls_faced == 0:
            return 0.0
        return (self.runs / self.balls_faced) * 100

    @property
    def economy(self) -> float:
        if self.balls_bowled == 0:
            return 0.0
        return (self.runs_conceded / self.balls_bowled) * 6

    def __repr__(self):
        return f"<PlayerStatus player={self.player_id} match={self.match_id} inn={self.innings_number}>"

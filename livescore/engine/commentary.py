"""
Commentary log - fixed capacity, oldest entries dropped first.
"""
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from livescore.engine.score import BALLS_PER_OVER

DEFAULT_LIMIT = 20


@dataclass(frozen=True)
class CommentaryEntry:
    over: int
    ball: int
    description: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "over": self.over,
            "ball": self.ball,
            "description": self.description,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CommentaryEntry":
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return cls(
            over=data["over"],
            ball=data["ball"],
            description=data["description"],
            timestamp=timestamp or datetime.utcnow(),
        )


def ball_position(balls: int, counts_as_ball: bool) -> tuple[int, int]:
    """
    (over, ball) label for a delivery from the legal ball count after it.
    The last ball of an over is ball 6 of that over; a wide or no-ball is
    labelled with the legal balls already bowled in the over in progress.
    """
    if counts_as_ball and balls > 0:
        return (balls - 1) // BALLS_PER_OVER + 1, (balls - 1) % BALLS_PER_OVER + 1
    return balls // BALLS_PER_OVER + 1, balls % BALLS_PER_OVER


class _Placeholders(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def render(template: str, **values) -> str:
    """Fill {bowler}/{batsman}/... placeholders, leaving unknown ones as written"""
    try:
        return template.format_map(_Placeholders(values))
    except (ValueError, IndexError):
        return template


class CommentaryLog:
    """Ring buffer of the most recent commentary entries"""

    def __init__(self, entries: Optional[Iterable[CommentaryEntry]] = None, limit: int = DEFAULT_LIMIT):
        self.limit = limit
        self._entries: deque[CommentaryEntry] = deque(entries or (), maxlen=limit)

    @classmethod
    def from_list(cls, data: Optional[list], limit: int = DEFAULT_LIMIT) -> "CommentaryLog":
        return cls((CommentaryEntry.from_dict(d) for d in data or []), limit=limit)

    def append(self, entry: CommentaryEntry) -> CommentaryEntry:
        self._entries.append(entry)
        return entry

    def add(self, over: int, ball: int, description: str, timestamp: datetime) -> CommentaryEntry:
        return self.append(CommentaryEntry(over, ball, description, timestamp))

    @property
    def latest(self) -> Optional[CommentaryEntry]:
        return self._entries[-1] if self._entries else None

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def copy(self) -> "CommentaryLog":
        return CommentaryLog(self._entries, limit=self.limit)

    def to_list(self) -> list[dict]:
        return [e.to_dict() for e in self._entries]

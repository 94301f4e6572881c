"""
Strike rotation - which of the two batsmen at the crease is on strike.
"""
from dataclasses import dataclass
from typing import Optional

from livescore.engine.errors import InvalidStrikeRole, ValidationError
from livescore.engine.score import BALLS_PER_OVER
from livescore.models.player_status import StrikeRole

ACTIVE_ROLES = (StrikeRole.STRIKER, StrikeRole.NON_STRIKER)


def opposite(role: StrikeRole) -> StrikeRole:
    if role == StrikeRole.STRIKER:
        return StrikeRole.NON_STRIKER
    if role == StrikeRole.NON_STRIKER:
        return StrikeRole.STRIKER
    raise InvalidStrikeRole(f"Role {role.value} has no opposite")


def parse_role(value) -> StrikeRole:
    """Accept a StrikeRole, its value, or the legacy 1 (striker) / 2 (non-striker) codes"""
    if isinstance(value, StrikeRole):
        role = value
    elif value in (1, "1"):
        role = StrikeRole.STRIKER
    elif value in (2, "2"):
        role = StrikeRole.NON_STRIKER
    else:
        try:
            role = StrikeRole(value)
        except ValueError:
            raise InvalidStrikeRole("Next batsman strike role must be striker or non_striker")
    if role not in ACTIVE_ROLES:
        raise InvalidStrikeRole("Next batsman strike role must be striker or non_striker")
    return role


def strike_swaps(batting_runs: int, counts_as_ball: bool, balls_after: int) -> int:
    """
    Number of times the batsmen change ends on a delivery.

    Odd runs off the bat and the end of an over each swap strike; both can
    fire on the same ball, in which case they cancel out.
    """
    if not counts_as_ball:
        return 0
    swaps = 0
    if batting_runs % 2 == 1:
        swaps += 1
    if balls_after % BALLS_PER_OVER == 0:
        swaps += 1
    return swaps


@dataclass
class ActiveBatsman:
    player_id: int
    role: StrikeRole


class Crease:
    """The two active batsmen, each tagged with exactly one role"""

    def __init__(self, batsmen: list[ActiveBatsman], validate: bool = True):
        self.batsmen = list(batsmen)
        if validate:
            self.check()

    @classmethod
    def open(cls, batting_order: list[int]) -> "Crease":
        """First two in the batting order open, the first on strike"""
        if len(batting_order) < 2:
            raise ValidationError("Batting order must include at least two players")
        return cls([
            ActiveBatsman(batting_order[0], StrikeRole.STRIKER),
            ActiveBatsman(batting_order[1], StrikeRole.NON_STRIKER),
        ])

    def check(self):
        roles = sorted(b.role.value for b in self.batsmen)
        if roles != sorted(r.value for r in ACTIVE_ROLES):
            raise InvalidStrikeRole(
                f"Crease must hold one striker and one non-striker, found {roles}"
            )

    def _by_role(self, role: StrikeRole) -> ActiveBatsman:
        return next(b for b in self.batsmen if b.role == role)

    @property
    def striker_id(self) -> int:
        return self._by_role(StrikeRole.STRIKER).player_id

    @property
    def non_striker_id(self) -> int:
        return self._by_role(StrikeRole.NON_STRIKER).player_id

    @property
    def player_ids(self) -> list[int]:
        return [b.player_id for b in self.batsmen]

    def role_of(self, player_id: int) -> Optional[StrikeRole]:
        for b in self.batsmen:
            if b.player_id == player_id:
                return b.role
        return None

    def swap(self, times: int = 1):
        if times % 2 == 0:
            return
        for b in self.batsmen:
            b.role = opposite(b.role)

    def rotate(self, batting_runs: int, counts_as_ball: bool, balls_after: int) -> int:
        swaps = strike_swaps(batting_runs, counts_as_ball, balls_after)
        self.swap(swaps)
        return swaps

    def replace_striker(self, incoming_id: int, incoming_role: StrikeRole) -> int:
        """
        Retire the striker and admit the incoming batsman with the given role.
        The batsman left at the crease takes the other role.
        Returns the dismissed player's id.
        """
        incoming_role = parse_role(incoming_role)
        outgoing = self._by_role(StrikeRole.STRIKER)
        outgoing.role = StrikeRole.OUT
        survivor = self._by_role(StrikeRole.NON_STRIKER)
        survivor.role = opposite(incoming_role)
        self.batsmen = [survivor, ActiveBatsman(incoming_id, incoming_role)]
        self.check()
        return outgoing.player_id

    def retire_striker(self) -> int:
        """Striker out with nobody left to come in; innings is over"""
        outgoing = self._by_role(StrikeRole.STRIKER)
        self.batsmen = [b for b in self.batsmen if b is not outgoing]
        return outgoing.player_id

    def copy(self) -> "Crease":
        return Crease([ActiveBatsman(b.player_id, b.role) for b in self.batsmen], validate=False)

    def to_list(self) -> list[dict]:
        return [{"player_id": b.player_id, "role": b.role.value} for b in self.batsmen]

from livescore.models.admin import Admin
from livescore.models.team import Team
from livescore.models.player import Player
from livescore.models.match import Match, Innings
from livescore.models.player_status import PlayerStatus

__all__ = [
    "Admin",
    "Team",
    "Player",
    "Match",
    "Innings",
    "PlayerStatus",
]

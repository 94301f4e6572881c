"""
Squad Generator - demo teams and fictional players for trying out live scoring
"""
import random
from faker import Faker
from sqlalchemy.orm import Session

from livescore.models.team import Team
from livescore.models.player import Player, PlayerRole

# Initialize Faker instances - use en_US as fallback for unavailable locales
fake_in = Faker('en_IN')
fake_au = Faker('en_AU')
fake_en = Faker('en_GB')


DEMO_TEAMS = [
    {"name": "Mumbai Titans", "short_name": "MT", "faker": fake_in},
    {"name": "Chennai Kings", "short_name": "CK", "faker": fake_in},
    {"name": "Sydney Strikers", "short_name": "SS", "faker": fake_au},
    {"name": "London Lions", "short_name": "LL", "faker": fake_en},
]

# Playing XI composition: 1 WK, 4 batsmen, 2 all-rounders, 4 bowlers
SQUAD_ROLES = (
    [PlayerRole.BATSMAN] * 2
    + [PlayerRole.WICKET_KEEPER]
    + [PlayerRole.BATSMAN] * 2
    + [PlayerRole.ALL_ROUNDER] * 2
    + [PlayerRole.BOWLER] * 4
)


class SquadGenerator:
    """Generates demo teams with a full playing XI each"""

    @staticmethod
    def generate_name(faker_instance: Faker) -> str:
        return f"{faker_instance.first_name_male()} {faker_instance.last_name()}"

    @classmethod
    def generate_squad(cls, team: Team, faker_instance: Faker = fake_en) -> list[Player]:
        """Players in batting order; names are unique within the squad"""
        names = set()
        players = []
        for role in SQUAD_ROLES:
            name = cls.generate_name(faker_instance)
            while name in names:
                name = cls.generate_name(faker_instance)
            names.add(name)
            players.append(Player(name=name, role=role, team=team))
        return players

    @classmethod
    def create_teams(cls, count: int = 2) -> list[Team]:
        """Pick `count` demo teams, each with its squad attached (not yet saved)"""
        chosen = random.sample(DEMO_TEAMS, k=min(count, len(DEMO_TEAMS)))
        teams = []
        for data in chosen:
            team = Team(name=data["name"], short_name=data["short_name"])
            cls.generate_squad(team, data["faker"])
            teams.append(team)
        return teams

    @classmethod
    def save_teams_to_db(cls, db: Session, teams: list[Team]) -> list[Team]:
        """Save teams and their players, returning them with IDs"""
        for team in teams:
            db.add(team)
        db.commit()
        for team in teams:
            db.refresh(team)
        return teams

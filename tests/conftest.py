"""
Shared fixtures: pure innings snapshots for engine tests and a file-backed
SQLite database with two seeded teams for service and API tests.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import livescore.models  # noqa: F401  (registers tables on Base.metadata)
from livescore.database import Base
from livescore.engine.score import Score, Extras
from livescore.engine.state import InningsState, MatchState
from livescore.engine.strike import Crease
from livescore.models.match import Match, MatchStatus
from livescore.models.player import Player, PlayerRole
from livescore.models.team import Team
from livescore.services import innings as innings_service

BATTING_IDS = list(range(1, 12))
BOWLING_IDS = list(range(101, 112))
KEEPER_INDEX = 5


def build_state(
    overs_limit: int = 20,
    innings_number: int = 1,
    target_runs=None,
    batting_order=None,
    runs: int = 0,
    wickets: int = 0,
    balls: int = 0,
    extras: Extras = None,
    bowler_id=101,
    wicket_keeper_id=None,
    match_status: MatchStatus = MatchStatus.IN_PROGRESS,
) -> InningsState:
    """An ongoing innings with the first two in the order at the crease"""
    order = list(batting_order or BATTING_IDS)
    crease = Crease.open(order)
    names = {pid: f"Batter {pid}" for pid in BATTING_IDS}
    names.update({pid: f"Bowler {pid}" for pid in BOWLING_IDS})
    state = InningsState(
        innings_id=1,
        innings_number=innings_number,
        batting_team_id=1,
        bowling_team_id=2,
        match=MatchState(
            match_id=1,
            team1_id=1,
            team2_id=2,
            overs_limit=overs_limit,
            status=match_status,
            target_runs=target_runs,
        ),
        batting_order=order,
        crease=crease,
        score=Score(runs=runs, wickets=wickets, balls=balls, extras=extras or Extras()),
        current_bowler_id=bowler_id,
        wicket_keeper_id=wicket_keeper_id,
        over_bowler_id=bowler_id if balls % 6 == 0 else None,
        bowling_squad=frozenset(BOWLING_IDS),
        player_names=names,
        team_names={1: "Mumbai Titans", 2: "Chennai Kings"},
    )
    for batsman in crease.batsmen:
        state.ledger(batsman.player_id).striking_role = batsman.role
    if bowler_id is not None:
        state.ledger(bowler_id)
    for ledger in state.ledgers.values():
        ledger.is_new = False
    return state


@pytest.fixture
def state():
    return build_state()


@pytest.fixture
def db_engine(tmp_path):
    """File-backed database so several threads can share it"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'livescore-test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def teams(db):
    """Two teams of eleven; players are listed in batting order, the sixth keeps wicket"""
    created = []
    for name, short in (("Mumbai Titans", "MT"), ("Chennai Kings", "CK")):
        team = Team(name=name, short_name=short)
        for i in range(11):
            if i == KEEPER_INDEX:
                role = PlayerRole.WICKET_KEEPER
            else:
                role = PlayerRole.BOWLER if i >= 7 else PlayerRole.BATSMAN
            team.players.append(Player(name=f"{short} Player {i + 1}", role=role))
        db.add(team)
        created.append(team)
    db.commit()
    for team in created:
        db.refresh(team)
    return created


@pytest.fixture
def batting_ids(teams):
    return [p.id for p in sorted(teams[0].players, key=lambda p: p.id)]


@pytest.fixture
def bowling_ids(teams):
    return [p.id for p in sorted(teams[1].players, key=lambda p: p.id)]


@pytest.fixture
def match(db, teams):
    """Two-over match; team 1 won the toss and bats first"""
    match = Match(team1_id=teams[0].id, team2_id=teams[1].id, overs_limit=2, venue="Test Stadium")
    db.add(match)
    db.commit()
    innings_service.record_toss(db, match.id, teams[0].id, "bat")
    return match


@pytest.fixture
def innings(db, match, batting_ids, bowling_ids):
    return innings_service.start_innings(
        db, match.id, innings_number=1, batting_order=batting_ids, initial_bowler_id=bowling_ids[-1]
    )

"""
Scoring service - the transaction boundary around the scoring engine.

Each ball is applied under a per-innings lock inside a single database
transaction: the innings, its match and every touched player_status row are
written together or not at all. The live event goes out after commit and
before the innings lock is released.
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from livescore.config import settings
from livescore.database import SessionLocal
from livescore.engine.commentary import CommentaryLog
from livescore.engine.errors import InningsAlreadyCompleted, NotFoundError, TransactionConflict
from livescore.engine.score import Score, Extras
from livescore.engine.scoring_engine import (
    ApplyBallOutcome, BallRequest, BallResult,
    InningsMutation, MatchMutation, PlayerStatusMutation, validate_request,
)
from livescore.engine.state import InningsState, MatchState, PlayerLedger, LEDGER_FIELDS
from livescore.engine.strike import ACTIVE_ROLES, ActiveBatsman, Crease
from livescore.models.match import Innings, InningsStatus
from livescore.models.player import Player
from livescore.models.player_status import PlayerStatus, DismissalType
from livescore.models.team import Team
from livescore.services.broadcast import Broadcaster, broadcaster as default_broadcaster
from livescore.services.locks import InningsLocks

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = ("player_id", "match_id", "innings_number")


def ledger_from_row(row: PlayerStatus) -> PlayerLedger:
    return PlayerLedger(**{name: getattr(row, name) for name in LEDGER_FIELDS})


def load_innings_state(
    session: Session,
    innings: Innings,
    commentary_limit: int = settings.COMMENTARY_LIMIT,
) -> tuple[InningsState, dict[int, PlayerStatus]]:
    """Snapshot an innings and its player figures for the engine"""
    match = innings.match
    rows = {
        row.player_id: row
        for row in session.query(PlayerStatus).filter_by(
            match_id=innings.match_id, innings_number=innings.innings_number
        )
    }

    order = {pid: i for i, pid in enumerate(innings.batting_order)}
    active = sorted(
        (row for row in rows.values() if row.striking_role in ACTIVE_ROLES),
        key=lambda row: order.get(row.player_id, len(order)),
    )
    crease = Crease(
        [ActiveBatsman(row.player_id, row.striking_role) for row in active],
        validate=innings.status == InningsStatus.ONGOING,
    )

    team_ids = [innings.batting_team_id, innings.bowling_team_id]
    players = session.query(Player.id, Player.name, Player.team_id).filter(Player.team_id.in_(team_ids)).all()
    teams = session.query(Team.id, Team.name).filter(Team.id.in_(team_ids)).all()

    state = InningsState(
        innings_id=innings.id,
        innings_number=innings.innings_number,
        batting_team_id=innings.batting_team_id,
        bowling_team_id=innings.bowling_team_id,
        match=MatchState(
            match_id=match.id,
            team1_id=match.team1_id,
            team2_id=match.team2_id,
            overs_limit=match.overs_limit,
            status=match.status,
            target_runs=match.target_runs,
            winner_id=match.winner_id,
            is_tie=match.is_tie,
            result_summary=match.result_summary,
            end_time=match.end_time,
        ),
        batting_order=list(innings.batting_order),
        crease=crease,
        score=Score(
            runs=innings.runs,
            wickets=innings.wickets,
            balls=innings.balls,
            extras=Extras(
                wides=innings.extras_wides,
                no_balls=innings.extras_no_balls,
                byes=innings.extras_byes,
                leg_byes=innings.extras_leg_byes,
                penalty_runs=innings.extras_penalty_runs,
            ),
        ),
        current_bowler_id=innings.current_bowler_id,
        wicket_keeper_id=innings.wicket_keeper_id,
        commentary=CommentaryLog.from_list(innings.commentary, limit=commentary_limit),
        ledgers={pid: ledger_from_row(row) for pid, row in rows.items()},
        over_runs_conceded=innings.over_runs_conceded,
        over_bowler_id=innings.over_bowler_id,
        status=innings.status,
        end_time=innings.end_time,
        bowling_squad=frozenset(p.id for p in players if p.team_id == innings.bowling_team_id),
        player_names={p.id: p.name for p in players},
        team_names={t.id: t.name for t in teams},
    )
    return state, rows


def apply_mutations(session: Session, innings: Innings, rows: dict[int, PlayerStatus], mutations):
    for mutation in mutations:
        if isinstance(mutation, InningsMutation):
            for key, value in mutation.values.items():
                setattr(innings, key, value)
        elif isinstance(mutation, MatchMutation):
            for key, value in mutation.values.items():
                setattr(innings.match, key, value)
        elif isinstance(mutation, PlayerStatusMutation):
            ledger = mutation.ledger
            row = rows.get(ledger.player_id)
            if row is None:
                row = PlayerStatus(
                    player_id=ledger.player_id,
                    match_id=ledger.match_id,
                    innings_number=ledger.innings_number,
                )
                session.add(row)
                rows[ledger.player_id] = row
            for key, value in mutation.values.items():
                if key not in IDENTITY_FIELDS:
                    setattr(row, key, value)
        else:
            raise TypeError(f"Unknown mutation {mutation!r}")


class ScoringService:
    """
    Applies ball outcomes to persisted innings.

    Broadcast listeners run while the innings lock is held; a listener must
    not score the same innings from the publishing thread.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        broadcaster: Optional[Broadcaster] = None,
        locks: Optional[InningsLocks] = None,
        bowler_credit: Optional[dict[DismissalType, bool]] = None,
        commentary_limit: int = settings.COMMENTARY_LIMIT,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.session_factory = session_factory
        self.broadcaster = broadcaster if broadcaster is not None else default_broadcaster
        self.locks = locks if locks is not None else InningsLocks()
        self.bowler_credit = bowler_credit
        self.commentary_limit = commentary_limit
        self.clock = clock

    def apply_ball(self, innings_id: int, request: BallRequest, match_id: Optional[int] = None) -> BallResult:
        # Malformed requests are rejected before a transaction is opened
        validated = validate_request(request)

        with self.locks.hold(innings_id):
            try:
                result = self._apply_in_transaction(innings_id, request, validated, match_id)
            except InningsAlreadyCompleted:
                self.locks.discard(innings_id)
                raise

            state = result.state
            logger.info(
                "Innings %s: %s -> %s/%s (%s ov)",
                innings_id, request.outcome or "custom",
                state.score.runs, state.score.wickets, state.score.overs_display,
            )
            # Still under the lock, so subscribers see events in commit order
            self.broadcaster.publish(result.event)

        if result.innings_completed:
            logger.info(
                "Innings %s completed (%s)", innings_id,
                ", ".join(r.value for r in result.completion),
            )
            self.locks.discard(innings_id)
        return result

    def _apply_in_transaction(self, innings_id: int, request: BallRequest, validated, match_id: Optional[int]) -> BallResult:
        with self.session_factory() as session:
            try:
                with session.begin():
                    innings = session.get(Innings, innings_id, with_for_update=True)
                    if innings is None or (match_id is not None and innings.match_id != match_id):
                        raise NotFoundError(f"Innings {innings_id} not found")
                    state, rows = load_innings_state(session, innings, self.commentary_limit)
                    command = ApplyBallOutcome(request, bowler_credit=self.bowler_credit, clock=self.clock)
                    result = command.execute(state, validated)
                    apply_mutations(session, innings, rows, result.mutations)
                return result
            except (StaleDataError, IntegrityError, OperationalError) as exc:
                logger.warning("Scoring conflict on innings %s: %s", innings_id, exc)
                raise TransactionConflict(
                    f"Innings {innings_id} was modified concurrently, please retry"
                ) from exc

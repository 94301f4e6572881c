"""
Live match API endpoints - toss, innings lifecycle and ball-by-ball scoring
"""
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from livescore.database import get_db
from livescore.models.admin import Admin
from livescore.auth.utils import get_current_admin
from livescore.engine import BallRequest as BallCommand, BallResult
from livescore.engine.errors import ScoringError
from livescore.services import innings as innings_service
from livescore.services.broadcast import Broadcaster, QueueListener, broadcaster
from livescore.services.scoring import ScoringService, load_innings_state
from livescore.api.schemas import (
    TossRequest, MatchStatusRequest, MatchResponse, StartInningsRequest,
    InningsSummary, InningsStateResponse, BallRequest, BallResultResponse,
    PlayerStatusResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["Live Match"])

scoring_service = ScoringService(broadcaster=broadcaster)


def get_scoring_service() -> ScoringService:
    return scoring_service


def get_broadcaster() -> Broadcaster:
    return broadcaster


def raise_http(error: ScoringError):
    """Translate a scoring error into the matching HTTP response"""
    headers = {"Retry-After": "0"} if error.retryable else None
    raise HTTPException(status_code=error.status_code, detail=error.message, headers=headers)


def innings_state_response(db: Session, innings) -> dict:
    state, _ = load_innings_state(db, innings)
    return state.to_dict()


@router.post("/{match_id}/toss", response_model=MatchResponse)
def record_toss(
    match_id: int,
    request: TossRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    """Record the toss winner and their election to bat or bowl"""
    try:
        return innings_service.record_toss(db, match_id, request.winner_id, request.decision)
    except ScoringError as e:
        raise_http(e)


@router.post("/{match_id}/status", response_model=MatchResponse)
def update_status(
    match_id: int,
    request: MatchStatusRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    try:
        return innings_service.update_match_status(db, match_id, request.status)
    except ScoringError as e:
        raise_http(e)


@router.post("/{match_id}/innings", response_model=InningsStateResponse)
def start_innings(
    match_id: int,
    request: StartInningsRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    """Start an innings with its batting order and opening bowler"""
    try:
        innings = innings_service.start_innings(
            db,
            match_id,
            innings_number=request.innings_number,
            batting_order=request.batting_order,
            initial_bowler_id=request.initial_bowler_id,
            batting_team_id=request.batting_team_id,
            wicket_keeper_id=request.wicket_keeper_id,
        )
        return innings_state_response(db, innings)
    except ScoringError as e:
        raise_http(e)


@router.get("/{match_id}/innings", response_model=List[InningsSummary])
def list_innings(match_id: int, db: Session = Depends(get_db)):
    try:
        return innings_service.list_match_innings(db, match_id)
    except ScoringError as e:
        raise_http(e)


def _snapshot(result: BallResult, player_id):
    if player_id is None:
        return None
    ledger = result.state.ledgers.get(player_id)
    return PlayerStatusResponse.model_validate(ledger) if ledger else None


@router.patch("/{match_id}/innings/{innings_id}", response_model=BallResultResponse)
def apply_ball(
    match_id: int,
    innings_id: int,
    request: BallRequest,
    service: ScoringService = Depends(get_scoring_service),
    admin: Admin = Depends(get_current_admin),
):
    """
    Apply one ball outcome to an innings.

    The innings, match and player figures are updated in one transaction;
    subscribers of the live feed are notified once it has committed.
    """
    command = BallCommand(
        outcome=request.outcome,
        custom_outcome=request.custom_outcome.model_dump() if request.custom_outcome else None,
        bowler_id=request.bowler_id,
        fielder_id=request.fielder_id,
        dismissal_type=request.dismissal_type,
        next_batsman_id=request.next_batsman_id,
        next_batsman_role=request.next_batsman_role,
    )
    try:
        result = service.apply_ball(innings_id, command, match_id=match_id)
    except ScoringError as e:
        raise_http(e)

    match = result.state.match
    return BallResultResponse(
        innings=result.state.to_dict(),
        commentary=result.commentary.to_dict(),
        bowler=_snapshot(result, result.bowler_id),
        striker=_snapshot(result, result.striker_id),
        non_striker=_snapshot(result, result.non_striker_id),
        fielder=_snapshot(result, result.fielder_id),
        dismissed=_snapshot(result, result.dismissed_id),
        maiden=result.maiden,
        innings_completed=result.innings_completed,
        match_completed=result.match_completed,
        match_status=match.status,
        winner_id=match.winner_id,
        is_tie=match.is_tie,
        result_summary=match.result_summary,
    )


async def _wait_for_disconnect(websocket: WebSocket):
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


@router.websocket("/{match_id}/live")
async def live_feed(
    websocket: WebSocket,
    match_id: int,
    feed: Broadcaster = Depends(get_broadcaster),
):
    """Stream innings-updated events for a match until the client goes away"""
    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = feed.subscribe(QueueListener(asyncio.get_running_loop(), queue), match_id)
    await websocket.accept()
    logger.info("Live feed opened for match %s", match_id)

    receiver = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        while True:
            getter = asyncio.create_task(queue.get())
            done, _ = await asyncio.wait({getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if getter not in done:
                getter.cancel()
                break
            await websocket.send_json(getter.result())
    except WebSocketDisconnect:
        pass
    finally:
        receiver.cancel()
        unsubscribe()
        logger.info("Live feed closed for match %s", match_id)

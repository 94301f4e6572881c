"""
Innings read endpoints - current state and scorecard
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from livescore.database import get_db
from livescore.engine.errors import ScoringError
from livescore.services import innings as innings_service
from livescore.api.match import raise_http, innings_state_response
from livescore.api.schemas import InningsStateResponse, ScorecardResponse

router = APIRouter(prefix="/innings", tags=["Innings"])


@router.get("/{innings_id}", response_model=InningsStateResponse)
def get_innings(innings_id: int, db: Session = Depends(get_db)):
    """Full innings state: score, crease, bowler and recent commentary"""
    try:
        innings = innings_service.get_innings(db, innings_id)
        return innings_state_response(db, innings)
    except ScoringError as e:
        raise_http(e)


@router.get("/{innings_id}/scorecard", response_model=ScorecardResponse)
def get_scorecard(innings_id: int, db: Session = Depends(get_db)):
    try:
        return innings_service.scorecard(db, innings_id)
    except ScoringError as e:
        raise_http(e)

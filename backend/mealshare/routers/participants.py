"""Participant and default-payor API routes."""
import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from mealshare.database import get_db
from mealshare.errors import NotFoundError
from mealshare.models.participant import Participant, ParticipantDefaultPayor
from mealshare.models.user import User
from mealshare.schemas.participant import (
    DefaultPayorOut,
    DefaultPayorSet,
    ParticipantCreate,
    ParticipantOut,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_user(db: Session, user_id: str) -> None:
    if not db.query(User.user_id).filter(User.user_id == user_id).first():
        raise NotFoundError(f"User {user_id} not found")


def _get_participant(db: Session, participant_id: str) -> Participant:
    participant = db.query(Participant).filter(Participant.participant_id == participant_id).first()
    if not participant:
        raise NotFoundError("Participant not found")
    return participant


@router.post("/", response_model=ParticipantOut, status_code=status.HTTP_201_CREATED)
def create_participant(payload: ParticipantCreate, db: Session = Depends(get_db)):
    """Create a participant owned by a user, optionally with a default payor."""
    _require_user(db, payload.owner_user_id)
    participant = Participant(owner_user_id=payload.owner_user_id, display_name=payload.display_name)
    db.add(participant)
    db.flush()
    if payload.default_payor_user_id:
        _require_user(db, payload.default_payor_user_id)
        db.add(ParticipantDefaultPayor(
            participant_id=participant.participant_id,
            payor_user_id=payload.default_payor_user_id,
        ))
    db.commit()
    db.refresh(participant)
    logger.info("Created participant %s owned by %s", participant.participant_id, participant.owner_user_id)
    return participant


@router.get("/", response_model=list[ParticipantOut])
def list_participants(owner_user_id: str | None = None, db: Session = Depends(get_db)):
    """List participants, optionally only those owned by one user."""
    query = db.query(Participant)
    if owner_user_id:
        query = query.filter(Participant.owner_user_id == owner_user_id)
    return query.order_by(Participant.created_at).all()


@router.put("/{participant_id}/default-payor", response_model=DefaultPayorOut)
def set_default_payor(participant_id: str, payload: DefaultPayorSet, db: Session = Depends(get_db)):
    """Set (or replace) who pays for this participant when no event override exists."""
    _get_participant(db, participant_id)
    _require_user(db, payload.payor_user_id)
    row = db.query(ParticipantDefaultPayor).filter(ParticipantDefaultPayor.participant_id == participant_id).first()
    if row:
        row.payor_user_id = payload.payor_user_id
    else:
        row = ParticipantDefaultPayor(participant_id=participant_id, payor_user_id=payload.payor_user_id)
        db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Default payor of participant %s set to %s", participant_id, payload.payor_user_id)
    return row


@router.delete("/{participant_id}/default-payor", status_code=status.HTTP_204_NO_CONTENT)
def clear_default_payor(participant_id: str, db: Session = Depends(get_db)):
    _get_participant(db, participant_id)
    db.query(ParticipantDefaultPayor).filter(ParticipantDefaultPayor.participant_id == participant_id).delete()
    db.commit()
    logger.info("Default payor of participant %s cleared", participant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Event lifecycle API routes — strict transitions and administrative force-set."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mealshare.database import get_db
from mealshare.schemas.event import StateChangeOut, StateChangeRequest
from mealshare.services import event_lifecycle

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}/transition", response_model=StateChangeOut)
def transition_event(event_id: str, payload: StateChangeRequest, db: Session = Depends(get_db)):
    """Advance one step (DRAFT→OPEN→LOCKED→COMPLETED); locking finalizes charges."""
    event = event_lifecycle.transition_event(db, event_id, payload.target_state)
    return StateChangeOut(new_state=event.state)


@router.post("/{event_id}/state", response_model=StateChangeOut)
def set_event_state(event_id: str, payload: StateChangeRequest, db: Session = Depends(get_db)):
    """Force any state. Resets are refused while paid payment links exist."""
    event = event_lifecycle.set_event_state(db, event_id, payload.target_state)
    return StateChangeOut(new_state=event.state)

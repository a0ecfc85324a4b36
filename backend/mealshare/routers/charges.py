"""Charge API routes — live preview and the finalized snapshot."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mealshare.database import get_db
from mealshare.errors import NotFoundError
from mealshare.models.event import Event
from mealshare.schemas.charges import EventChargeOut, EventChargesResult
from mealshare.services.charge_engine import compute_event_charges
from mealshare.services.event_charges import list_event_charges

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{event_id}/charges-preview", response_model=EventChargesResult)
def preview_charges(event_id: str, db: Session = Depends(get_db)):
    """Compute charges from the event's current state without persisting anything."""
    return compute_event_charges(db, event_id)


@router.get("/{event_id}/charges", response_model=list[EventChargeOut])
def get_finalized_charges(event_id: str, db: Session = Depends(get_db)):
    """Finalized per-payor charges written when the event was locked/completed."""
    if not db.query(Event.event_id).filter(Event.event_id == event_id).first():
        raise NotFoundError("Event not found")
    return list_event_charges(db, event_id)

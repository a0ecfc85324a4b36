"""EventCharge repository — the persisted, finalized charge snapshot."""
import logging
from typing import Iterable

from sqlalchemy.orm import Session

from mealshare.models.event import Event
from mealshare.models.event_charge import EventCharge
from mealshare.models.user import User
from mealshare.schemas.charges import EventChargeOut, PayorChargeOut, PayorSummary

logger = logging.getLogger(__name__)


def delete_event_charges(db: Session, event_id: str) -> int:
    """Delete every charge row of the event (inside the caller's transaction)."""
    return db.query(EventCharge).filter(EventCharge.event_id == event_id).delete(synchronize_session="fetch")


def replace_event_charges(
    db: Session,
    event_id: str,
    payor_summaries: Iterable[PayorSummary],
    finalized_at_utc: str,
) -> list[EventCharge]:
    """Replace the event's snapshot: delete all rows, insert one per payor.

    Never diffs against the previous snapshot, so no stale payor row survives a
    recompute. Does not commit; the lifecycle commits it together with the
    state change.
    """
    removed = delete_event_charges(db, event_id)
    charges = [
        EventCharge(
            event_id=event_id,
            payor_user_id=summary.payor_user_id,
            total_irr=summary.total_irr,
            finalized_at_utc=finalized_at_utc,
        )
        for summary in payor_summaries
    ]
    db.add_all(charges)
    logger.info("Replaced charges for event %s: removed %d, inserted %d", event_id, removed, len(charges))
    return charges


def list_event_charges(db: Session, event_id: str) -> list[EventChargeOut]:
    """Finalized charges of an event joined with the payor's email and name."""
    rows = (
        db.query(EventCharge, User.email, User.display_name)
        .outerjoin(User, User.user_id == EventCharge.payor_user_id)
        .filter(EventCharge.event_id == event_id)
        .order_by(EventCharge.payor_user_id)
        .all()
    )
    return [
        EventChargeOut(
            event_id=charge.event_id,
            payor_user_id=charge.payor_user_id,
            payor_email=email,
            payor_name=display_name,
            total_irr=charge.total_irr,
            finalized_at_utc=charge.finalized_at_utc,
        )
        for charge, email, display_name in rows
    ]


def list_payor_charges(db: Session, payor_user_id: str) -> list[PayorChargeOut]:
    """Every finalized charge billed to one payor, newest finalization first."""
    rows = (
        db.query(EventCharge, Event.name, Event.state)
        .join(Event, Event.event_id == EventCharge.event_id)
        .filter(EventCharge.payor_user_id == payor_user_id)
        .order_by(EventCharge.finalized_at_utc.desc(), EventCharge.event_id)
        .all()
    )
    return [
        PayorChargeOut(
            event_id=charge.event_id,
            event_name=name,
            state=state,
            total_irr=charge.total_irr,
            finalized_at_utc=charge.finalized_at_utc,
        )
        for charge, name, state in rows
    ]

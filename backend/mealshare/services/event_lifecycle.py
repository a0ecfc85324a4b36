"""Event lifecycle controller — DRAFT → OPEN → LOCKED → COMPLETED.

Two entry points:
- ``transition_event``: strict, one legal forward step at a time. Entering
  LOCKED finalizes charges.
- ``set_event_state``: administrative force-set to any state. Resetting to
  DRAFT/OPEN drops charges and payment links unless a link is already PAID;
  setting LOCKED/COMPLETED recomputes and replaces charges.

Charge snapshot, state update and the EventStateChange ledger row are written
in one transaction under the event lock; any failure rolls all of it back.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from mealshare.errors import ConflictError, ValidationError
from mealshare.models.event import Event, EventState
from mealshare.models.event_state_change import EventStateChange, TransitionMode
from mealshare.models.payment_link import PaymentLink, PaymentLinkStatus
from mealshare.schemas.charges import PayorSummary
from mealshare.services.charge_engine import compute_event_charges
from mealshare.services.event_charges import delete_event_charges, replace_event_charges
from mealshare.services.event_guard import commit_or_conflict, lock_event, touch_event, utc_now

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[EventState, tuple[EventState, ...]] = {
    EventState.DRAFT: (EventState.OPEN,),
    EventState.OPEN: (EventState.LOCKED,),
    EventState.LOCKED: (EventState.COMPLETED,),
    EventState.COMPLETED: (),
}

CHARGE_BEARING_STATES = frozenset({EventState.LOCKED, EventState.COMPLETED})
RESET_STATES = frozenset({EventState.DRAFT, EventState.OPEN})


def parse_event_state(value) -> EventState:
    """Coerce a requested state, rejecting unknown values before any mutation."""
    if isinstance(value, EventState):
        return value
    try:
        return EventState(value)
    except ValueError:
        raise ValidationError(f"Invalid target state: {value}")


def _finalize_charges(db: Session, event: Event) -> list[PayorSummary]:
    result = compute_event_charges(db, event.event_id)
    replace_event_charges(db, event.event_id, result.payor_summaries, utc_now().isoformat())
    return result.payor_summaries


def _apply_state(
    db: Session,
    event: Event,
    target: EventState,
    mode: TransitionMode,
    payor_summaries: Optional[list[PayorSummary]],
) -> None:
    from_state = EventState(event.state)
    event.state = target
    touch_event(event)
    db.add(EventStateChange(
        event_id=event.event_id,
        from_state=from_state.value,
        to_state=target.value,
        mode=mode,
        charges_total_irr=sum(s.total_irr for s in payor_summaries) if payor_summaries is not None else None,
        payor_count=len(payor_summaries) if payor_summaries is not None else None,
    ))


def transition_event(db: Session, event_id: str, target_state) -> Event:
    """Move the event one legal step forward; finalize charges when locking."""
    target = parse_event_state(target_state)
    try:
        event = lock_event(db, event_id)
        current = EventState(event.state)
        if target not in ALLOWED_TRANSITIONS[current]:
            raise ConflictError(f"Invalid transition from {current.value} to {target.value}")

        summaries = _finalize_charges(db, event) if target == EventState.LOCKED else None
        _apply_state(db, event, target, TransitionMode.transition, summaries)
        commit_or_conflict(db)
    except Exception:
        db.rollback()
        raise

    db.refresh(event)
    logger.info("Event %s transitioned %s -> %s", event_id, current.value, target.value)
    return event


def set_event_state(db: Session, event_id: str, target_state) -> Event:
    """Administrative force-set, including backward moves guarded by paid links."""
    target = parse_event_state(target_state)
    try:
        event = lock_event(db, event_id)
        current = EventState(event.state)
        summaries = None

        if target in RESET_STATES:
            paid = (
                db.query(PaymentLink.payment_link_id)
                .filter(PaymentLink.event_id == event_id, PaymentLink.status == PaymentLinkStatus.PAID)
                .first()
            )
            if paid:
                raise ConflictError("cannot reset event state because paid payment links exist")
            removed_charges = delete_event_charges(db, event_id)
            removed_links = (
                db.query(PaymentLink)
                .filter(PaymentLink.event_id == event_id)
                .delete(synchronize_session="fetch")
            )
            logger.info(
                "Reset of event %s removed %d charges and %d payment links",
                event_id, removed_charges, removed_links,
            )
        elif target in CHARGE_BEARING_STATES:
            summaries = _finalize_charges(db, event)

        _apply_state(db, event, target, TransitionMode.force, summaries)
        commit_or_conflict(db)
    except Exception:
        db.rollback()
        raise

    db.refresh(event)
    logger.info("Event %s force-set %s -> %s", event_id, current.value, target.value)
    return event

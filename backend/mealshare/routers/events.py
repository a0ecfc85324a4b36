"""Event API routes — events, hosts, attendance, payor overrides and shared costs."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from mealshare.database import get_db
from mealshare.errors import ConflictError, NotFoundError, ValidationError
from mealshare.models.event import Event, EventHost, EventState
from mealshare.models.event_participant import AttendanceStatus, EventParticipant, EventPayorOverride
from mealshare.models.participant import Participant
from mealshare.models.shared_cost import SharedCost, SplitMethod
from mealshare.models.user import User
from mealshare.schemas.event import (
    AttendanceUpdate,
    EventCreate,
    EventOut,
    EventParticipantAdd,
    EventParticipantOut,
    EventUpdate,
    HostAdd,
    PayorOverrideOut,
    PayorOverrideSet,
    SharedCostCreate,
    SharedCostOut,
)
from mealshare.services.event_guard import as_utc

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")
    return event


def _require_user(db: Session, user_id: str) -> None:
    if not db.query(User.user_id).filter(User.user_id == user_id).first():
        raise NotFoundError(f"User {user_id} not found")


def _parse_attendance(value: str) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("attendance_status must be ATTENDING, TENTATIVE, or DECLINED")


def _get_event_participant(db: Session, event_id: str, participant_id: str) -> EventParticipant:
    row = (
        db.query(EventParticipant)
        .filter(EventParticipant.event_id == event_id, EventParticipant.participant_id == participant_id)
        .first()
    )
    if not row:
        raise NotFoundError("Participant is not part of this event")
    return row


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    """Create an event in DRAFT with its primary host (plus any extra hosts)."""
    if as_utc(payload.cutoff_at_utc) > as_utc(payload.starts_at_utc):
        raise ValidationError("cutoff_at_utc must not be after starts_at_utc")
    host_ids = list(dict.fromkeys([payload.host_user_id] + payload.host_user_ids))
    for uid in host_ids:
        _require_user(db, uid)

    event = Event(
        name=payload.name,
        location_text=payload.location_text,
        host_user_id=payload.host_user_id,
        starts_at_utc=payload.starts_at_utc,
        cutoff_at_utc=payload.cutoff_at_utc,
        state=EventState.DRAFT,
        payor_exemption_enabled=payload.payor_exemption_enabled,
    )
    event.hosts = [EventHost(user_id=uid) for uid in host_ids]
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) hosted by %s", event.name, event.event_id, host_ids)
    return event


@router.get("/", response_model=list[EventOut])
def list_events(state: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """List events, optionally filtered by lifecycle state."""
    query = db.query(Event)
    if state:
        try:
            query = query.filter(Event.state == EventState(state))
        except ValueError:
            raise ValidationError(f"Invalid state: {state}")
    return query.order_by(Event.starts_at_utc).all()


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    """Fetch a single event by ID with its hosts."""
    return _get_event(db, event_id)


@router.patch("/{event_id}", response_model=EventOut)
def update_event(event_id: str, payload: EventUpdate, db: Session = Depends(get_db)):
    """Partial update of event details and the host exemption flag."""
    event = _get_event(db, event_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(event, field, value)
    if as_utc(event.cutoff_at_utc) > as_utc(event.starts_at_utc):
        db.rollback()
        raise ValidationError("cutoff_at_utc must not be after starts_at_utc")
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s to version %d", event_id, event.version)
    return event


@router.post("/{event_id}/hosts", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def add_host(event_id: str, payload: HostAdd, db: Session = Depends(get_db)):
    event = _get_event(db, event_id)
    _require_user(db, payload.user_id)
    if any(h.user_id == payload.user_id for h in event.hosts):
        raise ConflictError("User is already a host of this event")
    event.hosts.append(EventHost(user_id=payload.user_id))
    db.commit()
    db.refresh(event)
    logger.info("User %s added as host of event %s", payload.user_id, event_id)
    return event


@router.delete("/{event_id}/hosts/{user_id}", response_model=EventOut)
def remove_host(event_id: str, user_id: str, db: Session = Depends(get_db)):
    event = _get_event(db, event_id)
    host = next((h for h in event.hosts if h.user_id == user_id), None)
    if not host:
        raise NotFoundError("User is not a host of this event")
    event.hosts.remove(host)
    db.commit()
    db.refresh(event)
    logger.info("User %s removed as host of event %s", user_id, event_id)
    return event


@router.post("/{event_id}/participants", response_model=EventParticipantOut, status_code=status.HTTP_201_CREATED)
def add_event_participant(event_id: str, payload: EventParticipantAdd, db: Session = Depends(get_db)):
    """Invite a participant; the managing user defaults to the participant's owner."""
    _get_event(db, event_id)
    participant = db.query(Participant).filter(Participant.participant_id == payload.participant_id).first()
    if not participant:
        raise NotFoundError("Participant not found")
    attendance = _parse_attendance(payload.attendance_status)
    exists = (
        db.query(EventParticipant.participant_id)
        .filter(EventParticipant.event_id == event_id, EventParticipant.participant_id == payload.participant_id)
        .first()
    )
    if exists:
        raise ConflictError("Participant is already part of this event")
    managing_user_id = payload.managing_user_id or participant.owner_user_id
    _require_user(db, managing_user_id)

    row = EventParticipant(
        event_id=event_id,
        participant_id=payload.participant_id,
        managing_user_id=managing_user_id,
        attendance_status=attendance,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Participant %s added to event %s as %s", payload.participant_id, event_id, attendance.value)
    return row


@router.get("/{event_id}/participants", response_model=list[EventParticipantOut])
def list_event_participants(event_id: str, db: Session = Depends(get_db)):
    _get_event(db, event_id)
    return (
        db.query(EventParticipant)
        .filter(EventParticipant.event_id == event_id)
        .order_by(EventParticipant.created_at, EventParticipant.participant_id)
        .all()
    )


@router.patch("/{event_id}/participants/{participant_id}/attendance", response_model=EventParticipantOut)
def set_attendance(event_id: str, participant_id: str, payload: AttendanceUpdate, db: Session = Depends(get_db)):
    """Set a participant's attendance; only ATTENDING participants are charged."""
    row = _get_event_participant(db, event_id, participant_id)
    row.attendance_status = _parse_attendance(payload.attendance_status)
    db.commit()
    db.refresh(row)
    logger.info("Participant %s attendance in event %s set to %s", participant_id, event_id, payload.attendance_status)
    return row


@router.put("/{event_id}/payor-overrides/{participant_id}", response_model=PayorOverrideOut)
def set_payor_override(event_id: str, participant_id: str, payload: PayorOverrideSet, db: Session = Depends(get_db)):
    """Bill this participant's share in this event to a specific user."""
    _get_event_participant(db, event_id, participant_id)
    _require_user(db, payload.payor_user_id)
    row = (
        db.query(EventPayorOverride)
        .filter(EventPayorOverride.event_id == event_id, EventPayorOverride.participant_id == participant_id)
        .first()
    )
    if row:
        row.payor_user_id = payload.payor_user_id
    else:
        row = EventPayorOverride(event_id=event_id, participant_id=participant_id, payor_user_id=payload.payor_user_id)
        db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Payor override for %s in event %s set to %s", participant_id, event_id, payload.payor_user_id)
    return row


@router.get("/{event_id}/payor-overrides", response_model=list[PayorOverrideOut])
def list_payor_overrides(event_id: str, db: Session = Depends(get_db)):
    _get_event(db, event_id)
    return (
        db.query(EventPayorOverride)
        .filter(EventPayorOverride.event_id == event_id)
        .order_by(EventPayorOverride.created_at, EventPayorOverride.participant_id)
        .all()
    )


@router.delete("/{event_id}/payor-overrides/{participant_id}", status_code=status.HTTP_204_NO_CONTENT)
def clear_payor_override(event_id: str, participant_id: str, db: Session = Depends(get_db)):
    _get_event(db, event_id)
    db.query(EventPayorOverride).filter(
        EventPayorOverride.event_id == event_id,
        EventPayorOverride.participant_id == participant_id,
    ).delete()
    db.commit()
    logger.info("Payor override for %s in event %s cleared", participant_id, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/shared-costs", response_model=SharedCostOut, status_code=status.HTTP_201_CREATED)
def create_shared_cost(event_id: str, payload: SharedCostCreate, db: Session = Depends(get_db)):
    """Add an event-level cost split equally among chargeable attendees."""
    _get_event(db, event_id)
    if payload.amount_irr < 0:
        raise ValidationError("amount_irr must be a non-negative integer")
    try:
        split_method = SplitMethod(payload.split_method)
    except ValueError:
        raise ValidationError(f"Unsupported split method: {payload.split_method}")

    cost = SharedCost(event_id=event_id, name=payload.name, amount_irr=payload.amount_irr, split_method=split_method)
    db.add(cost)
    db.commit()
    db.refresh(cost)
    logger.info("Shared cost %s (%d) added to event %s", cost.shared_cost_id, cost.amount_irr, event_id)
    return cost


@router.get("/{event_id}/shared-costs", response_model=list[SharedCostOut])
def list_shared_costs(event_id: str, db: Session = Depends(get_db)):
    _get_event(db, event_id)
    return (
        db.query(SharedCost)
        .filter(SharedCost.event_id == event_id)
        .order_by(SharedCost.created_at, SharedCost.shared_cost_id)
        .all()
    )


@router.delete("/{event_id}/shared-costs/{shared_cost_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shared_cost(event_id: str, shared_cost_id: str, db: Session = Depends(get_db)):
    deleted = db.query(SharedCost).filter(
        SharedCost.event_id == event_id,
        SharedCost.shared_cost_id == shared_cost_id,
    ).delete()
    if not deleted:
        raise NotFoundError("Shared cost not found")
    db.commit()
    logger.info("Shared cost %s removed from event %s", shared_cost_id, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Selection service — participants' menu orders and how they are shared.

Writes only succeed while the event is OPEN and before its cutoff. The state
check runs after the event row is locked, inside the same transaction as the
write, and every write bumps the event version so a finalization computed on
the old selections cannot commit afterwards.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from mealshare.config import settings
from mealshare.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from mealshare.models.event import Event, EventState
from mealshare.models.event_participant import EventParticipant
from mealshare.models.menu import Menu, MenuItem
from mealshare.models.selection import Selection, SelectionAllocation, ShareType
from mealshare.services.event_guard import as_utc, commit_or_conflict, lock_event, touch_event, utc_now

logger = logging.getLogger(__name__)


def _validate_payload(quantity, participant_ids: list[str]) -> list[str]:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise ValidationError("integer quantity >= 1 is required")
    if not participant_ids:
        raise ValidationError("participant_ids must be a non-empty list")
    return list(dict.fromkeys(participant_ids))


def _ensure_editable(event: Event) -> None:
    """Event must be OPEN and, when enforced, before its cutoff."""
    if EventState(event.state) != EventState.OPEN:
        raise ConflictError("event is not open")
    if settings.ENFORCE_SELECTION_CUTOFF and utc_now() >= as_utc(event.cutoff_at_utc):
        raise ConflictError("cutoff passed")


def _ensure_manages(db: Session, event_id: str, actor_user_id: str, participant_ids: list[str]) -> None:
    manageable = {
        pid for (pid,) in db.query(EventParticipant.participant_id).filter(
            EventParticipant.event_id == event_id,
            EventParticipant.managing_user_id == actor_user_id,
            EventParticipant.participant_id.in_(participant_ids),
        ).all()
    }
    if any(pid not in manageable for pid in participant_ids):
        raise ForbiddenError("cannot manage one or more participants")


def _allocate(db: Session, selection: Selection, participant_ids: list[str]) -> None:
    # Flush the removals first: (selection_id, participant_id) is unique.
    if selection.allocations:
        selection.allocations.clear()
        db.flush()
    selection.allocations.extend(
        SelectionAllocation(participant_id=pid, share_type=ShareType.EQUAL)
        for pid in participant_ids
    )


def _get_selection(db: Session, selection_id: str) -> Selection:
    selection = db.query(Selection).filter(Selection.selection_id == selection_id).first()
    if not selection:
        raise NotFoundError("Selection not found")
    return selection


def create_selection(
    db: Session,
    event_id: str,
    actor_user_id: str,
    menu_item_id: str,
    quantity: int,
    participant_ids: list[str],
    note: Optional[str] = None,
) -> Selection:
    """Order ``quantity`` of a menu item, shared equally by ``participant_ids``."""
    participant_ids = _validate_payload(quantity, participant_ids)
    try:
        event = lock_event(db, event_id)
        _ensure_editable(event)

        item = (
            db.query(MenuItem.menu_item_id)
            .join(Menu, Menu.menu_id == MenuItem.menu_id)
            .filter(MenuItem.menu_item_id == menu_item_id, Menu.event_id == event_id)
            .first()
        )
        if not item:
            raise ValidationError("invalid menu_item_id")
        _ensure_manages(db, event_id, actor_user_id, participant_ids)

        selection = Selection(
            event_id=event_id,
            menu_item_id=menu_item_id,
            quantity=quantity,
            created_by_user_id=actor_user_id,
            note=note,
        )
        _allocate(db, selection, participant_ids)
        db.add(selection)
        touch_event(event)
        commit_or_conflict(db)
    except Exception:
        db.rollback()
        raise

    db.refresh(selection)
    logger.info("Selection %s created in event %s by %s", selection.selection_id, event_id, actor_user_id)
    return selection


def update_selection(
    db: Session,
    selection_id: str,
    actor_user_id: str,
    quantity: int,
    participant_ids: list[str],
) -> Selection:
    """Change the quantity and replace all allocations of a selection."""
    participant_ids = _validate_payload(quantity, participant_ids)
    try:
        selection = _get_selection(db, selection_id)
        if selection.created_by_user_id != actor_user_id:
            raise ForbiddenError("Only the creator may modify this selection")
        event = lock_event(db, selection.event_id)
        _ensure_editable(event)
        _ensure_manages(db, selection.event_id, actor_user_id, participant_ids)

        selection.quantity = quantity
        _allocate(db, selection, participant_ids)
        touch_event(event)
        commit_or_conflict(db)
    except Exception:
        db.rollback()
        raise

    db.refresh(selection)
    logger.info("Selection %s updated by %s", selection_id, actor_user_id)
    return selection


def delete_selection(db: Session, selection_id: str, actor_user_id: str) -> None:
    try:
        selection = _get_selection(db, selection_id)
        if selection.created_by_user_id != actor_user_id:
            raise ForbiddenError("Only the creator may delete this selection")
        event = lock_event(db, selection.event_id)
        _ensure_editable(event)

        db.delete(selection)
        touch_event(event)
        commit_or_conflict(db)
    except Exception:
        db.rollback()
        raise
    logger.info("Selection %s deleted by %s", selection_id, actor_user_id)


def list_selections(db: Session, event_id: str) -> list[Selection]:
    if not db.query(Event.event_id).filter(Event.event_id == event_id).first():
        raise NotFoundError("Event not found")
    return (
        db.query(Selection)
        .filter(Selection.event_id == event_id)
        .order_by(Selection.created_at, Selection.selection_id)
        .all()
    )

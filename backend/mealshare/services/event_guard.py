"""Per-event serialization and UTC helpers shared by mutating services.

Writers serialize on the event row: it is read with SELECT ... FOR UPDATE
(a row lock on PostgreSQL, a no-op on SQLite) and ``Event.version`` is the
mapper's version counter, so a writer holding a stale version fails its
UPDATE with StaleDataError. Callers must dirty the event (``touch_event``) in
every write transaction so the version check always runs.
"""
from datetime import datetime

import pytz
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from mealshare.errors import ConflictError, NotFoundError
from mealshare.models.event import Event

CONCURRENT_MODIFICATION = "event was modified concurrently; reload and retry"


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a stored datetime to aware UTC (SQLite hands back naive values)."""
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)


def lock_event(db: Session, event_id: str) -> Event:
    """Load the event row for update with fresh column values, or 404."""
    event = (
        db.query(Event)
        .filter(Event.event_id == event_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not event:
        raise NotFoundError("Event not found")
    return event


def touch_event(event: Event) -> None:
    """Mark the event modified so the flush bumps and checks its version."""
    event.updated_at = utc_now()



def commit_or_conflict(db: Session) -> None:
    """Commit; a failed version check rolls back and becomes a 409."""
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConflictError(CONCURRENT_MODIFICATION) from exc

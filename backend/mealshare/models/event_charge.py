"""EventCharge ORM model — the finalized per-payor charge snapshot."""
from sqlalchemy import Column, String, Integer, ForeignKey
from mealshare.database import Base


class EventCharge(Base):
    """One row per (event, payor). Replaced wholesale on every finalization."""

    __tablename__ = "event_charges"

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    payor_user_id = Column(String(36), primary_key=True)  # may be a participant id when nothing resolves
    total_irr = Column(Integer, nullable=False)
    finalized_at_utc = Column(String(40), nullable=False)  # ISO-8601

"""EventStateChange ORM model — ledger of lifecycle moves."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from mealshare.database import Base


class TransitionMode(str, enum.Enum):
    transition = "transition"
    force = "force"


class EventStateChange(Base):
    __tablename__ = "event_state_changes"

    change_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    from_state = Column(String(20), nullable=False)
    to_state = Column(String(20), nullable=False)
    mode = Column(SAEnum(TransitionMode, native_enum=False, length=20), nullable=False)
    charges_total_irr = Column(Integer, nullable=True)
    payor_count = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

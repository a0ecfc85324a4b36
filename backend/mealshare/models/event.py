"""Event and EventHost ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mealshare.database import Base


class EventState(str, enum.Enum):
    DRAFT = "DRAFT"
    OPEN = "OPEN"
    LOCKED = "LOCKED"
    COMPLETED = "COMPLETED"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    location_text = Column(String(500), nullable=False, default="")
    host_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    starts_at_utc = Column(DateTime(timezone=True), nullable=False)
    cutoff_at_utc = Column(DateTime(timezone=True), nullable=False)
    state = Column(SAEnum(EventState, native_enum=False, length=20), nullable=False, default=EventState.DRAFT)
    payor_exemption_enabled = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    hosts = relationship("EventHost", back_populates="event", cascade="all, delete-orphan")

    # Every UPDATE carries "WHERE version = <loaded>"; a stale writer gets StaleDataError.
    __mapper_args__ = {"version_id_col": version}


class EventHost(Base):
    __tablename__ = "event_hosts"

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="hosts")

"""Participant and ParticipantDefaultPayor ORM models."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from mealshare.database import Base


class Participant(Base):
    """A person who eats. Owned by a user account (e.g. a parent owns a child)."""

    __tablename__ = "participants"

    participant_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    display_name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ParticipantDefaultPayor(Base):
    """Event-independent payor for a participant; outranked by an event override."""

    __tablename__ = "participant_default_payors"

    participant_id = Column(String(36), ForeignKey("participants.participant_id"), primary_key=True)
    payor_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

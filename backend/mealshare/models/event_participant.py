"""EventParticipant and EventPayorOverride ORM models."""
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from mealshare.database import Base


class AttendanceStatus(str, enum.Enum):
    ATTENDING = "ATTENDING"
    TENTATIVE = "TENTATIVE"
    DECLINED = "DECLINED"


class EventParticipant(Base):
    """Links a participant to an event. Only ATTENDING rows accrue charges."""

    __tablename__ = "event_participants"

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    participant_id = Column(String(36), ForeignKey("participants.participant_id"), primary_key=True)
    managing_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    attendance_status = Column(
        SAEnum(AttendanceStatus, native_enum=False, length=20),
        nullable=False,
        default=AttendanceStatus.ATTENDING,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class EventPayorOverride(Base):
    __tablename__ = "event_payor_overrides"

    event_id = Column(String(36), ForeignKey("events.event_id"), primary_key=True)
    participant_id = Column(String(36), ForeignKey("participants.participant_id"), primary_key=True)
    payor_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

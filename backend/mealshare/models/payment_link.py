"""PaymentLink ORM model.

Links are issued and paid elsewhere; the lifecycle only reads ``status`` to
refuse resets once money has moved.
"""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from mealshare.database import Base


class PaymentLinkStatus(str, enum.Enum):
    OPEN = "OPEN"
    PAID = "PAID"
    VOID = "VOID"


class PaymentLink(Base):
    __tablename__ = "payment_links"

    payment_link_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    payor_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    token = Column(String(64), nullable=False, unique=True, default=lambda: str(uuid.uuid4()))
    locked_amount_irr = Column(Integer, nullable=True)
    status = Column(SAEnum(PaymentLinkStatus, native_enum=False, length=20), nullable=False, default=PaymentLinkStatus.OPEN)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

"""SharedCost ORM model — event-level costs such as a venue fee."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from mealshare.database import Base


class SplitMethod(str, enum.Enum):
    EQUAL_ALL_ATTENDING = "EQUAL_ALL_ATTENDING"


class SharedCost(Base):
    __tablename__ = "shared_costs"

    shared_cost_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    name = Column(String(255), nullable=False)
    amount_irr = Column(Integer, nullable=False)
    split_method = Column(
        SAEnum(SplitMethod, native_enum=False, length=40),
        nullable=False,
        default=SplitMethod.EQUAL_ALL_ATTENDING,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

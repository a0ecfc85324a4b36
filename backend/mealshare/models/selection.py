"""Selection and SelectionAllocation ORM models."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mealshare.database import Base


class ShareType(str, enum.Enum):
    EQUAL = "EQUAL"
    WEIGHTED = "WEIGHTED"


class Selection(Base):
    """An order of ``quantity`` units of one menu item, shared by its allocations."""

    __tablename__ = "selections"

    selection_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    menu_item_id = Column(String(36), ForeignKey("menu_items.menu_item_id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    created_by_user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    note = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    allocations = relationship(
        "SelectionAllocation",
        back_populates="selection",
        cascade="all, delete-orphan",
        order_by="SelectionAllocation.created_at",
    )


class SelectionAllocation(Base):
    __tablename__ = "selection_allocations"
    __table_args__ = (UniqueConstraint("selection_id", "participant_id", name="uq_selection_participant"),)

    allocation_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    selection_id = Column(String(36), ForeignKey("selections.selection_id"), nullable=False)
    participant_id = Column(String(36), ForeignKey("participants.participant_id"), nullable=False)
    share_type = Column(SAEnum(ShareType, native_enum=False, length=20), nullable=False, default=ShareType.EQUAL)
    share_weight = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    selection = relationship("Selection", back_populates="allocations")

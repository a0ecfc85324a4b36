"""Menu and MenuItem ORM models."""
import uuid
from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mealshare.database import Base


class Menu(Base):
    __tablename__ = "menus"

    menu_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False)
    name = Column(String(150), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship("MenuItem", back_populates="menu", cascade="all, delete-orphan")


class MenuItem(Base):
    __tablename__ = "menu_items"

    menu_item_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    menu_id = Column(String(36), ForeignKey("menus.menu_id"), nullable=False)
    name = Column(String(255), nullable=False)
    price_irr = Column(Integer, nullable=False)
    category = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    menu = relationship("Menu", back_populates="items")

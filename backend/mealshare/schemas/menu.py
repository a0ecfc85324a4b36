"""Pydantic schemas for Menus and MenuItems."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class MenuCreate(BaseModel):
    name: str
    sort_order: int = 0


class MenuOut(BaseModel):
    menu_id: str
    event_id: str
    name: str
    sort_order: int

    model_config = {"from_attributes": True}


class MenuItemCreate(BaseModel):
    name: str
    price_irr: int
    category: Optional[str] = None


class MenuItemOut(BaseModel):
    menu_item_id: str
    menu_id: str
    name: str
    price_irr: int
    category: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

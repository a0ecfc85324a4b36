"""Pydantic schemas for Selections."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from mealshare.models.selection import ShareType


class SelectionCreate(BaseModel):
    menu_item_id: str
    quantity: int
    participant_ids: list[str]
    note: Optional[str] = None


class SelectionUpdate(BaseModel):
    quantity: int
    participant_ids: list[str]


class AllocationOut(BaseModel):
    participant_id: str
    share_type: ShareType

    model_config = {"from_attributes": True}


class SelectionOut(BaseModel):
    selection_id: str
    event_id: str
    menu_item_id: str
    quantity: int
    created_by_user_id: str
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    allocations: list[AllocationOut] = []

    model_config = {"from_attributes": True}


# Rebuild SelectionOut now that AllocationOut is defined
SelectionOut.model_rebuild()

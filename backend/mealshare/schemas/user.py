"""Pydantic schemas for Users."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserCreate(BaseModel):
    email: str
    display_name: str


class UserOut(BaseModel):
    user_id: str
    email: str
    display_name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

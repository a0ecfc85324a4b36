"""Pydantic schemas for Participants and default payors."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class ParticipantCreate(BaseModel):
    owner_user_id: str
    display_name: str
    default_payor_user_id: Optional[str] = None


class ParticipantOut(BaseModel):
    participant_id: str
    owner_user_id: str
    display_name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DefaultPayorSet(BaseModel):
    payor_user_id: str


class DefaultPayorOut(BaseModel):
    participant_id: str
    payor_user_id: str

    model_config = {"from_attributes": True}

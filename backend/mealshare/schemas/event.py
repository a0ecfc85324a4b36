"""Pydantic schemas for Events and their sub-resources."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from mealshare.models.event import EventState
from mealshare.models.event_participant import AttendanceStatus
from mealshare.models.shared_cost import SplitMethod


class EventCreate(BaseModel):
    name: str
    location_text: str = ""
    host_user_id: str
    starts_at_utc: datetime
    cutoff_at_utc: datetime
    payor_exemption_enabled: bool = False
    host_user_ids: list[str] = []


class EventUpdate(BaseModel):
    name: Optional[str] = None
    location_text: Optional[str] = None
    starts_at_utc: Optional[datetime] = None
    cutoff_at_utc: Optional[datetime] = None
    payor_exemption_enabled: Optional[bool] = None


class EventOut(BaseModel):
    event_id: str
    name: str
    location_text: str
    host_user_id: str
    starts_at_utc: datetime
    cutoff_at_utc: datetime
    state: EventState
    payor_exemption_enabled: bool
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    hosts: list[HostOut] = []

    model_config = {"from_attributes": True}


class HostAdd(BaseModel):
    user_id: str


class HostOut(BaseModel):
    user_id: str

    model_config = {"from_attributes": True}


class EventParticipantAdd(BaseModel):
    participant_id: str
    managing_user_id: Optional[str] = None  # defaults to the participant's owner
    attendance_status: str = AttendanceStatus.ATTENDING.value


class AttendanceUpdate(BaseModel):
    attendance_status: str


class EventParticipantOut(BaseModel):
    event_id: str
    participant_id: str
    managing_user_id: str
    attendance_status: AttendanceStatus

    model_config = {"from_attributes": True}


class PayorOverrideSet(BaseModel):
    payor_user_id: str


class PayorOverrideOut(BaseModel):
    event_id: str
    participant_id: str
    payor_user_id: str

    model_config = {"from_attributes": True}


class SharedCostCreate(BaseModel):
    name: str
    amount_irr: int
    split_method: str = SplitMethod.EQUAL_ALL_ATTENDING.value


class SharedCostOut(BaseModel):
    shared_cost_id: str
    event_id: str
    name: str
    amount_irr: int
    split_method: SplitMethod

    model_config = {"from_attributes": True}


class StateChangeRequest(BaseModel):
    target_state: str


class StateChangeOut(BaseModel):
    ok: bool = True
    new_state: EventState


# Rebuild EventOut now that HostOut is defined
EventOut.model_rebuild()

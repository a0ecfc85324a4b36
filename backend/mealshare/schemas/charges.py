"""Pydantic schemas for computed and finalized charges.

All amounts are integers in the smallest currency unit.
"""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel

from mealshare.models.event import EventState


class BreakdownLine(BaseModel):
    """One participant's share of one selection or shared cost.

    Shared-cost lines carry ``selection_id = "shared:<shared_cost_id>"`` and
    ``quantity = 1``.
    """

    selection_id: str
    item_name: str
    quantity: int
    unit_price_irr: int
    share_count: int
    share_amount_irr: int


class ParticipantCharge(BaseModel):
    participant_id: str
    participant_name: str
    payor_user_id: str
    payor_email: str = ""
    total_irr: int = 0
    breakdown: list[BreakdownLine] = []


class PayorParticipantLine(BaseModel):
    participant_id: str
    participant_name: str
    amount_irr: int


class PayorSummary(BaseModel):
    payor_user_id: str
    payor_email: str
    total_irr: int = 0
    participants: list[PayorParticipantLine] = []


class SkippedCharge(BaseModel):
    """A shared cost or selection left unbilled, with the reason."""

    source_type: str  # "shared_cost" or "selection"
    source_id: str
    reason: str


class EventChargesResult(BaseModel):
    event_id: str
    participant_charges: list[ParticipantCharge] = []
    payor_summaries: list[PayorSummary] = []
    skipped: list[SkippedCharge] = []


class EventChargeOut(BaseModel):
    event_id: str
    payor_user_id: str
    payor_email: Optional[str] = None
    payor_name: Optional[str] = None
    total_irr: int
    finalized_at_utc: str


class PayorChargeOut(BaseModel):
    """One finalized charge seen from the payor's side."""

    event_id: str
    event_name: str
    state: EventState
    total_irr: int
    finalized_at_utc: str

"""Charge engine — turns an event's current state into integer charges.

Two phases:
- ``load_charge_inputs``: a fixed number of batched, read-only queries that
  snapshot everything the computation needs (no per-row round-trips).
- ``compute_charges``: a pure function over that snapshot.

Money rules:
- Every amount is an ``int`` in the smallest currency unit.
- Every split floors; the remainder is dropped, never handed to anyone. For a
  cost split ``n`` ways the unbilled loss is at most ``n - 1``.
- Bad rows (malformed amounts, nobody to charge) are skipped with a
  ``SkipReason``, logged and reported; they never abort the computation.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Any, Iterable, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mealshare.errors import EngineError, NotFoundError
from mealshare.models.event import Event, EventHost
from mealshare.models.event_participant import AttendanceStatus, EventParticipant, EventPayorOverride
from mealshare.models.menu import MenuItem
from mealshare.models.participant import Participant, ParticipantDefaultPayor
from mealshare.models.selection import Selection, SelectionAllocation
from mealshare.models.shared_cost import SharedCost, SplitMethod
from mealshare.models.user import User
from mealshare.schemas.charges import (
    BreakdownLine,
    EventChargesResult,
    ParticipantCharge,
    PayorParticipantLine,
    PayorSummary,
    SkippedCharge,
)
from mealshare.services.payor_resolution import PayorResolver, build_payor_resolver

logger = logging.getLogger(__name__)

SHARED_COST_LINE_PREFIX = "shared:"


class SkipReason(str, enum.Enum):
    malformed_amount = "malformed_amount"
    unsupported_split_method = "unsupported_split_method"
    no_chargeable_participants = "no_chargeable_participants"
    share_rounds_to_zero = "share_rounds_to_zero"
    malformed_price = "malformed_price"
    unattended_selection = "unattended_selection"
    no_fallback_participants = "no_fallback_participants"


@dataclass(frozen=True)
class ParticipantRow:
    participant_id: str
    display_name: str
    owner_user_id: str
    attendance_status: str


@dataclass(frozen=True)
class SelectionRow:
    selection_id: str
    item_name: str
    quantity: Any
    unit_price_irr: Any
    participant_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SharedCostRow:
    shared_cost_id: str
    name: str
    amount_irr: Any
    split_method: str = SplitMethod.EQUAL_ALL_ATTENDING.value


@dataclass(frozen=True)
class ChargeInputs:
    """Everything ``compute_charges`` reads, loaded before computing starts."""

    event_id: str
    payor_exemption_enabled: bool = False
    host_user_ids: frozenset[str] = frozenset()
    participants: tuple[ParticipantRow, ...] = ()
    selections: tuple[SelectionRow, ...] = ()
    shared_costs: tuple[SharedCostRow, ...] = ()
    payor_overrides: Mapping[str, str] = field(default_factory=dict)
    default_payors: Mapping[str, str] = field(default_factory=dict)
    user_emails: Mapping[str, str] = field(default_factory=dict)


def compute_chargeable_pool(
    participant_ids: Iterable[str],
    host_participant_ids: AbstractSet[str],
    exemption_enabled: bool,
) -> list[str]:
    """Drop host participants when exemption is on; keep order.

    The result may be empty. Shared costs skip on empty; selections fall back
    to the event-wide pool.
    """
    if not exemption_enabled:
        return list(participant_ids)
    return [pid for pid in participant_ids if pid not in host_participant_ids]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class _ChargeLedger:
    """Accumulates breakdown lines per participant in first-charged order."""

    def __init__(
        self,
        participants: Mapping[str, ParticipantRow],
        resolver: PayorResolver,
        user_emails: Mapping[str, str],
    ):
        self._participants = participants
        self._resolver = resolver
        self._user_emails = user_emails
        self._charges: dict[str, ParticipantCharge] = {}

    def add(self, participant_id: str, line: BreakdownLine) -> None:
        charge = self._charges.get(participant_id)
        if charge is None:
            row = self._participants.get(participant_id)
            payor_user_id = self._resolver.resolve(participant_id)
            charge = ParticipantCharge(
                participant_id=participant_id,
                participant_name=row.display_name if row else participant_id,
                payor_user_id=payor_user_id,
                payor_email=self._user_emails.get(payor_user_id, ""),
                total_irr=0,
                breakdown=[],
            )
            self._charges[participant_id] = charge
        charge.total_irr += line.share_amount_irr
        charge.breakdown.append(line)

    def participant_charges(self) -> list[ParticipantCharge]:
        return list(self._charges.values())


def summarize_by_payor(participant_charges: Iterable[ParticipantCharge]) -> list[PayorSummary]:
    """Group participant charges by resolved payor, in first-seen order."""
    summaries: dict[str, PayorSummary] = {}
    for charge in participant_charges:
        summary = summaries.get(charge.payor_user_id)
        if summary is None:
            summary = PayorSummary(
                payor_user_id=charge.payor_user_id,
                payor_email=charge.payor_email,
                total_irr=0,
                participants=[],
            )
            summaries[charge.payor_user_id] = summary
        summary.total_irr += charge.total_irr
        summary.participants.append(PayorParticipantLine(
            participant_id=charge.participant_id,
            participant_name=charge.participant_name,
            amount_irr=charge.total_irr,
        ))
    return list(summaries.values())


def compute_charges(inputs: ChargeInputs) -> EventChargesResult:
    """Apportion shared costs and selections of one event. Pure and deterministic."""
    participants = {p.participant_id: p for p in inputs.participants}
    attending = [
        p.participant_id for p in inputs.participants
        if p.attendance_status == AttendanceStatus.ATTENDING.value
    ]
    attending_set = set(attending)
    host_participant_ids = {
        p.participant_id for p in inputs.participants if p.owner_user_id in inputs.host_user_ids
    }
    exemption = inputs.payor_exemption_enabled
    event_pool = compute_chargeable_pool(attending, host_participant_ids, exemption)

    resolver = build_payor_resolver(
        inputs.payor_overrides,
        inputs.default_payors,
        {p.participant_id: p.owner_user_id for p in inputs.participants},
    )
    ledger = _ChargeLedger(participants, resolver, inputs.user_emails)
    skipped: list[SkippedCharge] = []

    def skip(source_type: str, source_id: str, reason: SkipReason) -> None:
        logger.info("Skipping %s %s in event %s: %s", source_type, source_id, inputs.event_id, reason.value)
        skipped.append(SkippedCharge(source_type=source_type, source_id=source_id, reason=reason.value))

    for cost in inputs.shared_costs:
        amount = cost.amount_irr
        if not _is_int(amount) or amount <= 0:
            skip("shared_cost", cost.shared_cost_id, SkipReason.malformed_amount)
            continue
        if cost.split_method != SplitMethod.EQUAL_ALL_ATTENDING.value:
            skip("shared_cost", cost.shared_cost_id, SkipReason.unsupported_split_method)
            continue
        if not event_pool:
            skip("shared_cost", cost.shared_cost_id, SkipReason.no_chargeable_participants)
            continue
        share_count = len(event_pool)
        per_share = amount // share_count
        if per_share == 0:
            skip("shared_cost", cost.shared_cost_id, SkipReason.share_rounds_to_zero)
            continue
        for pid in event_pool:
            ledger.add(pid, BreakdownLine(
                selection_id=f"{SHARED_COST_LINE_PREFIX}{cost.shared_cost_id}",
                item_name=cost.name,
                quantity=1,
                unit_price_irr=amount,
                share_count=share_count,
                share_amount_irr=per_share,
            ))

    for sel in inputs.selections:
        quantity, price = sel.quantity, sel.unit_price_irr
        if not _is_int(quantity) or quantity < 1 or not _is_int(price) or price < 0:
            skip("selection", sel.selection_id, SkipReason.malformed_price)
            continue
        allocated = [pid for pid in dict.fromkeys(sel.participant_ids) if pid in attending_set]
        if not allocated:
            skip("selection", sel.selection_id, SkipReason.unattended_selection)
            continue
        chargeable = compute_chargeable_pool(allocated, host_participant_ids, exemption)
        if not chargeable:
            # Host-only order: spread it over every non-host attendee of the event.
            chargeable = event_pool
            if not chargeable:
                skip("selection", sel.selection_id, SkipReason.no_fallback_participants)
                continue
            logger.info(
                "Selection %s is allocated only to hosts; charging %d non-host attendees",
                sel.selection_id, len(chargeable),
            )
        total_cost = quantity * price
        share_count = len(chargeable)
        per_share = total_cost // share_count
        for pid in chargeable:
            ledger.add(pid, BreakdownLine(
                selection_id=sel.selection_id,
                item_name=sel.item_name,
                quantity=quantity,
                unit_price_irr=price,
                share_count=share_count,
                share_amount_irr=per_share,
            ))

    participant_charges = ledger.participant_charges()
    payor_summaries = summarize_by_payor(participant_charges)
    logger.info(
        "Computed charges for event %s: %d participants, %d payors, %d skipped",
        inputs.event_id, len(participant_charges), len(payor_summaries), len(skipped),
    )
    return EventChargesResult(
        event_id=inputs.event_id,
        participant_charges=participant_charges,
        payor_summaries=payor_summaries,
        skipped=skipped,
    )


def load_charge_inputs(db: Session, event_id: str) -> ChargeInputs:
    """Read every input of ``compute_charges`` for one event.

    Queries are batched by event (and by id lists derived from it), so the
    number of round-trips does not grow with the number of participants or
    selections. Nothing is computed until all reads have completed.
    """
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Event not found")

    host_user_ids = {
        user_id for (user_id,) in db.query(EventHost.user_id).filter(EventHost.event_id == event_id).all()
    }
    if not host_user_ids and event.host_user_id:
        host_user_ids = {event.host_user_id}

    participant_rows = (
        db.query(EventParticipant, Participant)
        .join(Participant, Participant.participant_id == EventParticipant.participant_id)
        .filter(EventParticipant.event_id == event_id)
        .order_by(EventParticipant.created_at, EventParticipant.participant_id)
        .all()
    )
    participants = tuple(
        ParticipantRow(
            participant_id=p.participant_id,
            display_name=p.display_name,
            owner_user_id=p.owner_user_id,
            attendance_status=AttendanceStatus(ep.attendance_status).value,
        )
        for ep, p in participant_rows
    )
    participant_ids = [p.participant_id for p in participants]

    overrides = dict(
        db.query(EventPayorOverride.participant_id, EventPayorOverride.payor_user_id)
        .filter(EventPayorOverride.event_id == event_id)
        .all()
    )
    default_payors = dict(
        db.query(ParticipantDefaultPayor.participant_id, ParticipantDefaultPayor.payor_user_id)
        .filter(ParticipantDefaultPayor.participant_id.in_(participant_ids))
        .all()
    ) if participant_ids else {}

    selection_rows = (
        db.query(Selection.selection_id, Selection.quantity, MenuItem.name, MenuItem.price_irr)
        .join(MenuItem, MenuItem.menu_item_id == Selection.menu_item_id)
        .filter(Selection.event_id == event_id)
        .order_by(Selection.created_at, Selection.selection_id)
        .all()
    )
    selection_ids = [row.selection_id for row in selection_rows]
    allocations_by_selection: dict[str, list[str]] = {sid: [] for sid in selection_ids}
    if selection_ids:
        allocation_rows = (
            db.query(SelectionAllocation.selection_id, SelectionAllocation.participant_id)
            .filter(SelectionAllocation.selection_id.in_(selection_ids))
            .order_by(SelectionAllocation.created_at, SelectionAllocation.allocation_id)
            .all()
        )
        for selection_id, participant_id in allocation_rows:
            allocations_by_selection[selection_id].append(participant_id)

    selections = tuple(
        SelectionRow(
            selection_id=row.selection_id,
            item_name=row.name,
            quantity=row.quantity,
            unit_price_irr=row.price_irr,
            participant_ids=tuple(allocations_by_selection[row.selection_id]),
        )
        for row in selection_rows
    )

    shared_costs = tuple(
        SharedCostRow(
            shared_cost_id=sc.shared_cost_id,
            name=sc.name,
            amount_irr=sc.amount_irr,
            split_method=SplitMethod(sc.split_method).value,
        )
        for sc in (
            db.query(SharedCost)
            .filter(SharedCost.event_id == event_id)
            .order_by(SharedCost.created_at, SharedCost.shared_cost_id)
            .all()
        )
    )

    # Every user the payor chain can land on.
    candidate_payors = set(overrides.values()) | set(default_payors.values()) | {p.owner_user_id for p in participants}
    user_emails = dict(
        db.query(User.user_id, User.email).filter(User.user_id.in_(candidate_payors)).all()
    ) if candidate_payors else {}

    return ChargeInputs(
        event_id=event_id,
        payor_exemption_enabled=bool(event.payor_exemption_enabled),
        host_user_ids=frozenset(host_user_ids),
        participants=participants,
        selections=selections,
        shared_costs=shared_costs,
        payor_overrides=overrides,
        default_payors=default_payors,
        user_emails=user_emails,
    )


def compute_event_charges(db: Session, event_id: str) -> EventChargesResult:
    """Compute (never persist) the charges of an event from its current state.

    Raises NotFoundError for an unknown event and EngineError when storage
    fails mid-read; there is no partial result.
    """
    try:
        inputs = load_charge_inputs(db, event_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load charge inputs for event %s", event_id)
        raise EngineError() from exc
    return compute_charges(inputs)

"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates all tables for MealShare: users, participants,
participant_default_payors, events, event_hosts, event_participants,
event_payor_overrides, menus, menu_items, selections, selection_allocations,
shared_costs, event_charges, payment_links, event_state_changes.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- participants ---
    op.create_table(
        "participants",
        sa.Column("participant_id", sa.String(36), primary_key=True),
        sa.Column("owner_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- participant_default_payors ---
    op.create_table(
        "participant_default_payors",
        sa.Column("participant_id", sa.String(36), sa.ForeignKey("participants.participant_id"), primary_key=True),
        sa.Column("payor_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- events ---
    op.create_table(
        "events",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location_text", sa.String(500), nullable=False, server_default=""),
        sa.Column("host_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("starts_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cutoff_at_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("state", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("payor_exemption_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_hosts ---
    op.create_table(
        "event_hosts",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_participants ---
    op.create_table(
        "event_participants",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("participant_id", sa.String(36), sa.ForeignKey("participants.participant_id"), primary_key=True),
        sa.Column("managing_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("attendance_status", sa.String(20), nullable=False, server_default="ATTENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_payor_overrides ---
    op.create_table(
        "event_payor_overrides",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("participant_id", sa.String(36), sa.ForeignKey("participants.participant_id"), primary_key=True),
        sa.Column("payor_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- menus ---
    op.create_table(
        "menus",
        sa.Column("menu_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- menu_items ---
    op.create_table(
        "menu_items",
        sa.Column("menu_item_id", sa.String(36), primary_key=True),
        sa.Column("menu_id", sa.String(36), sa.ForeignKey("menus.menu_id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price_irr", sa.Integer, nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- selections ---
    op.create_table(
        "selections",
        sa.Column("selection_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("menu_item_id", sa.String(36), sa.ForeignKey("menu_items.menu_item_id"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("created_by_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("note", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- selection_allocations ---
    op.create_table(
        "selection_allocations",
        sa.Column("allocation_id", sa.String(36), primary_key=True),
        sa.Column("selection_id", sa.String(36), sa.ForeignKey("selections.selection_id"), nullable=False),
        sa.Column("participant_id", sa.String(36), sa.ForeignKey("participants.participant_id"), nullable=False),
        sa.Column("share_type", sa.String(20), nullable=False, server_default="EQUAL"),
        sa.Column("share_weight", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("selection_id", "participant_id", name="uq_selection_participant"),
    )

    # --- shared_costs ---
    op.create_table(
        "shared_costs",
        sa.Column("shared_cost_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("amount_irr", sa.Integer, nullable=False),
        sa.Column("split_method", sa.String(40), nullable=False, server_default="EQUAL_ALL_ATTENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_charges ---
    op.create_table(
        "event_charges",
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), primary_key=True),
        sa.Column("payor_user_id", sa.String(36), primary_key=True),
        sa.Column("total_irr", sa.Integer, nullable=False),
        sa.Column("finalized_at_utc", sa.String(40), nullable=False),
    )

    # --- payment_links ---
    op.create_table(
        "payment_links",
        sa.Column("payment_link_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("payor_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("token", sa.String(64), nullable=False, unique=True),
        sa.Column("locked_amount_irr", sa.Integer, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="OPEN"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_state_changes ---
    op.create_table(
        "event_state_changes",
        sa.Column("change_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.event_id"), nullable=False),
        sa.Column("from_state", sa.String(20), nullable=False),
        sa.Column("to_state", sa.String(20), nullable=False),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("charges_total_irr", sa.Integer, nullable=True),
        sa.Column("payor_count", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("event_state_changes")
    op.drop_table("payment_links")
    op.drop_table("event_charges")
    op.drop_table("shared_costs")
    op.drop_table("selection_allocations")
    op.drop_table("selections")
    op.drop_table("menu_items")
    op.drop_table("menus")
    op.drop_table("event_payor_overrides")
    op.drop_table("event_participants")
    op.drop_table("event_hosts")
    op.drop_table("events")
    op.drop_table("participant_default_payors")
    op.drop_table("participants")
    op.drop_table("users")

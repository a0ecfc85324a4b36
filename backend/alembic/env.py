"""Alembic environment configuration.

Reads the database URL from mealshare.config (unless the caller already set
``sqlalchemy.url``) and registers all models so autogenerate can detect
schema changes.
"""
from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from mealshare.config import settings
from mealshare.database import Base

# Import all models so they register with Base.metadata
from mealshare.models.user import User  # noqa: F401
from mealshare.models.participant import Participant, ParticipantDefaultPayor  # noqa: F401
from mealshare.models.event import Event, EventHost  # noqa: F401
from mealshare.models.event_participant import EventParticipant, EventPayorOverride  # noqa: F401
from mealshare.models.menu import Menu, MenuItem  # noqa: F401
from mealshare.models.selection import Selection, SelectionAllocation  # noqa: F401
from mealshare.models.shared_cost import SharedCost  # noqa: F401
from mealshare.models.event_charge import EventCharge  # noqa: F401
from mealshare.models.payment_link import PaymentLink  # noqa: F401
from mealshare.models.event_state_change import EventStateChange  # noqa: F401

config = context.config
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

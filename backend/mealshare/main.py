"""FastAPI application entry point."""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mealshare.config import settings
from mealshare.database import Base, engine

# Import routers
from mealshare.routers import users, participants, events, menus, selections, charges, lifecycle

# Import all models so Base.metadata knows about them
from mealshare.models.user import User                                      # noqa: F401
from mealshare.models.participant import Participant, ParticipantDefaultPayor  # noqa: F401
from mealshare.models.event import Event, EventHost                         # noqa: F401
from mealshare.models.event_participant import EventParticipant, EventPayorOverride  # noqa: F401
from mealshare.models.menu import Menu, MenuItem                            # noqa: F401
from mealshare.models.selection import Selection, SelectionAllocation      # noqa: F401
from mealshare.models.shared_cost import SharedCost                         # noqa: F401
from mealshare.models.event_charge import EventCharge                       # noqa: F401
from mealshare.models.payment_link import PaymentLink                       # noqa: F401
from mealshare.models.event_state_change import EventStateChange            # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="MealShare",
    description="Shared food events — per-participant cost splitting billed to resolved payors",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(participants.router, prefix="/api/participants", tags=["Participants"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(charges.router, prefix="/api/events", tags=["Charges"])
app.include_router(lifecycle.router, prefix="/api/events", tags=["Lifecycle"])
app.include_router(menus.router, prefix="/api", tags=["Menus"])
app.include_router(selections.router, prefix="/api", tags=["Selections"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}

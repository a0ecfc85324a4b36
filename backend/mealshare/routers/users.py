"""User API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mealshare.database import get_db
from mealshare.errors import ConflictError, NotFoundError
from mealshare.models.user import User
from mealshare.schemas.charges import PayorChargeOut
from mealshare.schemas.user import UserCreate, UserOut
from mealshare.services.event_charges import list_payor_charges

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Create a user account that can own participants and be billed."""
    if db.query(User.user_id).filter(User.email == payload.email).first():
        raise ConflictError("A user with this email already exists")
    user = User(**payload.model_dump())
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s (%s)", user.user_id, user.email)
    return user


@router.get("/", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    """List all users."""
    return db.query(User).order_by(User.created_at).all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    """Fetch a single user by ID."""
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("/{user_id}/charges", response_model=list[PayorChargeOut])
def get_payor_charges(user_id: str, db: Session = Depends(get_db)):
    """Finalized charges billed to this user across all events, newest first."""
    if not db.query(User.user_id).filter(User.user_id == user_id).first():
        raise NotFoundError("User not found")
    return list_payor_charges(db, user_id)

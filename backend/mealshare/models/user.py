"""User ORM model — the accounts that own participants and get billed."""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from mealshare.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

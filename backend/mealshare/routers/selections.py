"""Selection API routes — delegates to selection_service for state and ownership checks."""
import logging
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from mealshare.database import get_db
from mealshare.schemas.selection import SelectionCreate, SelectionOut, SelectionUpdate
from mealshare.services import selection_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/events/{event_id}/selections", response_model=SelectionOut, status_code=status.HTTP_201_CREATED)
def create_selection(
    event_id: str,
    payload: SelectionCreate,
    actor_user_id: str = Query(..., description="ID of the user placing the order"),
    db: Session = Depends(get_db),
):
    """Order a menu item for one or more managed participants (event must be OPEN)."""
    return selection_service.create_selection(
        db=db,
        event_id=event_id,
        actor_user_id=actor_user_id,
        menu_item_id=payload.menu_item_id,
        quantity=payload.quantity,
        participant_ids=payload.participant_ids,
        note=payload.note,
    )


@router.get("/events/{event_id}/selections", response_model=list[SelectionOut])
def list_selections(event_id: str, db: Session = Depends(get_db)):
    return selection_service.list_selections(db, event_id)


@router.patch("/selections/{selection_id}", response_model=SelectionOut)
def update_selection(
    selection_id: str,
    payload: SelectionUpdate,
    actor_user_id: str = Query(..., description="ID of the user editing the order"),
    db: Session = Depends(get_db),
):
    """Change quantity and allocations (creator only, event must be OPEN)."""
    return selection_service.update_selection(
        db=db,
        selection_id=selection_id,
        actor_user_id=actor_user_id,
        quantity=payload.quantity,
        participant_ids=payload.participant_ids,
    )


@router.delete("/selections/{selection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_selection(
    selection_id: str,
    actor_user_id: str = Query(..., description="ID of the user deleting the order"),
    db: Session = Depends(get_db),
):
    selection_service.delete_selection(db, selection_id, actor_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

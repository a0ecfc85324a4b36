"""Menu and menu item API routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mealshare.database import get_db
from mealshare.errors import NotFoundError, ValidationError
from mealshare.models.event import Event
from mealshare.models.menu import Menu, MenuItem
from mealshare.schemas.menu import MenuCreate, MenuItemCreate, MenuItemOut, MenuOut

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/events/{event_id}/menus", response_model=MenuOut, status_code=status.HTTP_201_CREATED)
def create_menu(event_id: str, payload: MenuCreate, db: Session = Depends(get_db)):
    if not db.query(Event.event_id).filter(Event.event_id == event_id).first():
        raise NotFoundError("Event not found")
    menu = Menu(event_id=event_id, name=payload.name, sort_order=payload.sort_order)
    db.add(menu)
    db.commit()
    db.refresh(menu)
    logger.info("Menu %s created for event %s", menu.menu_id, event_id)
    return menu


@router.get("/events/{event_id}/menus", response_model=list[MenuOut])
def list_menus(event_id: str, db: Session = Depends(get_db)):
    if not db.query(Event.event_id).filter(Event.event_id == event_id).first():
        raise NotFoundError("Event not found")
    return db.query(Menu).filter(Menu.event_id == event_id).order_by(Menu.sort_order, Menu.name).all()


@router.post("/menus/{menu_id}/items", response_model=MenuItemOut, status_code=status.HTTP_201_CREATED)
def create_menu_item(menu_id: str, payload: MenuItemCreate, db: Session = Depends(get_db)):
    """Add a priced item; prices are integers in the smallest currency unit."""
    if not db.query(Menu.menu_id).filter(Menu.menu_id == menu_id).first():
        raise NotFoundError("Menu not found")
    if payload.price_irr < 0:
        raise ValidationError("price_irr must be a non-negative integer")
    item = MenuItem(menu_id=menu_id, name=payload.name, price_irr=payload.price_irr, category=payload.category)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Menu item %s (%d) added to menu %s", item.menu_item_id, item.price_irr, menu_id)
    return item


@router.get("/menus/{menu_id}/items", response_model=list[MenuItemOut])
def list_menu_items(menu_id: str, db: Session = Depends(get_db)):
    return db.query(MenuItem).filter(MenuItem.menu_id == menu_id).order_by(MenuItem.created_at, MenuItem.name).all()

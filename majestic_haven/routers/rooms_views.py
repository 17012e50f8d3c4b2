import logging
from datetime import date, timedelta
from urllib.parse import urlencode
from decimal import Decimal, InvalidOperation
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from ..db import get_db
from ..errors import RoomNotFound
from ..services import room_service
from ..services.notifications import flash
from ..templating import render
from .public_views import not_found_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


def parse_date(value: str | None) -> date | None:
    """Parse an ISO date from a query/form field; blank means not given."""
    if not value or not value.strip():
        return None
    return date.fromisoformat(value.strip()[:10])


def parse_positive_int(value: str | None) -> int | None:
    if not value or not value.strip():
        return None
    number = int(value)
    return number if number > 0 else None


def parse_price(value: str | None) -> Decimal | None:
    if not value or not value.strip():
        return None
    try:
        price = Decimal(value.strip())
    except InvalidOperation:
        raise ValueError(f"invalid price: {value!r}") from None
    if not price.is_finite():
        raise ValueError(f"invalid price: {value!r}")
    return price if price > 0 else None


@router.get("", response_class=HTMLResponse)
def rooms_index(request: Request, db: Session = Depends(get_db), check_in: str | None = None, check_out: str | None = None, guests: str | None = None, max_price: str | None = None):
    try:
        s = parse_date(check_in)
        e = parse_date(check_out)
        n_guests = parse_positive_int(guests)
        price_cap = parse_price(max_price)
    except ValueError:
        flash(request, "Error checking availability. Please check your search and try again.", "error")
        s = e = n_guests = price_cap = None

    if s and e and e <= s:
        flash(request, "Check-out date must be after check-in date", "error")
        s = e = None

    filtering = bool(s and e)
    try:
        rooms = room_service.search_rooms(db, s, e, guests=n_guests, max_price=price_cap)
    except SQLAlchemyError:
        logger.exception("Room search failed")
        db.rollback()
        flash(request, "Failed to load rooms", "error")
        rooms = []
        filtering = False
    if filtering:
        if rooms:
            flash(request, f"Found {len(rooms)} available rooms", "success")
        else:
            flash(request, "No rooms available with the selected criteria", "error")

    today = date.today()
    # Carried to room links so the detail page keeps the chosen stay.
    query = urlencode({"check_in": s, "check_out": e, "guests": n_guests or 1}) if filtering else ""
    return render(request, "rooms/index.html", {
        "rooms": rooms,
        "query": query,
        "active_filters": {
            "dates": filtering,
            "guests": bool(n_guests),
            "price": bool(price_cap),
        },
        "check_in": s.isoformat() if s else "",
        "check_out": e.isoformat() if e else "",
        "guests": n_guests or 1,
        "max_price": price_cap or "",
        "today": today.isoformat(),
        "tomorrow": (today + timedelta(days=1)).isoformat(),
    })


@router.get("/{room_id}", response_class=HTMLResponse)
def room_detail(request: Request, room_id: str, db: Session = Depends(get_db), check_in: str | None = None, check_out: str | None = None, guests: str | None = None):
    try:
        room = room_service.get_room_by_id(db, room_id)
    except RoomNotFound:
        return not_found_page(request)
    today = date.today()
    return render(request, "rooms/detail.html", {
        "room": room,
        "check_in": check_in or "",
        "check_out": check_out or "",
        "guests": guests or 1,
        "today": today.isoformat(),
        "tomorrow": (today + timedelta(days=1)).isoformat(),
    })

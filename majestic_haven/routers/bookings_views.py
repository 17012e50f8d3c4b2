import logging
from datetime import date, timedelta
from urllib.parse import urlencode

from fastapi import APIRouter, BackgroundTasks, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..errors import BookingError, BookingNotFound, InvalidStay, RoomNotFound
from ..limiter import limiter
from ..services import booking_service, room_service
from ..services.completion import run_auto_complete
from ..services.mail import send_booking_confirmation
from ..services.notifications import flash
from ..templating import render
from .rooms_views import parse_date, parse_positive_int

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])

_email_adapter = TypeAdapter(EmailStr)


def confirmation_email_context(booking, room) -> dict:
    return {
        "guest_name": booking.guest_name,
        "reference": booking.reference,
        "room_name": room.name,
        "room_type": room.type,
        "check_in_date": booking.check_in_date,
        "check_out_date": booking.check_out_date,
        "nights": booking.nights,
        "number_of_guests": booking.number_of_guests,
        "total_price": booking.total_price,
    }


def _form_context(room, check_in: str, check_out: str, guests: int, guest: dict | None = None) -> dict:
    nights = 0
    total = None
    try:
        s = parse_date(check_in)
        e = parse_date(check_out)
        if s and e and e > s:
            nights = booking_service.count_nights(s, e)
            total = booking_service.calculate_total_price(room.price, s, e)
    except ValueError:
        pass
    return {
        "room": room,
        "check_in": check_in,
        "check_out": check_out,
        "guests": guests,
        "guest": guest or {},
        "nights": nights,
        "total_price": total,
        "today": date.today().isoformat(),
    }


@router.get("/booking/confirmation/{booking_id}", response_class=HTMLResponse)
def booking_confirmation(request: Request, booking_id: str, db: Session = Depends(get_db)):
    try:
        booking = booking_service.get_booking_by_id(db, booking_id)
    except BookingNotFound:
        flash(request, "Failed to load booking details", "error")
        return render(request, "booking/confirmation.html", {"booking": None, "room": None}, status_code=404)
    return render(request, "booking/confirmation.html", {"booking": booking, "room": booking.room})


@router.get("/booking/{room_id}", response_class=HTMLResponse)
def booking_new(request: Request, room_id: str, db: Session = Depends(get_db), check_in: str | None = None, check_out: str | None = None, guests: str | None = None):
    try:
        room = room_service.get_room_by_id(db, room_id)
    except RoomNotFound:
        flash(request, "Failed to load room details", "error")
        return RedirectResponse(url="/rooms", status_code=303)
    today = date.today()
    try:
        n_guests = min(parse_positive_int(guests) or 1, room.capacity)
    except ValueError:
        n_guests = 1
    return render(request, "booking/form.html", _form_context(
        room,
        check_in or today.isoformat(),
        check_out or (today + timedelta(days=1)).isoformat(),
        n_guests,
    ))


@router.post("/booking/{room_id}")
@limiter.limit(settings.RATE_LIMIT_BOOKING)
def booking_create(request: Request, room_id: str, background_tasks: BackgroundTasks, db: Session = Depends(get_db), guest_name: str = Form(...), guest_email: str = Form(...), guest_phone: str = Form(...), check_in_date: str = Form(...), check_out_date: str = Form(...), number_of_guests: str = Form("1")):
    try:
        room = room_service.get_room_by_id(db, room_id)
    except RoomNotFound:
        flash(request, "Failed to load room details", "error")
        return RedirectResponse(url="/rooms", status_code=303)
    guest = {"guest_name": guest_name, "guest_email": guest_email, "guest_phone": guest_phone}
    n_guests = 1
    try:
        try:
            s = date.fromisoformat(check_in_date)
            e = date.fromisoformat(check_out_date)
        except ValueError:
            raise InvalidStay("Please choose valid check-in and check-out dates") from None
        try:
            n_guests = int(number_of_guests)
        except ValueError:
            raise InvalidStay("Please choose a valid number of guests") from None
        try:
            _email_adapter.validate_python(guest_email.strip())
        except ValidationError:
            raise InvalidStay("Please enter a valid email address") from None
        booking = booking_service.create_booking(
            db,
            room_id=room_id,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
            check_in_date=s,
            check_out_date=e,
            number_of_guests=n_guests,
        )
    except BookingError as exc:
        flash(request, exc.message, "error")
        ctx = _form_context(room, check_in_date, check_out_date, n_guests, guest)
        return render(request, "booking/form.html", ctx, status_code=exc.status_code)
    except SQLAlchemyError:
        logger.exception("Booking creation failed for room %s", room_id)
        db.rollback()
        flash(request, "Failed to create booking. Please try again.", "error")
        ctx = _form_context(room, check_in_date, check_out_date, n_guests, guest)
        return render(request, "booking/form.html", ctx, status_code=500)

    background_tasks.add_task(
        send_booking_confirmation, booking.id, booking.guest_email, confirmation_email_context(booking, room)
    )
    flash(request, "Booking created successfully!", "success")
    return RedirectResponse(url=f"/booking/confirmation/{booking.id}", status_code=303)


@router.get("/bookings", response_class=HTMLResponse)
def bookings_index(request: Request, db: Session = Depends(get_db), email: str | None = None):
    if settings.AUTO_COMPLETE_ENABLED:
        # Complete past stays before listing
        try:
            run_auto_complete(db)
        except SQLAlchemyError:
            logger.exception("Auto-complete sweep failed")
            db.rollback()
    search = (email or "").strip()
    bookings = booking_service.find_bookings_by_email(db, search)
    if search:
        if bookings:
            flash(request, f"Found {len(bookings)} booking(s)", "success")
        else:
            flash(request, "No bookings found for this email", "error")
    return render(request, "bookings/index.html", {"bookings": bookings, "email": search})


@router.post("/bookings/{booking_id}/cancel")
def bookings_cancel(request: Request, booking_id: str, db: Session = Depends(get_db), email: str = Form("")):
    try:
        booking_service.cancel_booking(db, booking_id)
        flash(request, "Booking successfully canceled", "success")
    except BookingNotFound:
        flash(request, "Failed to cancel booking", "error")
    dest = "/bookings"
    if email.strip():
        dest += "?" + urlencode({"email": email.strip()})
    return RedirectResponse(url=dest, status_code=303)

import logging
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from ..db import begin_write
from ..errors import BookingNotFound, InvalidStatusChange, InvalidStay, RoomNotFound, RoomUnavailable
from ..models import Booking, BookingStatus, Room
from .room_service import check_availability

logger = logging.getLogger(__name__)

# Fields an administrator may change after creation. Dates, room and guest
# count are fixed once booked.
BOOKING_UPDATE_FIELDS = ("guest_name", "guest_email", "guest_phone", "status")

# Status moves allowed after creation; a canceled stay is never reinstated.
STATUS_TRANSITIONS = {
    BookingStatus.CONFIRMED: {BookingStatus.CANCELED, BookingStatus.COMPLETED},
    BookingStatus.CANCELED: set(),
    BookingStatus.COMPLETED: set(),
}


def count_nights(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def calculate_total_price(nightly_price: Decimal | float, check_in: date, check_out: date) -> Decimal:
    return Decimal(str(nightly_price)) * count_nights(check_in, check_out)


def create_booking(
    db: Session,
    room_id: str,
    guest_name: str,
    guest_email: str,
    guest_phone: str,
    check_in_date: date,
    check_out_date: date,
    number_of_guests: int = 1,
) -> Booking:
    """
    Book ``room_id`` for [check_in_date, check_out_date).

    The total price is always derived from the room's nightly rate. The room
    row is locked for the rest of the transaction (on backends supporting
    ``SELECT ... FOR UPDATE``) so two requests cannot both pass the
    availability check for the same dates.
    """
    nights = count_nights(check_in_date, check_out_date)
    if nights <= 0:
        raise InvalidStay("Check-out date must be after check-in date")

    begin_write(db)
    room = db.query(Room).filter(Room.id == room_id).with_for_update().first()
    if not room:
        db.rollback()
        raise RoomNotFound()

    if not check_availability(db, room_id, check_in_date, check_out_date):
        db.rollback()
        logger.info("Rejected booking for room %s: %s..%s overlaps", room_id, check_in_date, check_out_date)
        raise RoomUnavailable()

    if number_of_guests < 1 or number_of_guests > room.capacity:
        db.rollback()
        raise InvalidStay(f"This room accommodates 1 to {room.capacity} guests")

    booking = Booking(
        room_id=room.id,
        guest_name=guest_name.strip(),
        guest_email=guest_email.strip(),
        guest_phone=guest_phone.strip(),
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        number_of_guests=number_of_guests,
        total_price=calculate_total_price(room.price, check_in_date, check_out_date),
        status=BookingStatus.CONFIRMED,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info(
        "Booking %s created: room=%s %s..%s (%d nights, total=%s)",
        booking.id, room.id, check_in_date, check_out_date, nights, booking.total_price,
    )
    return booking


def get_booking_by_id(db: Session, booking_id: str) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise BookingNotFound()
    return booking


def get_all_bookings(db: Session) -> list[Booking]:
    return db.query(Booking).order_by(Booking.created_at.desc()).all()


def get_bookings_by_room_id(db: Session, room_id: str) -> list[Booking]:
    return db.query(Booking).filter(Booking.room_id == room_id).order_by(Booking.check_in_date.asc()).all()


def find_bookings_by_email(db: Session, email: str | None) -> list[Booking]:
    """Bookings whose guest email contains ``email`` (case-insensitive); all bookings for a blank query."""
    needle = (email or "").strip()
    if not needle:
        return get_all_bookings(db)
    return (
        db.query(Booking)
        .filter(Booking.guest_email.ilike(f"%{needle}%"))
        .order_by(Booking.created_at.desc())
        .all()
    )


def update_booking(db: Session, booking_id: str, updates: dict[str, Any]) -> Booking:
    booking = get_booking_by_id(db, booking_id)
    if updates.get("status") is not None:
        status = BookingStatus(updates["status"])
        if status != booking.status and status not in STATUS_TRANSITIONS[booking.status]:
            raise InvalidStatusChange(f"Booking cannot change from {booking.status.value} to {status.value}")
    for key, value in updates.items():
        if key not in BOOKING_UPDATE_FIELDS or value is None:
            continue
        if key == "status":
            value = BookingStatus(value)
        elif isinstance(value, str):
            value = value.strip()
        setattr(booking, key, value)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s updated (%s)", booking.id, ", ".join(sorted(updates)))
    return booking


def cancel_booking(db: Session, booking_id: str) -> Booking:
    """Mark a booking canceled. Canceling twice leaves it canceled."""
    booking = get_booking_by_id(db, booking_id)
    booking.status = BookingStatus.CANCELED
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s canceled", booking.id)
    return booking

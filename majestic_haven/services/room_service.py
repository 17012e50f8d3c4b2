import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from ..errors import RoomInUse, RoomNotFound
from ..models import Booking, BookingStatus, Room

logger = logging.getLogger(__name__)

# Columns an administrator may set on a room.
ROOM_FIELDS = ("name", "type", "price", "description", "amenities", "capacity", "image_url")


def dates_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Return True if [a_start, a_end) overlaps [b_start, b_end)."""
    return a_start < b_end and a_end > b_start


def get_all_rooms(db: Session) -> list[Room]:
    return db.query(Room).order_by(Room.price.asc(), Room.name.asc()).all()


def get_featured_rooms(db: Session, limit: int = 3) -> list[Room]:
    return db.query(Room).order_by(Room.price.asc(), Room.name.asc()).limit(limit).all()


def get_room_by_id(db: Session, room_id: str) -> Room:
    room = db.get(Room, room_id)
    if not room:
        raise RoomNotFound()
    return room


def create_room(db: Session, data: dict[str, Any]) -> Room:
    room = Room(**{k: v for k, v in data.items() if k in ROOM_FIELDS})
    db.add(room)
    db.commit()
    db.refresh(room)
    logger.info("Room %s created (%s)", room.id, room.name)
    return room


def update_room(db: Session, room_id: str, updates: dict[str, Any]) -> Room:
    room = get_room_by_id(db, room_id)
    for key, value in updates.items():
        if key in ROOM_FIELDS:
            setattr(room, key, value)
    db.commit()
    db.refresh(room)
    logger.info("Room %s updated (%s)", room.id, ", ".join(sorted(updates)))
    return room


def delete_room(db: Session, room_id: str) -> None:
    """Delete a room along with its canceled bookings; refused while any other booking exists."""
    room = get_room_by_id(db, room_id)
    active = (
        db.query(Booking)
        .filter(Booking.room_id == room_id, Booking.status != BookingStatus.CANCELED)
        .count()
    )
    if active:
        raise RoomInUse(f"Room has {active} booking(s) that are not canceled")
    db.delete(room)
    db.commit()
    logger.info("Room %s deleted", room_id)


def booked_room_ids(db: Session, check_in: date, check_out: date) -> set[str]:
    """Ids of rooms holding a non-canceled booking that overlaps [check_in, check_out)."""
    rows = (
        db.query(Booking.room_id)
        .filter(
            Booking.status != BookingStatus.CANCELED,
            Booking.check_in_date < check_out,
            Booking.check_out_date > check_in,
        )
        .distinct()
        .all()
    )
    return {room_id for (room_id,) in rows}


def check_availability(db: Session, room_id: Optional[str], check_in: date, check_out: date) -> list[Room]:
    """
    Rooms free for the whole stay [check_in, check_out).

    With ``room_id`` the result is that single room or an empty list (also
    when the room does not exist). Without it, every free room is returned,
    cheapest first.
    """
    excluded = booked_room_ids(db, check_in, check_out)
    q = db.query(Room)
    if room_id:
        q = q.filter(Room.id == room_id)
    if excluded:
        q = q.filter(Room.id.not_in(sorted(excluded)))
    rooms = q.order_by(Room.price.asc(), Room.name.asc()).all()
    logger.debug(
        "Availability %s..%s room=%s: %d free, %d excluded",
        check_in, check_out, room_id or "*", len(rooms), len(excluded),
    )
    return rooms


def filter_rooms(rooms: Iterable[Room], guests: Optional[int] = None, max_price: Optional[Decimal | float] = None) -> list[Room]:
    result = list(rooms)
    if guests:
        result = [r for r in result if r.capacity >= guests]
    if max_price:
        result = [r for r in result if r.price <= Decimal(str(max_price))]
    return result


def search_rooms(
    db: Session,
    check_in: Optional[date] = None,
    check_out: Optional[date] = None,
    guests: Optional[int] = None,
    max_price: Optional[Decimal | float] = None,
) -> list[Room]:
    """Room list filters: availability for the dates, then guest count and price."""
    if check_in and check_out:
        rooms = check_availability(db, None, check_in, check_out)
    else:
        rooms = get_all_rooms(db)
    return filter_rooms(rooms, guests=guests, max_price=max_price)

import logging
from datetime import date, datetime
from typing import Optional, List
from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, HTTPException
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..errors import BookingError
from ..limiter import limiter
from ..models import BookingStatus
from ..security import require_admin_key
from ..services import booking_service, room_service
from ..services.completion import run_auto_complete
from ..services.mail import send_booking_confirmation
from .bookings_views import confirmation_email_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["api"])

# ==== Schemas ====

class RoomOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    price: float
    description: str
    amenities: List[str]
    capacity: int
    image_url: str
    created_at: Optional[datetime] = None

class RoomCreateIn(BaseModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    price: float = Field(gt=0)
    description: str = ""
    amenities: List[str] = Field(default_factory=list)
    capacity: int = Field(default=2, ge=1)
    image_url: str = ""

class RoomUpdateIn(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    image_url: Optional[str] = None

class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    reference: str
    room_id: str
    guest_name: str
    guest_email: str
    guest_phone: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    total_price: float
    status: BookingStatus
    created_at: Optional[datetime] = None

class BookingCreateIn(BaseModel):
    # Unknown fields (a client-side total_price, for instance) are ignored.
    room_id: str
    guest_name: str = Field(min_length=1)
    guest_email: EmailStr
    guest_phone: str = Field(min_length=1)
    check_in_date: date
    check_out_date: date
    number_of_guests: int = Field(default=1, ge=1)

class BookingUpdateIn(BaseModel):
    guest_name: Optional[str] = None
    guest_email: Optional[EmailStr] = None
    guest_phone: Optional[str] = None
    status: Optional[BookingStatus] = None

# ==== Helpers ====

def raise_http(exc: BookingError):
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

# ==== Rooms ====

@router.get("/rooms", response_model=List[RoomOut])
def api_rooms(db: Session = Depends(get_db)):
    return room_service.get_all_rooms(db)

@router.get("/rooms/search", response_model=List[RoomOut])
def api_search_rooms(db: Session = Depends(get_db), check_in: Optional[date] = None, check_out: Optional[date] = None, guests: Optional[int] = None, max_price: Optional[float] = None):
    if (check_in is None) != (check_out is None):
        raise HTTPException(status_code=400, detail="check_in and check_out must be given together")
    return room_service.search_rooms(db, check_in, check_out, guests=guests, max_price=max_price)

@router.get("/rooms/{room_id}", response_model=RoomOut)
def api_room(room_id: str, db: Session = Depends(get_db)):
    try:
        return room_service.get_room_by_id(db, room_id)
    except BookingError as exc:
        raise_http(exc)

@router.get("/rooms/{room_id}/bookings", response_model=List[BookingOut])
def api_room_bookings(room_id: str, db: Session = Depends(get_db)):
    return booking_service.get_bookings_by_room_id(db, room_id)

@router.post("/rooms", response_model=RoomOut, status_code=201, dependencies=[Depends(require_admin_key)])
def api_create_room(payload: RoomCreateIn, db: Session = Depends(get_db)):
    return room_service.create_room(db, payload.model_dump())

@router.patch("/rooms/{room_id}", response_model=RoomOut, dependencies=[Depends(require_admin_key)])
def api_update_room(room_id: str, payload: RoomUpdateIn, db: Session = Depends(get_db)):
    try:
        return room_service.update_room(db, room_id, payload.model_dump(exclude_unset=True))
    except BookingError as exc:
        raise_http(exc)

@router.delete("/rooms/{room_id}", status_code=204, dependencies=[Depends(require_admin_key)])
def api_delete_room(room_id: str, db: Session = Depends(get_db)):
    try:
        room_service.delete_room(db, room_id)
    except BookingError as exc:
        raise_http(exc)
    return Response(status_code=204)

# ==== Availability ====

@router.get("/availability", response_model=List[RoomOut])
def api_availability(check_in: date, check_out: date, room_id: Optional[str] = None, db: Session = Depends(get_db)):
    return room_service.check_availability(db, room_id, check_in, check_out)

# ==== Bookings ====

@router.get("/bookings", response_model=List[BookingOut])
def api_bookings(db: Session = Depends(get_db), email: Optional[str] = None):
    if settings.AUTO_COMPLETE_ENABLED:
        try:
            run_auto_complete(db)
        except SQLAlchemyError:
            logger.exception("Auto-complete sweep failed")
            db.rollback()
    return booking_service.find_bookings_by_email(db, email)

@router.post("/bookings", response_model=BookingOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_BOOKING)
def api_create_booking(request: Request, payload: BookingCreateIn, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    try:
        b = booking_service.create_booking(db, **payload.model_dump())
    except BookingError as exc:
        raise_http(exc)
    background_tasks.add_task(send_booking_confirmation, b.id, b.guest_email, confirmation_email_context(b, b.room))
    return b

@router.get("/bookings/{booking_id}", response_model=BookingOut)
def api_booking(booking_id: str, db: Session = Depends(get_db)):
    try:
        return booking_service.get_booking_by_id(db, booking_id)
    except BookingError as exc:
        raise_http(exc)

@router.post("/bookings/{booking_id}/cancel", response_model=BookingOut)
def api_cancel_booking(booking_id: str, db: Session = Depends(get_db)):
    try:
        return booking_service.cancel_booking(db, booking_id)
    except BookingError as exc:
        raise_http(exc)

@router.patch("/bookings/{booking_id}", response_model=BookingOut, dependencies=[Depends(require_admin_key)])
def api_update_booking(booking_id: str, payload: BookingUpdateIn, db: Session = Depends(get_db)):
    try:
        return booking_service.update_booking(db, booking_id, payload.model_dump(exclude_unset=True))
    except BookingError as exc:
        raise_http(exc)

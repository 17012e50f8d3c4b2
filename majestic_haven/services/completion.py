import logging
from datetime import date
from sqlalchemy.orm import Session
from ..models import Booking, BookingStatus

logger = logging.getLogger(__name__)


def run_auto_complete(db: Session, today: date | None = None) -> int:
    """
    Mark confirmed bookings as completed once their check-out date has passed.
    Canceled bookings are left alone.
    Returns the number of rows affected (best-effort; may be 0 if unsupported by backend).
    """
    today = today or date.today()
    q = (
        db.query(Booking)
        .filter(
            Booking.check_out_date < today,
            Booking.status == BookingStatus.CONFIRMED,
        )
    )
    # Bulk update; synchronize_session=False skips reconciling loaded objects.
    result = q.update({Booking.status: BookingStatus.COMPLETED}, synchronize_session=False)
    db.commit()
    try:
        count = int(result)
    except (TypeError, ValueError):
        count = 0
    if count:
        logger.info("Marked %d past booking(s) as completed", count)
    return count

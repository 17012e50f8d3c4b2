class BookingError(Exception):
    """Base class for failures surfaced to guests as a notification."""

    status_code = 400
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RoomNotFound(BookingError):
    status_code = 404
    default_message = "Room not found"


class BookingNotFound(BookingError):
    status_code = 404
    default_message = "Booking not found"


class RoomUnavailable(BookingError):
    status_code = 409
    default_message = "Room is not available for the selected dates"


class InvalidStay(BookingError):
    """Dates or guest count that cannot be booked."""

    status_code = 400
    default_message = "Invalid stay details"


class RoomInUse(BookingError):
    status_code = 409
    default_message = "Room still has active bookings"


class InvalidStatusChange(BookingError):
    status_code = 409
    default_message = "Booking status cannot be changed that way"

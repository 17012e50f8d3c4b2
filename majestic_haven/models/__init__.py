from .room import Room
from .booking import Booking, BookingStatus

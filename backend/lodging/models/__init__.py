from lodging.models.user import User, UserSession
from lodging.models.enrollment import Enrollment, Address
from lodging.models.ticket import TicketType, Ticket, TicketStatus
from lodging.models.hotel import Hotel, Room
from lodging.models.booking import Booking

__all__ = [
    "User", "UserSession",
    "Enrollment", "Address",
    "TicketType", "Ticket", "TicketStatus",
    "Hotel", "Room",
    "Booking",
]

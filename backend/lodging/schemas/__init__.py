from lodging.schemas.user import UserCreate, UserResponse, UserLogin, SignInResponse
from lodging.schemas.hotel import RoomResponse, HotelResponse, HotelWithRoomsResponse
from lodging.schemas.booking import BookingRequest, BookingIdResponse, BookingWithRoomResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "SignInResponse",
    "RoomResponse", "HotelResponse", "HotelWithRoomsResponse",
    "BookingRequest", "BookingIdResponse", "BookingWithRoomResponse",
]

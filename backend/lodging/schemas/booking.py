"""
Pydantic schemas for booking request/response payloads.

Payload keys are camelCase (roomId, bookingId, Room) to match the
event-registration frontend.
"""

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from lodging.schemas.hotel import RoomResponse


def parse_identifier(value: Any) -> Optional[int]:
    """
    Coerce a client-supplied identifier to a positive int.

    Returns None for anything else (missing, non-numeric, zero, negative,
    fractional, booleans) instead of failing validation, so the caller can
    answer with the status the booking API documents rather than 422.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value > 0 else None
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            number = int(value)
            return number if number > 0 else None
    return None


class BookingRequest(BaseModel):
    room_id: Optional[int] = Field(default=None, alias="roomId")

    model_config = {"populate_by_name": True}

    @field_validator("room_id", mode="before")
    @classmethod
    def coerce_room_id(cls, value: Any) -> Optional[int]:
        return parse_identifier(value)

    @classmethod
    def from_body(cls, body: Any) -> "BookingRequest":
        """Build from a raw JSON body; anything but an object carries no roomId."""
        if not isinstance(body, dict):
            return cls()
        return cls(room_id=body.get("roomId"))


class BookingIdResponse(BaseModel):
    bookingId: int


class BookingWithRoomResponse(BaseModel):
    id: int
    Room: RoomResponse

    @classmethod
    def from_booking(cls, booking) -> "BookingWithRoomResponse":
        return cls(id=booking.id, Room=RoomResponse.from_room(booking.room))

"""
Pydantic schemas for hotels and rooms.
"""

from datetime import datetime
from pydantic import BaseModel


class RoomResponse(BaseModel):
    id: int
    name: str
    capacity: int
    hotelId: int
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_room(cls, room) -> "RoomResponse":
        return cls(
            id=room.id,
            name=room.name,
            capacity=room.capacity,
            hotelId=room.hotel_id,
            createdAt=room.created_at,
            updatedAt=room.updated_at,
        )


class RoomAvailability(RoomResponse):
    occupied: int
    available: int


class HotelResponse(BaseModel):
    id: int
    name: str
    image: str
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_hotel(cls, hotel) -> "HotelResponse":
        return cls(
            id=hotel.id,
            name=hotel.name,
            image=hotel.image,
            createdAt=hotel.created_at,
            updatedAt=hotel.updated_at,
        )


class HotelWithRoomsResponse(HotelResponse):
    Rooms: list[RoomAvailability]

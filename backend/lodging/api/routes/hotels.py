"""
Hotel listing for attendees eligible for lodging.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lodging.core.security import get_current_user_id
from lodging.db.session import get_db
from lodging.schemas.hotel import (
    HotelResponse,
    HotelWithRoomsResponse,
    RoomAvailability,
    RoomResponse,
)
from lodging.services import hotel_service

router = APIRouter(prefix="/hotels", tags=["Hotels"])


@router.get("", response_model=list[HotelResponse])
async def list_hotels(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    hotels = await hotel_service.list_hotels(db, user_id)
    return [HotelResponse.from_hotel(hotel) for hotel in hotels]


@router.get("/{hotel_id}", response_model=HotelWithRoomsResponse)
async def get_hotel(
    hotel_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Hotel details with every room and how many beds are still free."""
    hotel, occupancy = await hotel_service.get_hotel_rooms(db, user_id, hotel_id)

    rooms = []
    for room in hotel.rooms:
        occupied = occupancy.get(room.id, 0)
        rooms.append(
            RoomAvailability(
                **RoomResponse.from_room(room).model_dump(),
                occupied=occupied,
                available=max(room.capacity - occupied, 0),
            )
        )
    return HotelWithRoomsResponse(**HotelResponse.from_hotel(hotel).model_dump(), Rooms=rooms)

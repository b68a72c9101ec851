"""
Hotel browsing for attendees allowed to book lodging.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from lodging.core.exceptions import NotFoundError
from lodging.models.hotel import Hotel
from lodging.repositories import hotel_repository
from lodging.services.booking_service import ensure_lodging_eligibility


async def list_hotels(db: AsyncSession, user_id: int) -> list[Hotel]:
    await ensure_lodging_eligibility(db, user_id)
    return await hotel_repository.list_hotels(db)


async def get_hotel_rooms(db: AsyncSession, user_id: int, hotel_id: int) -> tuple[Hotel, dict[int, int]]:
    """
    Return a hotel with its rooms plus the number of bookings per room id.
    Rooms without bookings are absent from the mapping.
    """
    await ensure_lodging_eligibility(db, user_id)

    hotel = await hotel_repository.get_hotel_with_rooms(db, hotel_id)
    if not hotel:
        raise NotFoundError(f"Hotel {hotel_id} not found")

    occupancy = await hotel_repository.count_bookings_per_room(db, [room.id for room in hotel.rooms])
    return hotel, occupancy

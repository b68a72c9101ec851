from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lodging.core.metrics import record_db_operation
from lodging.repositories import id_in_range
from lodging.models.booking import Booking
from lodging.models.hotel import Hotel, Room


async def list_hotels(db: AsyncSession) -> list[Hotel]:
    record_db_operation("read")
    result = await db.execute(select(Hotel).order_by(Hotel.id))
    return list(result.scalars().all())


async def get_hotel_with_rooms(db: AsyncSession, hotel_id: int) -> Optional[Hotel]:
    if not id_in_range(hotel_id):
        return None
    record_db_operation("read")
    result = await db.execute(
        select(Hotel)
        .where(Hotel.id == hotel_id)
        .options(selectinload(Hotel.rooms))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def count_bookings_per_room(db: AsyncSession, room_ids: list[int]) -> dict[int, int]:
    if not room_ids:
        return {}
    record_db_operation("read")
    result = await db.execute(
        select(Booking.room_id, func.count(Booking.id))
        .where(Booking.room_id.in_(room_ids))
        .group_by(Booking.room_id)
    )
    return {room_id: count for room_id, count in result.all()}


async def lock_room(db: AsyncSession, room_id: Optional[int]) -> Optional[Room]:
    """
    Read a room with a row lock held until the transaction ends.

    Concurrent bookings of the same room queue up behind the lock, so the
    occupancy count taken afterwards cannot be invalidated before our write.
    Dialects without FOR UPDATE (SQLite) ignore the clause.
    """
    if not id_in_range(room_id):
        return None
    record_db_operation("read")
    result = await db.execute(select(Room).where(Room.id == room_id).with_for_update())
    return result.scalar_one_or_none()

from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lodging.core.metrics import record_db_operation
from lodging.repositories import id_in_range
from lodging.models.booking import Booking
from lodging.models.hotel import Room


async def find_by_user_id(db: AsyncSession, user_id: int) -> Optional[Booking]:
    """The user's booking with its Room, or None."""
    record_db_operation("read")
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == user_id)
        .options(selectinload(Booking.room))
        .order_by(Booking.id)
        .limit(1)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_by_id(db: AsyncSession, booking_id: Optional[int]) -> Optional[Booking]:
    if not id_in_range(booking_id):
        return None
    record_db_operation("read")
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    return result.scalar_one_or_none()


async def count_by_room(db: AsyncSession, room_id: int, exclude_user_id: Optional[int] = None) -> int:
    record_db_operation("read")
    query = select(func.count(Booking.id)).where(Booking.room_id == room_id)
    if exclude_user_id is not None:
        query = query.where(Booking.user_id != exclude_user_id)
    return (await db.execute(query)).scalar_one()


async def create(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    record_db_operation("write")
    booking = Booking(user_id=user_id, room_id=room_id)
    db.add(booking)
    await db.flush()
    await db.refresh(booking)
    return booking


async def update_room(db: AsyncSession, booking: Booking, room: Room) -> Booking:
    record_db_operation("write")
    booking.room_id = room.id
    booking.room = room
    await db.flush()
    await db.refresh(booking)
    return booking

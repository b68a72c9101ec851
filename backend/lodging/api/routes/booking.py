"""
Booking endpoints: view, reserve and change a hotel room.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lodging.core.exceptions import NotFoundError
from lodging.core.security import get_current_user_id
from lodging.db.session import get_db
from lodging.schemas.booking import (
    BookingIdResponse,
    BookingRequest,
    BookingWithRoomResponse,
    parse_identifier,
)
from lodging.services import booking_service

router = APIRouter(prefix="/booking", tags=["Booking"])


@router.get("", response_model=BookingWithRoomResponse)
async def show_booking(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Return the caller's booking and the room it is for."""
    booking = await booking_service.get_booking(db, user_id)
    return BookingWithRoomResponse.from_booking(booking)


@router.post("", response_model=BookingIdResponse)
async def post_booking(
    body: Any = Body(default=None),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Reserve a room.

    A missing or malformed roomId is answered with 404 before any
    eligibility check runs.
    """
    room_id = BookingRequest.from_body(body).room_id
    if room_id is None:
        raise NotFoundError("roomId must be a positive integer")

    booking = await booking_service.create_booking(db, user_id, room_id)
    return BookingIdResponse(bookingId=booking.id)


@router.put("/{booking_id}", response_model=BookingIdResponse)
async def put_booking(
    booking_id: str,
    body: Any = Body(default=None),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Move the caller's booking to another room."""
    room_id = BookingRequest.from_body(body).room_id
    booking = await booking_service.update_booking(
        db, user_id, parse_identifier(booking_id), room_id
    )
    return BookingIdResponse(bookingId=booking.id)

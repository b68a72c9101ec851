"""
Booking validation workflow.

Each operation runs a fixed sequence of lookups and business-rule checks
and stops at the first failing one, raising the matching DomainError.
The order matters: when several rules are violated at once, the caller
sees the error of the earliest check.

CAPACITY ENFORCEMENT
====================
Occupancy is a COUNT over bookings, so "count, compare, then insert" is a
check-then-act sequence. Two requests for the last bed could both read
count < capacity and both insert. To prevent that:

  1. The target room is read with SELECT ... FOR UPDATE (lock_room), so a
     second request for the same room blocks until the first commits.
  2. Count, comparison and write all happen inside the request's single
     transaction (see lodging.db.session.get_db).
  3. The unique constraint on bookings.user_id backs up the
     one-booking-per-user rule if two requests from one user race.

Capacity is always measured against the room being booked into.
"""

import time
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lodging.core.exceptions import (
    DomainError,
    ForbiddenError,
    NotFoundError,
    PaymentRequiredError,
    UnauthorizedError,
)
from lodging.core.logging import get_logger
from lodging.core.metrics import booking_latency, record_booking_attempt
from lodging.models.booking import Booking
from lodging.models.ticket import Ticket, TicketStatus
from lodging.repositories import (
    booking_repository,
    enrollment_repository,
    hotel_repository,
    ticket_repository,
)

logger = get_logger(__name__)


@contextmanager
def _instrumented(operation: str, user_id: int):
    start = time.perf_counter()
    try:
        yield
    except DomainError as exc:
        record_booking_attempt(operation, exc.kind)
        logger.info(
            "booking_rejected",
            operation=operation,
            user_id=user_id,
            reason=exc.kind,
            detail=exc.message,
        )
        raise
    else:
        record_booking_attempt(operation, "success")
    finally:
        booking_latency.labels(operation=operation).observe(time.perf_counter() - start)


async def ensure_lodging_eligibility(db: AsyncSession, user_id: int) -> Ticket:
    """
    Check that the user may stay at an event hotel and return their ticket.

    Raises NotFoundError without an enrollment, PaymentRequiredError without
    a ticket or with an unpaid one, and UnauthorizedError when the ticket
    type is remote or does not include a hotel.
    """
    enrollment = await enrollment_repository.find_with_address_by_user_id(db, user_id)
    if not enrollment:
        raise NotFoundError("You have no enrollment for this event")

    ticket = await ticket_repository.find_ticket_by_enrollment_id(db, enrollment.id)
    if not ticket:
        raise PaymentRequiredError("You have no ticket for this event")

    if ticket.status == TicketStatus.RESERVED:
        raise PaymentRequiredError("Your ticket hasn't been paid yet")

    if ticket.ticket_type.is_remote or not ticket.ticket_type.includes_hotel:
        raise UnauthorizedError("Your ticket does not include lodging")

    return ticket


async def get_booking(db: AsyncSession, user_id: int) -> Booking:
    """Return the user's booking with its room loaded."""
    booking = await booking_repository.find_by_user_id(db, user_id)
    if not booking:
        raise NotFoundError("You have no booking")
    return booking


async def create_booking(db: AsyncSession, user_id: int, room_id: int) -> Booking:
    with _instrumented("create", user_id):
        await ensure_lodging_eligibility(db, user_id)

        room = await hotel_repository.lock_room(db, room_id)
        if not room:
            raise ForbiddenError(f"Room {room_id} does not exist")

        if await booking_repository.find_by_user_id(db, user_id):
            raise ForbiddenError("You already have a booking")

        occupied = await booking_repository.count_by_room(db, room.id)
        if occupied >= room.capacity:
            logger.warning(
                "room_full",
                room_id=room.id,
                capacity=room.capacity,
                occupied=occupied,
            )
            raise ForbiddenError(f"Room {room.id} is full")

        try:
            booking = await booking_repository.create(db, user_id, room.id)
        except IntegrityError:
            # Lost a race against another request from the same user
            raise ForbiddenError("You already have a booking")

    logger.info("booking_created", booking_id=booking.id, user_id=user_id, room_id=room.id)
    return booking


async def update_booking(
    db: AsyncSession,
    user_id: int,
    booking_id: Optional[int],
    room_id: Optional[int],
) -> Booking:
    """
    Move the user's booking to another room.

    booking_id and room_id may be None when the request carried values
    that are not valid identifiers; they then match nothing.
    """
    with _instrumented("update", user_id):
        current = await booking_repository.find_by_user_id(db, user_id)
        if not current or not current.room_id:
            raise NotFoundError("You have no booking")

        room = await hotel_repository.lock_room(db, room_id)
        if not room:
            raise NotFoundError(f"Room {room_id} does not exist")

        # Ownership of the addressed booking is checked before the id match so
        # that targeting someone else's booking is 403, not 401.
        addressed = await booking_repository.find_by_id(db, booking_id)
        if addressed and addressed.user_id != user_id:
            raise ForbiddenError("This booking belongs to someone else")

        if current.id != booking_id:
            raise UnauthorizedError("You can only change your own booking")

        occupied = await booking_repository.count_by_room(db, room.id, exclude_user_id=user_id)
        if occupied >= room.capacity:
            logger.warning(
                "room_full",
                room_id=room.id,
                capacity=room.capacity,
                occupied=occupied,
            )
            raise ForbiddenError(f"Room {room.id} is full")

        previous_room_id = current.room_id
        booking = await booking_repository.update_room(db, current, room)

    logger.info(
        "booking_updated",
        booking_id=booking.id,
        user_id=user_id,
        from_room_id=previous_room_id,
        to_room_id=room.id,
    )
    return booking

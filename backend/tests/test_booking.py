"""
HTTP tests for GET/POST/PUT /booking.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from lodging.models.booking import Booking
from lodging.models.ticket import TicketStatus
from tests import factories


async def _booking_count(db_session) -> int:
    return (await db_session.execute(select(func.count(Booking.id)))).scalar_one()


async def _signed_in_other_user(db_session):
    user = await factories.create_user(db_session)
    token = await factories.create_session(db_session, user)
    return user, {"Authorization": f"Bearer {token}"}


# GET /booking

@pytest.mark.asyncio
async def test_get_booking_without_booking(client: AsyncClient, auth_headers, eligible_user):
    response = await client.get("/booking", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_booking_returns_booking_with_room(client: AsyncClient, db_session, auth_headers, test_user):
    room = await factories.create_room(db_session, capacity=3)
    booking = await factories.create_booking(db_session, test_user, room)

    response = await client.get("/booking", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == booking.id
    assert data["Room"]["id"] == room.id
    assert data["Room"]["name"] == room.name
    assert data["Room"]["capacity"] == 3
    assert data["Room"]["hotelId"] == room.hotel_id


# POST /booking

@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, db_session, auth_headers, eligible_user):
    """Eligible user and free room: exactly one new booking."""
    room = await factories.create_room(db_session, capacity=2)
    assert await _booking_count(db_session) == 0

    response = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)

    assert response.status_code == 200
    booking_id = response.json()["bookingId"]
    assert await _booking_count(db_session) == 1
    booking = (await db_session.execute(select(Booking).where(Booking.id == booking_id))).scalar_one()
    assert booking.user_id == eligible_user.id
    assert booking.room_id == room.id


@pytest.mark.asyncio
async def test_create_booking_accepts_numeric_string(client: AsyncClient, db_session, auth_headers, eligible_user):
    room = await factories.create_room(db_session)
    response = await client.post("/booking", json={"roomId": str(room.id)}, headers=auth_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"roomId": "abc"}, {"roomId": 0}, {"roomId": -4}, {"roomId": 1.5}, {}])
async def test_create_booking_invalid_room_id(client: AsyncClient, auth_headers, eligible_user, body):
    """Malformed roomId is rejected with 404 before the workflow runs."""
    response = await client.post("/booking", json=body, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_booking_without_body(client: AsyncClient, auth_headers, eligible_user):
    response = await client.post("/booking", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[1], "abc", 7, [{"roomId": 1}]])
async def test_create_booking_non_object_body(client: AsyncClient, db_session, auth_headers, eligible_user, body):
    """A JSON body that is not an object carries no roomId."""
    await factories.create_room(db_session)
    response = await client.post("/booking", json=body, headers=auth_headers)
    assert response.status_code == 404
    assert await _booking_count(db_session) == 0


@pytest.mark.asyncio
async def test_create_booking_room_id_beyond_column_range(client: AsyncClient, db_session, auth_headers, eligible_user):
    """An id no INTEGER column can hold is an unknown room, not a crash."""
    response = await client.post("/booking", json={"roomId": 10**30}, headers=auth_headers)
    assert response.status_code == 403
    assert await _booking_count(db_session) == 0


@pytest.mark.asyncio
async def test_create_booking_without_enrollment(client: AsyncClient, db_session, auth_headers, test_user):
    room = await factories.create_room(db_session)
    response = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_booking_without_ticket(client: AsyncClient, db_session, auth_headers, test_user):
    await factories.create_enrollment(db_session, test_user)
    room = await factories.create_room(db_session)
    response = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 402


@pytest.mark.asyncio
@pytest.mark.parametrize("room_exists", [True, False])
async def test_create_booking_with_unpaid_ticket(client: AsyncClient, db_session, auth_headers, test_user, room_exists):
    """RESERVED ticket gives 402 whether or not the room is valid."""
    enrollment = await factories.create_enrollment(db_session, test_user)
    ticket_type = await factories.create_ticket_type(db_session)
    await factories.create_ticket(db_session, enrollment, ticket_type, status=TicketStatus.RESERVED)
    room_id = (await factories.create_room(db_session)).id if room_exists else 9999

    response = await client.post("/booking", json={"roomId": room_id}, headers=auth_headers)
    assert response.status_code == 402


@pytest.mark.asyncio
@pytest.mark.parametrize("is_remote, includes_hotel", [(True, True), (True, False), (False, False)])
async def test_create_booking_ineligible_ticket_type(
    client: AsyncClient, db_session, auth_headers, test_user, is_remote, includes_hotel
):
    """Remote or hotel-less ticket types give 401 even with free capacity."""
    enrollment = await factories.create_enrollment(db_session, test_user)
    ticket_type = await factories.create_ticket_type(
        db_session, is_remote=is_remote, includes_hotel=includes_hotel
    )
    await factories.create_ticket(db_session, enrollment, ticket_type, status=TicketStatus.PAID)
    room = await factories.create_room(db_session, capacity=10)

    response = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 401
    assert await _booking_count(db_session) == 0


@pytest.mark.asyncio
async def test_create_booking_unknown_room(client: AsyncClient, auth_headers, eligible_user):
    response = await client.post("/booking", json={"roomId": 9999}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_booking_full_room(client: AsyncClient, db_session, auth_headers, eligible_user):
    """Capacity 1 with one booking: another user's request is refused."""
    room = await factories.create_room(db_session, capacity=1)
    other = await factories.create_user(db_session)
    await factories.create_booking(db_session, other, room)

    response = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)

    assert response.status_code == 403
    assert await _booking_count(db_session) == 1


@pytest.mark.asyncio
async def test_create_booking_zero_capacity_room(client: AsyncClient, db_session, auth_headers, eligible_user):
    room = await factories.create_room(db_session, capacity=0)
    response = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_booking_twice(client: AsyncClient, db_session, auth_headers, eligible_user):
    """A second reservation is refused; rooms are changed through PUT."""
    room = await factories.create_room(db_session, capacity=5)

    first = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)
    second = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)

    assert first.status_code == 200
    assert second.status_code == 403
    assert await _booking_count(db_session) == 1


@pytest.mark.asyncio
async def test_create_then_get_booking(client: AsyncClient, db_session, auth_headers, eligible_user):
    room = await factories.create_room(db_session, capacity=2)
    created = await client.post("/booking", json={"roomId": room.id}, headers=auth_headers)

    response = await client.get("/booking", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["id"] == created.json()["bookingId"]
    assert response.json()["Room"]["id"] == room.id


# PUT /booking/{bookingId}

@pytest.mark.asyncio
async def test_update_booking(client: AsyncClient, db_session, auth_headers, test_user):
    old_room = await factories.create_room(db_session, capacity=1)
    new_room = await factories.create_room(db_session, capacity=1)
    booking = await factories.create_booking(db_session, test_user, old_room)

    response = await client.put(
        f"/booking/{booking.id}", json={"roomId": new_room.id}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["bookingId"] == booking.id
    stored = (await db_session.execute(select(Booking.room_id).where(Booking.id == booking.id))).scalar_one()
    assert stored == new_room.id
    assert await _booking_count(db_session) == 1


@pytest.mark.asyncio
async def test_update_booking_without_booking(client: AsyncClient, db_session, auth_headers, test_user):
    room = await factories.create_room(db_session)
    response = await client.put("/booking/1", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"roomId": 0}, {"roomId": 9999}, {"roomId": "abc"}, {}])
async def test_update_booking_bad_room(client: AsyncClient, db_session, auth_headers, test_user, body):
    room = await factories.create_room(db_session)
    booking = await factories.create_booking(db_session, test_user, room)

    response = await client.put(f"/booking/{booking.id}", json=body, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_someone_elses_booking(client: AsyncClient, db_session, auth_headers, test_user):
    """Addressing another user's booking is forbidden regardless of capacity."""
    own_room = await factories.create_room(db_session, capacity=1)
    target_room = await factories.create_room(db_session, capacity=10)
    await factories.create_booking(db_session, test_user, own_room)
    other = await factories.create_user(db_session)
    foreign = await factories.create_booking(db_session, other, await factories.create_room(db_session))

    response = await client.put(
        f"/booking/{foreign.id}", json={"roomId": target_room.id}, headers=auth_headers
    )

    assert response.status_code == 403
    stored = (await db_session.execute(select(Booking.room_id).where(Booking.id == foreign.id))).scalar_one()
    assert stored != target_room.id


@pytest.mark.asyncio
@pytest.mark.parametrize("booking_path", ["9999", "abc", "0", "99999999999"])
async def test_update_booking_unknown_id(client: AsyncClient, db_session, auth_headers, test_user, booking_path):
    """A bookingId that is not the caller's current booking gives 401."""
    room = await factories.create_room(db_session)
    target = await factories.create_room(db_session)
    await factories.create_booking(db_session, test_user, room)

    response = await client.put(
        f"/booking/{booking_path}", json={"roomId": target.id}, headers=auth_headers
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_booking_full_room(client: AsyncClient, db_session, auth_headers, test_user):
    room = await factories.create_room(db_session, capacity=1)
    full_room = await factories.create_room(db_session, capacity=1)
    booking = await factories.create_booking(db_session, test_user, room)
    other = await factories.create_user(db_session)
    await factories.create_booking(db_session, other, full_room)

    response = await client.put(
        f"/booking/{booking.id}", json={"roomId": full_room.id}, headers=auth_headers
    )

    assert response.status_code == 403
    stored = (await db_session.execute(select(Booking.room_id).where(Booking.id == booking.id))).scalar_one()
    assert stored == room.id


@pytest.mark.asyncio
async def test_update_booking_same_room_counts_caller_once(client: AsyncClient, db_session, auth_headers, test_user):
    """Re-selecting your own single-bed room does not count you twice."""
    room = await factories.create_room(db_session, capacity=1)
    booking = await factories.create_booking(db_session, test_user, room)

    response = await client.put(
        f"/booking/{booking.id}", json={"roomId": room.id}, headers=auth_headers
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_frees_previous_room(client: AsyncClient, db_session, auth_headers, test_user):
    room = await factories.create_room(db_session, capacity=1)
    new_room = await factories.create_room(db_session, capacity=1)
    booking = await factories.create_booking(db_session, test_user, room)

    moved = await client.put(f"/booking/{booking.id}", json={"roomId": new_room.id}, headers=auth_headers)
    assert moved.status_code == 200

    other, other_headers = await _signed_in_other_user(db_session)
    enrollment = await factories.create_enrollment(db_session, other)
    ticket_type = await factories.create_ticket_type(db_session)
    await factories.create_ticket(db_session, enrollment, ticket_type)

    response = await client.post("/booking", json={"roomId": room.id}, headers=other_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [[1], "abc"])
async def test_update_booking_non_object_body(client: AsyncClient, db_session, auth_headers, test_user, body):
    room = await factories.create_room(db_session)
    booking = await factories.create_booking(db_session, test_user, room)

    response = await client.put(f"/booking/{booking.id}", json=body, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_booking_room_id_beyond_column_range(client: AsyncClient, db_session, auth_headers, test_user):
    room = await factories.create_room(db_session)
    booking = await factories.create_booking(db_session, test_user, room)

    response = await client.put(f"/booking/{booking.id}", json={"roomId": 10**30}, headers=auth_headers)

    assert response.status_code == 404
    stored = (await db_session.execute(select(Booking.room_id).where(Booking.id == booking.id))).scalar_one()
    assert stored == room.id

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lodging.core.metrics import record_db_operation
from lodging.models.ticket import Ticket


async def find_ticket_by_enrollment_id(db: AsyncSession, enrollment_id: int) -> Optional[Ticket]:
    """Ticket of an enrollment with its TicketType eagerly loaded."""
    record_db_operation("read")
    result = await db.execute(
        select(Ticket)
        .where(Ticket.enrollment_id == enrollment_id)
        .options(selectinload(Ticket.ticket_type))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()

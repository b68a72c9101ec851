from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lodging.core.metrics import record_db_operation
from lodging.models.enrollment import Enrollment


async def find_with_address_by_user_id(db: AsyncSession, user_id: int) -> Optional[Enrollment]:
    record_db_operation("read")
    result = await db.execute(select(Enrollment).where(Enrollment.user_id == user_id))
    return result.scalar_one_or_none()

"""
Booking model linking a user to a hotel room for the event.

- Unique constraint on user_id: a user holds at most one booking
- Room changes mutate room_id in place; bookings are never deleted here
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from lodging.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False, index=True)

    user = relationship("User", back_populates="booking")
    room = relationship("Room", back_populates="bookings", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_booking_user"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, room={self.room_id})>"

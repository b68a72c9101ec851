"""
Hotels and their bookable rooms.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from lodging.db.base import Base, TimestampMixin


class Hotel(Base, TimestampMixin):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    image = Column(String(1000), nullable=False)

    rooms = relationship("Room", back_populates="hotel", order_by="Room.id")

    def __repr__(self) -> str:
        return f"<Hotel(id={self.id}, name={self.name})>"


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)

    hotel = relationship("Hotel", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room")

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="check_room_capacity_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, hotel={self.hotel_id}, capacity={self.capacity})>"

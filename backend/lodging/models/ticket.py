"""
Ticket types and the tickets attendees hold.

The ticket type decides lodging eligibility: only in-person types that
include a hotel can book a room, and only once the ticket is paid.
"""

import enum

from sqlalchemy import Column, Integer, String, Boolean, Enum, ForeignKey
from sqlalchemy.orm import relationship

from lodging.db.base import Base, TimestampMixin


class TicketStatus(str, enum.Enum):
    RESERVED = "RESERVED"
    PAID = "PAID"


class TicketType(Base, TimestampMixin):
    __tablename__ = "ticket_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False)
    is_remote = Column(Boolean, nullable=False)
    includes_hotel = Column(Boolean, nullable=False)

    tickets = relationship("Ticket", back_populates="ticket_type")


class Ticket(Base, TimestampMixin):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    ticket_type_id = Column(Integer, ForeignKey("ticket_types.id"), nullable=False)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), unique=True, nullable=False)
    status = Column(Enum(TicketStatus, name="ticket_status"), nullable=False)

    ticket_type = relationship("TicketType", back_populates="tickets", lazy="selectin")
    enrollment = relationship("Enrollment", back_populates="ticket")

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, enrollment={self.enrollment_id}, status={self.status})>"

"""
Event registration record (one per user) and its postal address.
"""

from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship

from lodging.db.base import Base, TimestampMixin


class Enrollment(Base, TimestampMixin):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    cpf = Column(String(11), nullable=False)
    birthday = Column(Date, nullable=False)
    phone = Column(String(20), nullable=False)

    user = relationship("User", back_populates="enrollment")
    address = relationship("Address", back_populates="enrollment", uselist=False, lazy="selectin")
    ticket = relationship("Ticket", back_populates="enrollment", uselist=False)

    def __repr__(self) -> str:
        return f"<Enrollment(id={self.id}, user={self.user_id})>"


class Address(Base, TimestampMixin):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True, index=True)
    enrollment_id = Column(Integer, ForeignKey("enrollments.id"), unique=True, nullable=False)
    cep = Column(String(8), nullable=False)
    street = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False)
    state = Column(String(2), nullable=False)
    number = Column(String(20), nullable=False)
    neighborhood = Column(String(255), nullable=False)
    address_detail = Column(String(255), nullable=True)

    enrollment = relationship("Enrollment", back_populates="address")

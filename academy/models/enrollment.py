from enum import Enum
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, String, func
from academy.db.base import Base


class EnrollmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    TEST = "TEST"
    WAITLISTED = "WAITLISTED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


# Statuses that occupy a seat and unlock materials
SEATED_STATUSES = frozenset({EnrollmentStatus.CONFIRMED, EnrollmentStatus.TEST})


class Enrollment(Base):
    __tablename__ = "enrollments"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    class_id: Mapped[int] = mapped_column(ForeignKey("classes.id"), index=True)
    status: Mapped[EnrollmentStatus] = mapped_column(SAEnum(EnrollmentStatus, native_enum=False, length=20),
                                                     default=EnrollmentStatus.PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")
    class_ = relationship("Class")
    payment = relationship("Payment", back_populates="enrollment", uselist=False)


class EventRegistration(Base):
    __tablename__ = "event_registrations"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id"), index=True)
    status: Mapped[EnrollmentStatus] = mapped_column(SAEnum(EnrollmentStatus, native_enum=False, length=20),
                                                     default=EnrollmentStatus.PENDING)
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    registration_type: Mapped[str] = mapped_column(String(20), default="individual")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")
    event = relationship("Event")
    payment = relationship("Payment", back_populates="event_registration", uselist=False)

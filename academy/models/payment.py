from enum import Enum
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import DateTime, Enum as SAEnum, Float, ForeignKey, String, func
from academy.db.base import Base


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"


class PaymentType(str, Enum):
    CLASS = "CLASS"
    EVENT = "EVENT"


class Payment(Base):
    __tablename__ = "payments"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    amount: Mapped[float] = mapped_column(Float)
    status: Mapped[PaymentStatus] = mapped_column(SAEnum(PaymentStatus, native_enum=False, length=20),
                                                  default=PaymentStatus.PENDING)
    type: Mapped[PaymentType] = mapped_column(SAEnum(PaymentType, native_enum=False, length=10))
    enrollment_id: Mapped[Optional[int]] = mapped_column(ForeignKey("enrollments.id"), nullable=True, unique=True)
    event_registration_id: Mapped[Optional[int]] = mapped_column(ForeignKey("event_registrations.id"),
                                                                 nullable=True, unique=True)
    checkout_session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    enrollment = relationship("Enrollment", back_populates="payment")
    event_registration = relationship("EventRegistration", back_populates="payment")

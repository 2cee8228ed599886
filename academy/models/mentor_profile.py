from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academy.db.base import Base


class MentorProfile(Base):
    __tablename__ = "mentor_profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    bio: Mapped[str] = mapped_column(Text())
    specialization: Mapped[str] = mapped_column(String(200))
    experience: Mapped[int] = mapped_column(Integer, default=0)  # years
    education: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    certifications: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    availability: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    hourly_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="mentor_profile")

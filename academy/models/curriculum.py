from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from academy.db.base import Base


class CurriculumItem(Base):
    __tablename__ = "curriculum_items"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    class_id: Mapped[int] = mapped_column(ForeignKey("classes.id"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text(), nullable=True)
    # LECTURE | READING | VIDEO | ASSIGNMENT; free text so unknown tags survive
    type: Mapped[str] = mapped_column(String(20))
    file_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)

    class_ = relationship("Class", back_populates="curriculum_items")

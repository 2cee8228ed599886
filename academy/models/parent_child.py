from enum import Enum
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, UniqueConstraint, func
from academy.db.base import Base


class RelationshipStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ParentChild(Base):
    __tablename__ = "parent_children"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    parent_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    child_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    status: Mapped[RelationshipStatus] = mapped_column(SAEnum(RelationshipStatus, native_enum=False, length=20),
                                                       default=RelationshipStatus.PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    parent = relationship("User", foreign_keys=[parent_id])
    child = relationship("User", foreign_keys=[child_id])

    __table_args__ = (UniqueConstraint("parent_id", "child_id", name="uq_parent_child_pair"),)

# academy/crud/enrollment.py
"""Enrollment and event-registration persistence.

Seat accounting lives here: `current_count` on the class or event tracks the
records in a seated status and moves only through `set_status`.
"""
import logging
from typing import List, Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.crud.base import CRUDBase
from academy.models.enrollment import Enrollment, EnrollmentStatus, EventRegistration, SEATED_STATUSES
from academy.schemas.enrollment import EnrollmentCreate, EnrollmentUpdate, RegistrationCreate

logger = logging.getLogger(__name__)

Record = Union[Enrollment, EventRegistration]


def _offering(record: Record):
    return record.class_ if isinstance(record, Enrollment) else record.event


def set_status(db: Session, record: Record, status: EnrollmentStatus) -> Record:
    """Moves a record to `status`, adjusting the offering's seat count. Does not commit."""
    previous = record.status
    if previous == status:
        return record
    offering = _offering(record)
    seats = getattr(record, "quantity", 1) or 1
    if previous not in SEATED_STATUSES and status in SEATED_STATUSES:
        offering.current_count = (offering.current_count or 0) + seats
    elif previous in SEATED_STATUSES and status not in SEATED_STATUSES:
        offering.current_count = max(0, (offering.current_count or 0) - seats)
    record.status = status
    db.add(record); db.add(offering)
    logger.info("%s %s: %s -> %s", type(record).__name__, record.id, previous.value if previous else None, status.value)
    return record


class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentCreate, EnrollmentUpdate]):
    def active_for(self, db: Session, *, user_id: int, class_id: int) -> Optional[Enrollment]:
        """Most recent non-cancelled enrollment of a user in a class."""
        return db.scalars(
            select(Enrollment)
            .where(Enrollment.user_id == user_id, Enrollment.class_id == class_id,
                   Enrollment.status != EnrollmentStatus.CANCELLED)
            .order_by(Enrollment.id.desc())
            .limit(1)
        ).first()

    def for_user(self, db: Session, user_id: int) -> List[Enrollment]:
        return list(db.scalars(
            select(Enrollment).where(Enrollment.user_id == user_id).order_by(Enrollment.id.desc())
        ))

    def open(self, db: Session, *, user_id: int, class_id: int, status: EnrollmentStatus) -> Enrollment:
        """Adds a new enrollment in PENDING, then moves it to `status`. Does not commit."""
        enr = Enrollment(user_id=user_id, class_id=class_id, status=EnrollmentStatus.PENDING)
        db.add(enr); db.flush()
        set_status(db, enr, status)
        return enr


class CRUDRegistration(CRUDBase[EventRegistration, RegistrationCreate, RegistrationCreate]):
    def active_for(self, db: Session, *, user_id: int, event_id: int) -> Optional[EventRegistration]:
        return db.scalars(
            select(EventRegistration)
            .where(EventRegistration.user_id == user_id, EventRegistration.event_id == event_id,
                   EventRegistration.status != EnrollmentStatus.CANCELLED)
            .order_by(EventRegistration.id.desc())
            .limit(1)
        ).first()

    def for_user(self, db: Session, user_id: int) -> List[EventRegistration]:
        return list(db.scalars(
            select(EventRegistration).where(EventRegistration.user_id == user_id)
            .order_by(EventRegistration.id.desc())
        ))

    def open(self, db: Session, *, user_id: int, event_id: int, status: EnrollmentStatus,
             quantity: int = 1, registration_type: str = "individual") -> EventRegistration:
        reg = EventRegistration(user_id=user_id, event_id=event_id, status=EnrollmentStatus.PENDING,
                                quantity=quantity, registration_type=registration_type)
        db.add(reg); db.flush()
        set_status(db, reg, status)
        return reg


enrollment_crud = CRUDEnrollment(Enrollment, "Enrollment")
registration_crud = CRUDRegistration(EventRegistration, "Event registration")

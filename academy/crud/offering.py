# academy/crud/offering.py
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.crud.base import CRUDBase
from academy.models.class_ import Class
from academy.models.event import Event
from academy.schemas.offering import ClassCreate, ClassUpdate, EventCreate, EventUpdate


class CRUDClass(CRUDBase[Class, ClassCreate, ClassUpdate]):
    def list(self, db: Session, *, active_only: bool = False, instructor_id: Optional[int] = None) -> List[Class]:
        stmt = select(Class).order_by(Class.start_date.is_(None), Class.start_date, Class.id)
        if active_only:
            stmt = stmt.where(Class.is_active.is_(True))
        if instructor_id is not None:
            stmt = stmt.where(Class.instructor_id == instructor_id)
        return list(db.scalars(stmt))


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    def list(self, db: Session, *, active_only: bool = False) -> List[Event]:
        stmt = select(Event).order_by(Event.date.is_(None), Event.date, Event.id)
        if active_only:
            stmt = stmt.where(Event.is_active.is_(True))
        return list(db.scalars(stmt))


class_crud = CRUDClass(Class, "Class")
event_crud = CRUDEvent(Event, "Event")

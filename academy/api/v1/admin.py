# academy/api/v1/admin.py
from __future__ import annotations
import logging
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from academy.api.deps import get_db
from academy.api.permissions import require_admin
from academy.core.errors import AppError, Forbidden
from academy.crud.enrollment import enrollment_crud
from academy.crud.offering import class_crud, event_crud
from academy.crud.user import user_crud
from academy.models.class_ import Class
from academy.models.enrollment import Enrollment, EnrollmentStatus
from academy.models.event import Event
from academy.models.payment import Payment, PaymentStatus
from academy.models.user import User
from academy.schemas.common import Message, Pagination
from academy.schemas.enrollment import AdminEnrollmentPage, EnrollmentDetail, EnrollmentUpdate
from academy.schemas.offering import ClassCreate, ClassOut, ClassUpdate, EventCreate, EventOut, EventUpdate
from academy.schemas.user import UserCreate, UserOut, UserUpdate
from academy.services import enrollment as enrollment_service

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------
@router.get("/classes", response_model=List[ClassOut])
def admin_list_classes(db: Session = Depends(get_db)):
    return class_crud.list(db)


@router.post("/classes", response_model=ClassOut, status_code=status.HTTP_201_CREATED)
def admin_create_class(body: ClassCreate, db: Session = Depends(get_db)):
    obj = class_crud.create(db, body)
    logger.info("Class %s created", obj.id)
    return obj


@router.put("/classes/{class_id}", response_model=ClassOut)
def admin_update_class(class_id: int, body: ClassUpdate, db: Session = Depends(get_db)):
    cls = class_crud.get_or_404(db, class_id)
    return class_crud.update(db, cls, body)


@router.delete("/classes/{class_id}", response_model=ClassOut)
def admin_deactivate_class(class_id: int, db: Session = Depends(get_db)):
    # enrollments keep pointing at the class, so it is only switched off
    cls = class_crud.get_or_404(db, class_id)
    return class_crud.update(db, cls, {"is_active": False})


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@router.get("/events", response_model=List[EventOut])
def admin_list_events(db: Session = Depends(get_db)):
    return event_crud.list(db)


@router.post("/events", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def admin_create_event(body: EventCreate, db: Session = Depends(get_db)):
    return event_crud.create(db, body)


@router.put("/events/{event_id}", response_model=EventOut)
def admin_update_event(event_id: int, body: EventUpdate, db: Session = Depends(get_db)):
    event = event_crud.get_or_404(db, event_id)
    return event_crud.update(db, event, body)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@router.get("/users", response_model=List[UserOut])
def admin_list_users(
    q: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    stmt = select(User).order_by(User.id)
    if q:
        like = f"%{q.strip()}%"
        stmt = stmt.where(or_(User.name.ilike(like), User.email.ilike(like)))
    return list(db.scalars(stmt.offset(skip).limit(limit)))


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def admin_create_user(body: UserCreate, db: Session = Depends(get_db)):
    if user_crud.get_by_email(db, body.email):
        raise AppError("An account with this email already exists", code="EMAIL_TAKEN", status_code=409)
    return user_crud.create(db, body)


@router.patch("/users/{user_id}", response_model=UserOut)
def admin_update_user(user_id: int, body: UserUpdate, db: Session = Depends(get_db)):
    user = user_crud.get_or_404(db, user_id)
    return user_crud.update(db, user, body)


@router.delete("/users/{user_id}", response_model=Message)
def admin_delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    if user_id == admin.id:
        raise Forbidden("You cannot delete your own account")
    user_crud.get_or_404(db, user_id)
    user_crud.remove(db, user_id)
    return Message(message="User deleted")


# ---------------------------------------------------------------------------
# Enrollments
# ---------------------------------------------------------------------------
@router.get("/enrollments", response_model=AdminEnrollmentPage)
def admin_list_enrollments(
    status_: Optional[EnrollmentStatus] = Query(None, alias="status"),
    query: Optional[str] = Query(None),
    class_id: Optional[int] = Query(None, alias="classId"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    stmt = select(Enrollment).join(User, User.id == Enrollment.user_id).join(Class, Class.id == Enrollment.class_id)
    if status_ is not None:
        stmt = stmt.where(Enrollment.status == status_)
    if class_id is not None:
        stmt = stmt.where(Enrollment.class_id == class_id)
    if query:
        like = f"%{query.strip()}%"
        stmt = stmt.where(or_(User.name.ilike(like), User.email.ilike(like), Class.title.ilike(like)))

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    rows = db.scalars(stmt.order_by(Enrollment.id.desc()).offset((page - 1) * limit).limit(limit))
    return AdminEnrollmentPage(
        enrollments=[EnrollmentDetail.model_validate(e) for e in rows],
        pagination=Pagination(total=total, page=page, limit=limit, pages=math.ceil(total / limit)),
    )


@router.patch("/enrollments/{enrollment_id}", response_model=EnrollmentDetail)
def admin_update_enrollment(enrollment_id: int, body: EnrollmentUpdate, db: Session = Depends(get_db)):
    enr = enrollment_crud.get_or_404(db, enrollment_id)
    return enrollment_service.change_status(db, enr, body.status)


# ---------------------------------------------------------------------------
# Dashboard numbers
# ---------------------------------------------------------------------------
@router.get("/stats")
def admin_stats(db: Session = Depends(get_db)):
    by_role = dict(db.execute(select(User.role, func.count()).group_by(User.role)).all())
    by_status = dict(db.execute(select(Enrollment.status, func.count()).group_by(Enrollment.status)).all())
    revenue = db.scalar(select(func.coalesce(func.sum(Payment.amount), 0.0))
                        .where(Payment.status == PaymentStatus.COMPLETED))
    return {
        "users": sum(by_role.values()),
        "usersByRole": {role.value: n for role, n in by_role.items()},
        "classes": db.scalar(select(func.count()).select_from(Class)) or 0,
        "activeClasses": db.scalar(select(func.count()).select_from(Class).where(Class.is_active.is_(True))) or 0,
        "events": db.scalar(select(func.count()).select_from(Event)) or 0,
        "enrollments": sum(by_status.values()),
        "enrollmentsByStatus": {s.value: n for s, n in by_status.items()},
        "revenue": float(revenue or 0.0),
    }

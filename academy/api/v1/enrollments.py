# academy/api/v1/enrollments.py
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.api.deps import get_current_user, get_db
from academy.core.errors import Forbidden
from academy.core.roles import is_admin
from academy.crud.enrollment import enrollment_crud
from academy.models.enrollment import Enrollment, EnrollmentStatus
from academy.models.user import User
from academy.schemas.enrollment import EnrollmentCreate, EnrollmentCreated, EnrollmentDetail, EnrollmentUpdate
from academy.services import enrollment as enrollment_service
from academy.services.checkout import CheckoutProvider, get_checkout_provider

router = APIRouter()


@router.post("", response_model=EnrollmentCreated, status_code=status.HTTP_201_CREATED)
def create_enrollment(
    body: EnrollmentCreate,
    response: Response,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    provider: CheckoutProvider = Depends(get_checkout_provider),
):
    result = enrollment_service.enroll(db, provider, user, body.class_id,
                                       child_id=body.child_id, test=body.is_test_registration)
    if result.record is None:
        # demo checkout: nothing persisted
        response.status_code = status.HTTP_200_OK
    message = result.message or "Complete payment to confirm your enrollment"
    return EnrollmentCreated(message=message, enrollment=result.record, url=result.url)


@router.get("", response_model=List[EnrollmentDetail])
def list_enrollments(
    class_id: Optional[int] = Query(None, alias="classId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    status_: Optional[EnrollmentStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    stmt = select(Enrollment).order_by(Enrollment.id.desc())
    # non-admins only ever see their own rows
    if not is_admin(user.role):
        stmt = stmt.where(Enrollment.user_id == user.id)
    elif user_id is not None:
        stmt = stmt.where(Enrollment.user_id == user_id)
    if class_id is not None:
        stmt = stmt.where(Enrollment.class_id == class_id)
    if status_ is not None:
        stmt = stmt.where(Enrollment.status == status_)
    return list(db.scalars(stmt))


@router.get("/{enrollment_id}", response_model=EnrollmentDetail)
def get_enrollment(enrollment_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    enr = enrollment_crud.get_or_404(db, enrollment_id)
    if not enrollment_service.can_manage(db, user, enr):
        raise Forbidden()
    return enr


@router.patch("/{enrollment_id}", response_model=EnrollmentDetail)
def update_enrollment(
    enrollment_id: int,
    body: EnrollmentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    enr = enrollment_crud.get_or_404(db, enrollment_id)
    if is_admin(user.role):
        return enrollment_service.change_status(db, enr, body.status)
    if body.status is not EnrollmentStatus.CANCELLED:
        raise Forbidden("Only administrators can set this status")
    return enrollment_service.leave(db, user, enr)

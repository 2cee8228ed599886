# academy/api/v1/user.py
"""The signed-in user's own enrollments and event registrations."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.api.deps import get_current_user, get_db
from academy.crud.enrollment import enrollment_crud, registration_crud
from academy.models.user import User
from academy.schemas.enrollment import (
    EnrollmentDetail, EnrollmentList, LeaveIn, RegistrationDetail, RegistrationLeaveIn, RegistrationList,
)
from academy.services import enrollment as enrollment_service

router = APIRouter()


@router.get("/enrollments", response_model=EnrollmentList)
def my_enrollments(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return EnrollmentList(enrollments=[EnrollmentDetail.model_validate(e) for e in enrollment_crud.for_user(db, user.id)])


@router.post("/enrollments/leave", response_model=EnrollmentDetail)
def leave_class(body: LeaveIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    enr = enrollment_crud.get_or_404(db, body.enrollment_id)
    return enrollment_service.leave(db, user, enr)


@router.get("/event-registrations", response_model=RegistrationList)
def my_registrations(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    regs = registration_crud.for_user(db, user.id)
    return RegistrationList(registrations=[RegistrationDetail.model_validate(r) for r in regs])


@router.post("/event-registrations/leave", response_model=RegistrationDetail)
def leave_event(body: RegistrationLeaveIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    reg = registration_crud.get_or_404(db, body.registration_id)
    return enrollment_service.leave(db, user, reg)

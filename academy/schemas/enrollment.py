# academy/schemas/enrollment.py
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from academy.models.enrollment import EnrollmentStatus
from academy.models.payment import PaymentStatus
from academy.schemas.common import CamelModel, Pagination
from academy.schemas.offering import ClassSummary, EventSummary
from academy.schemas.user import UserSummary


class PaymentOut(CamelModel):
    id: int
    amount: float
    status: PaymentStatus


class EnrollmentCreate(CamelModel):
    class_id: int
    child_id: Optional[int] = None
    is_test_registration: bool = False


class EnrollmentUpdate(CamelModel):
    status: EnrollmentStatus


class EnrollmentOut(CamelModel):
    id: int
    user_id: int
    class_id: int
    status: EnrollmentStatus
    created_at: Optional[datetime] = None
    payment: Optional[PaymentOut] = None


class EnrollmentDetail(EnrollmentOut):
    class_: Optional[ClassSummary] = Field(default=None, alias="class")
    user: Optional[UserSummary] = None


class EnrollmentCreated(CamelModel):
    message: str
    enrollment: Optional[EnrollmentOut] = None
    url: Optional[str] = None


class EnrollmentList(CamelModel):
    enrollments: List[EnrollmentDetail]


class AdminEnrollmentPage(CamelModel):
    enrollments: List[EnrollmentDetail]
    pagination: Pagination


class LeaveIn(CamelModel):
    enrollment_id: int


class RegistrationCreate(CamelModel):
    event_id: int
    quantity: int = Field(default=1, ge=1)
    registration_type: str = "individual"
    is_test_registration: bool = False


class RegistrationOut(CamelModel):
    id: int
    user_id: int
    event_id: int
    status: EnrollmentStatus
    quantity: int
    registration_type: str
    created_at: Optional[datetime] = None
    payment: Optional[PaymentOut] = None


class RegistrationDetail(RegistrationOut):
    event: Optional[EventSummary] = None


class RegistrationCreated(CamelModel):
    message: str
    registration: Optional[RegistrationOut] = None
    url: Optional[str] = None


class RegistrationList(CamelModel):
    registrations: List[RegistrationDetail]


class RegistrationLeaveIn(CamelModel):
    registration_id: int

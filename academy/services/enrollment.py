# academy/services/enrollment.py
"""Enrollment, registration and checkout workflows shared by the routers.

Every function here works inside the request's session and commits once at
the end; a failure before that leaves the database untouched.
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.core.config import settings
from academy.core.errors import (
    AlreadyEnrolled, AlreadyRegistered, AppError, CheckoutFailed, Forbidden, NotFound,
    OfferingFull, OfferingUnavailable,
)
from academy.core.roles import Role, is_admin
from academy.crud.enrollment import enrollment_crud, registration_crud, set_status
from academy.crud.offering import class_crud, event_crud
from academy.models.class_ import Class
from academy.models.enrollment import Enrollment, EnrollmentStatus, EventRegistration, SEATED_STATUSES
from academy.models.event import Event
from academy.models.parent_child import ParentChild, RelationshipStatus
from academy.models.payment import Payment, PaymentStatus, PaymentType
from academy.models.user import User
from academy.services import notifications
from academy.services.checkout import (
    DEMO_MESSAGE, DEMO_URL, CheckoutError, CheckoutProvider, LineItem, to_minor_units,
)
from academy.services.reconciler import (
    EnrollmentView, Offering, OfferingKind, Registration, Viewer, reconcile,
)

logger = logging.getLogger(__name__)

Record = Union[Enrollment, EventRegistration]


@dataclass
class CheckoutResult:
    url: Optional[str]
    session_id: Optional[str] = None
    message: Optional[str] = None
    record: Optional[Record] = None


class NotPayable(AppError):
    code = "NOT_PAYABLE"
    message = "This item does not require payment"


class InvalidStatus(AppError):
    code = "INVALID_STATUS"
    message = "This registration cannot be paid in its current state"


class PaymentBypassDisabled(AppError):
    status_code = 403
    code = "TEST_REGISTRATION_DISABLED"
    message = "Test registration is not available"


# ---------------------------------------------------------------------------
# Parent/child helpers
# ---------------------------------------------------------------------------
def approved_link(db: Session, *, parent_id: int, child_id: int) -> Optional[ParentChild]:
    return db.scalar(select(ParentChild).where(
        ParentChild.parent_id == parent_id,
        ParentChild.child_id == child_id,
        ParentChild.status == RelationshipStatus.APPROVED,
    ))


def resolve_enrollee(db: Session, actor: User, child_id: Optional[int]) -> User:
    """The user a class enrollment is for: the actor, or a child they are approved for."""
    if child_id is None or child_id == actor.id:
        return actor
    if actor.role is not Role.PARENT or not approved_link(db, parent_id=actor.id, child_id=child_id):
        raise Forbidden("You are not authorized to enroll this child in classes")
    child = db.get(User, child_id)
    if child is None:
        raise NotFound("Child not found")
    return child


def can_manage(db: Session, actor: User, record: Record) -> bool:
    if record.user_id == actor.id or is_admin(actor.role):
        return True
    return actor.role is Role.PARENT and approved_link(db, parent_id=actor.id, child_id=record.user_id) is not None


# ---------------------------------------------------------------------------
# View state
# ---------------------------------------------------------------------------
def offering_of(item: Union[Class, Event]) -> Offering:
    kind = OfferingKind.CLASS if isinstance(item, Class) else OfferingKind.EVENT
    return Offering(id=item.id, price=item.price, capacity=item.capacity,
                    current_count=item.current_count or 0, is_active=bool(item.is_active), kind=kind)


def class_view(db: Session, cls: Class, viewer: Optional[User], child_id: Optional[int] = None) -> EnrollmentView:
    if viewer is None:
        return reconcile(offering_of(cls), None, allow_test_registration=settings.ALLOW_TEST_REGISTRATION)
    subject = resolve_enrollee(db, viewer, child_id)
    enr = enrollment_crud.active_for(db, user_id=subject.id, class_id=cls.id)
    registration = Registration(id=enr.id, status=enr.status) if enr else None
    return reconcile(offering_of(cls), Viewer(id=viewer.id, role=viewer.role), registration,
                     allow_test_registration=settings.ALLOW_TEST_REGISTRATION)


def event_view(db: Session, event: Event, viewer: Optional[User]) -> EnrollmentView:
    if viewer is None:
        return reconcile(offering_of(event), None, allow_test_registration=settings.ALLOW_TEST_REGISTRATION)
    reg = registration_crud.active_for(db, user_id=viewer.id, event_id=event.id)
    registration = Registration(id=reg.id, status=reg.status) if reg else None
    return reconcile(offering_of(event), Viewer(id=viewer.id, role=viewer.role), registration,
                     allow_test_registration=settings.ALLOW_TEST_REGISTRATION)


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
def _attach_session(db: Session, provider: CheckoutProvider, *, payer: User, record: Record,
                    payment_type: PaymentType, amount: float, item: LineItem,
                    success_url: str, cancel_url: str, metadata: Dict[str, Any]) -> CheckoutResult:
    payment = record.payment
    if payment is None:
        payment = Payment(user_id=payer.id, amount=amount, status=PaymentStatus.PENDING, type=payment_type)
        if payment_type is PaymentType.CLASS:
            payment.enrollment_id = record.id
        else:
            payment.event_registration_id = record.id
        db.add(payment); db.flush()
    else:
        payment.amount = amount
        payment.status = PaymentStatus.PENDING

    label = f"{type(record).__name__} {record.id}"
    try:
        session = provider.create_session(
            item=item, success_url=success_url, cancel_url=cancel_url,
            metadata={**metadata, "paymentId": payment.id}, customer_email=payer.email,
        )
    except CheckoutError as e:
        db.rollback()
        logger.warning("Checkout failed for %s: %s", label, e)
        raise CheckoutFailed(str(e) or None)

    payment.checkout_session_id = session.id
    db.add(payment); db.commit(); db.refresh(record)
    logger.info("Checkout session %s opened for payment %s", session.id, payment.id)
    return CheckoutResult(url=session.url, session_id=session.id, record=record)


def checkout_class(db: Session, provider: CheckoutProvider, payer: User, cls: Class,
                   enrollee: Optional[User] = None) -> CheckoutResult:
    enrollee = enrollee or payer
    if not cls.price or cls.price <= 0:
        raise NotPayable("This class is free; enroll directly")
    existing = enrollment_crud.active_for(db, user_id=enrollee.id, class_id=cls.id)
    if existing is not None and existing.status in SEATED_STATUSES:
        raise AlreadyEnrolled()
    if existing is not None and existing.status is not EnrollmentStatus.PENDING:
        raise InvalidStatus()
    if existing is None:
        if not cls.is_active:
            raise OfferingUnavailable()
        if cls.current_count >= cls.capacity:
            raise OfferingFull()
    if provider.demo:
        return CheckoutResult(url=DEMO_URL, message=DEMO_MESSAGE)

    record = existing or enrollment_crud.open(db, user_id=enrollee.id, class_id=cls.id,
                                              status=EnrollmentStatus.PENDING)
    return _attach_session(
        db, provider, payer=payer, record=record, payment_type=PaymentType.CLASS, amount=cls.price,
        item=LineItem(name=cls.title, description=cls.description or cls.title,
                      unit_amount=to_minor_units(cls.price)),
        success_url=f"{settings.APP_URL}/dashboard?class=success",
        cancel_url=f"{settings.APP_URL}/classes/{cls.id}",
        metadata={"userId": enrollee.id, "classId": cls.id, "enrollmentId": record.id},
    )


def checkout_event(db: Session, provider: CheckoutProvider, user: User, event: Event,
                   quantity: int = 1, registration_type: str = "individual") -> CheckoutResult:
    if not event.price or event.price <= 0:
        raise NotPayable("This event is free; register directly")
    existing = registration_crud.active_for(db, user_id=user.id, event_id=event.id)
    if existing is not None and existing.status in SEATED_STATUSES:
        raise AlreadyRegistered()
    if existing is not None and existing.status is not EnrollmentStatus.PENDING:
        raise InvalidStatus()
    if existing is None:
        _check_event_open(event, quantity)
    if provider.demo:
        return CheckoutResult(url=DEMO_URL, message=DEMO_MESSAGE)

    record = existing or registration_crud.open(db, user_id=user.id, event_id=event.id,
                                                status=EnrollmentStatus.PENDING, quantity=quantity,
                                                registration_type=registration_type)
    return _attach_session(
        db, provider, payer=user, record=record, payment_type=PaymentType.EVENT,
        amount=event.price * record.quantity,
        item=LineItem(name=event.title, description=event.description or event.title,
                      unit_amount=to_minor_units(event.price), quantity=record.quantity),
        success_url=f"{settings.APP_URL}/dashboard?event=success",
        cancel_url=f"{settings.APP_URL}/events/{event.id}",
        metadata={"userId": user.id, "eventId": event.id, "eventRegistrationId": record.id},
    )


# ---------------------------------------------------------------------------
# Direct enrollment / registration
# ---------------------------------------------------------------------------
def enroll(db: Session, provider: CheckoutProvider, actor: User, class_id: int,
           child_id: Optional[int] = None, test: bool = False) -> CheckoutResult:
    """Enrolls the actor (or their child). Priced classes go through checkout unless `test`."""
    cls = class_crud.get_or_404(db, class_id)
    if not cls.is_active:
        raise OfferingUnavailable()
    if cls.current_count >= cls.capacity:
        raise OfferingFull()
    enrollee = resolve_enrollee(db, actor, child_id)
    if enrollment_crud.active_for(db, user_id=enrollee.id, class_id=cls.id) is not None:
        raise AlreadyEnrolled()
    if test and not settings.ALLOW_TEST_REGISTRATION:
        raise PaymentBypassDisabled()

    if not test and cls.price and cls.price > 0:
        return checkout_class(db, provider, actor, cls, enrollee)

    status = EnrollmentStatus.TEST if test else EnrollmentStatus.CONFIRMED
    enr = enrollment_crud.open(db, user_id=enrollee.id, class_id=cls.id, status=status)
    if enrollee.id != actor.id:
        notifications.notify(db, receiver_id=enrollee.id, sender_id=actor.id, related_id=cls.id,
                             type=notifications.CLASS_ENROLLMENT,
                             content=f"{actor.name} enrolled you in {cls.title}")
    db.commit(); db.refresh(enr)
    logger.info("User %s enrolled in class %s as %s", enrollee.id, cls.id, status.value)
    message = ("Test registration successful (no payment required)" if test
               else "Successfully enrolled in class")
    return CheckoutResult(url=None, message=message, record=enr)


def _check_event_open(event: Event, quantity: int) -> None:
    if not event.is_active:
        raise OfferingUnavailable("This event is not currently available for registration", code="EVENT_INACTIVE")
    if (event.current_count or 0) + quantity > event.capacity:
        raise OfferingFull("This event is full", code="EVENT_FULL")


def register(db: Session, provider: CheckoutProvider, user: User, event_id: int, quantity: int = 1,
             registration_type: str = "individual", test: bool = False) -> CheckoutResult:
    event = event_crud.get_or_404(db, event_id)
    _check_event_open(event, quantity)
    if registration_crud.active_for(db, user_id=user.id, event_id=event.id) is not None:
        raise AlreadyRegistered()
    if test and not settings.ALLOW_TEST_REGISTRATION:
        raise PaymentBypassDisabled()

    if not test and event.price and event.price > 0:
        return checkout_event(db, provider, user, event, quantity, registration_type)

    status = EnrollmentStatus.TEST if test else EnrollmentStatus.CONFIRMED
    reg = registration_crud.open(db, user_id=user.id, event_id=event.id, status=status,
                                 quantity=quantity, registration_type=registration_type)
    db.commit(); db.refresh(reg)
    logger.info("User %s registered for event %s as %s", user.id, event.id, status.value)
    return CheckoutResult(url=None, message="Successfully registered for event", record=reg)


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------
def leave(db: Session, actor: User, record: Record) -> Record:
    if not can_manage(db, actor, record):
        raise Forbidden()
    if record.status is EnrollmentStatus.CANCELLED:
        return record
    set_status(db, record, EnrollmentStatus.CANCELLED)
    if isinstance(record, Enrollment) and record.user_id != actor.id:
        notifications.notify(db, receiver_id=record.user_id, sender_id=actor.id, related_id=record.class_id,
                             type=notifications.CLASS_UNENROLLMENT,
                             content=f"{actor.name} removed you from {record.class_.title}")
    db.commit(); db.refresh(record)
    return record


def change_status(db: Session, record: Record, status: EnrollmentStatus) -> Record:
    set_status(db, record, status)
    db.commit(); db.refresh(record)
    return record


# ---------------------------------------------------------------------------
# Webhook
# ---------------------------------------------------------------------------
def _payment_for(db: Session, data: Dict[str, Any]) -> Optional[Payment]:
    metadata = data.get("metadata")
    payment_id = metadata.get("paymentId") if isinstance(metadata, dict) else None
    if payment_id:
        try:
            payment = db.get(Payment, int(payment_id))
        except (TypeError, ValueError):
            payment = None
        if payment is not None:
            return payment
    session_id = data.get("id")
    if session_id:
        return db.scalar(select(Payment).where(Payment.checkout_session_id == str(session_id)))
    return None


def _amount_total(data: Dict[str, Any]) -> Optional[float]:
    """Amount paid in major units, from the provider's minor-unit `amountTotal`."""
    raw = data.get("amountTotal")
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise AppError("amountTotal must be a number", code="INVALID_PAYLOAD")
    try:
        value = float(raw)
    except ValueError:
        raise AppError("amountTotal must be a number", code="INVALID_PAYLOAD")
    if not math.isfinite(value) or value < 0:
        raise AppError("amountTotal must be a non-negative number", code="INVALID_PAYLOAD")
    return value / 100


def handle_checkout_event(db: Session, event_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    if event_type not in ("checkout.session.completed", "checkout.session.expired"):
        logger.info("Ignoring checkout event %s", event_type)
        return {"received": True, "handled": False}

    payment = _payment_for(db, data)
    if payment is None:
        logger.warning("Checkout event %s for unknown session %s", event_type, data.get("id"))
        return {"received": True, "handled": False}

    record: Optional[Record] = payment.enrollment or payment.event_registration
    if event_type == "checkout.session.completed":
        if payment.status is PaymentStatus.COMPLETED:
            return {"received": True, "handled": False}
        amount = _amount_total(data)
        payment.status = PaymentStatus.COMPLETED
        if amount is not None:
            payment.amount = amount
        if record is not None and record.status is EnrollmentStatus.PENDING:
            set_status(db, record, EnrollmentStatus.CONFIRMED)
        elif record is not None:
            # paid after leaving or expiry; the seat is not taken back
            logger.warning("Payment %s completed for %s %s in status %s; left unchanged",
                           payment.id, type(record).__name__, record.id, record.status.value)
    else:
        if payment.status is PaymentStatus.COMPLETED:
            return {"received": True, "handled": False}
        payment.status = PaymentStatus.EXPIRED
        if record is not None and record.status is EnrollmentStatus.PENDING:
            set_status(db, record, EnrollmentStatus.CANCELLED)

    db.add(payment); db.commit()
    logger.info("Payment %s -> %s", payment.id, payment.status.value)
    return {"received": True, "handled": True}

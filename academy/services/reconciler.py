# academy/services/reconciler.py
"""Derives what a viewer sees on a class or event page.

The inputs are the offering (price, capacity, seats taken, active flag), the
viewer (or None without a session) and the viewer's current registration for
that offering. The result is a plain value: the same inputs always produce an
equal `EnrollmentView`, so re-fetching unchanged data never changes the page.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from academy.core.roles import Role
from academy.models.enrollment import EnrollmentStatus, SEATED_STATUSES


class OfferingKind(str, Enum):
    CLASS = "class"
    EVENT = "event"


class ViewState(str, Enum):
    ANONYMOUS = "ANONYMOUS"
    NOT_ENROLLED = "NOT_ENROLLED"
    FULL = "FULL"
    INACTIVE = "INACTIVE"
    ENROLLABLE_PAID = "ENROLLABLE_PAID"
    ENROLLABLE_FREE = "ENROLLABLE_FREE"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    PENDING = "PENDING"
    ENROLLED = "ENROLLED"
    WAITLISTED = "WAITLISTED"
    REJECTED = "REJECTED"


class Action(str, Enum):
    SIGN_IN = "SIGN_IN"
    ASK_PARENT = "ASK_PARENT"
    ENROLL = "ENROLL"
    CHECKOUT = "CHECKOUT"
    TEST_REGISTER = "TEST_REGISTER"
    COMPLETE_PAYMENT = "COMPLETE_PAYMENT"
    VIEW_MATERIALS = "VIEW_MATERIALS"
    LEAVE = "LEAVE"


ASK_PARENT_MESSAGE = "Please ask a parent to enroll you in this class."
ALREADY_ENROLLED_FRAGMENTS = ("already enrolled", "already registered")
ALREADY_ENROLLED_CODES = frozenset({"ALREADY_ENROLLED", "ALREADY_REGISTERED"})
SAFE_REDIRECT_PREFIXES = ("http://", "https://", "/")


@dataclass(frozen=True)
class Offering:
    id: int | str
    price: Optional[float]
    capacity: int
    current_count: int
    is_active: bool = True
    kind: OfferingKind = OfferingKind.CLASS

    @property
    def is_paid(self) -> bool:
        return self.price is not None and self.price > 0

    @property
    def is_full(self) -> bool:
        return self.current_count >= self.capacity

    @property
    def page_path(self) -> str:
        prefix = "classes" if self.kind is OfferingKind.CLASS else "events"
        return f"/{prefix}/{self.id}"


@dataclass(frozen=True)
class Viewer:
    id: int | str
    role: Optional[Role]


@dataclass(frozen=True)
class Registration:
    id: int | str
    status: EnrollmentStatus


@dataclass(frozen=True)
class EnrollButton:
    label: str
    disabled: bool
    action: Optional[Action]


@dataclass(frozen=True)
class EnrollmentView:
    state: ViewState
    actions: tuple[Action, ...] = ()
    enroll_button: Optional[EnrollButton] = None
    message: Optional[str] = None
    sign_in_url: Optional[str] = None
    registration_id: int | str | None = None
    registration_status: Optional[EnrollmentStatus] = None
    is_test: bool = False

    def allows(self, action: Action) -> bool:
        return action in self.actions

    @property
    def materials_unlocked(self) -> bool:
        return self.state is ViewState.ENROLLED


def format_price(price: Optional[float]) -> str:
    return f"${price:,.2f}" if price is not None else "$0.00"


def enroll_button_label(offering: Offering) -> str:
    """Label of the enroll control; full and inactive win over price."""
    if offering.is_full:
        return "Class Full" if offering.kind is OfferingKind.CLASS else "Event Full"
    if not offering.is_active:
        return "Class Not Available" if offering.kind is OfferingKind.CLASS else "Event Not Available"
    verb = "Enroll Now" if offering.kind is OfferingKind.CLASS else "Register Now"
    if offering.is_paid:
        return f"{verb} - {format_price(offering.price)}"
    return f"{verb} - Free"


def sign_in_url(offering: Offering) -> str:
    return f"/login?callbackUrl={offering.page_path}"


def enrollment_success_url(test: bool = False, kind: OfferingKind = OfferingKind.CLASS) -> str:
    key = "enrollment" if kind is OfferingKind.CLASS else "registration"
    url = f"/dashboard?{key}=success"
    return url + "&test=true" if test else url


def may_enroll(role: Optional[Role], kind: OfferingKind) -> bool:
    """Who gets an enroll control: parents for classes, any member for events."""
    if role is None:
        return False
    if kind is OfferingKind.CLASS:
        return role is Role.PARENT
    return role is not Role.GUEST


def may_leave(role: Optional[Role], kind: OfferingKind) -> bool:
    if kind is OfferingKind.CLASS:
        return role is Role.PARENT
    return role is not None and role is not Role.GUEST


def active_registration(registrations: Iterable[Registration]) -> Optional[Registration]:
    """First non-cancelled registration; callers pass newest first."""
    for reg in registrations:
        if reg.status is not EnrollmentStatus.CANCELLED:
            return reg
    return None


def is_already_enrolled_error(code: Optional[str] = None, message: Optional[str] = None) -> bool:
    if code and code in ALREADY_ENROLLED_CODES:
        return True
    text = (message or "").lower()
    return any(fragment in text for fragment in ALREADY_ENROLLED_FRAGMENTS)


def is_safe_redirect(url: Optional[str]) -> bool:
    return bool(url) and url.startswith(SAFE_REDIRECT_PREFIXES)


def _button(offering: Offering, role: Optional[Role], registration: Optional[Registration]) -> Optional[EnrollButton]:
    if not may_enroll(role, offering.kind):
        return None
    disabled = offering.is_full or not offering.is_active or registration is not None
    action = Action.CHECKOUT if offering.is_paid else Action.ENROLL
    return EnrollButton(label=enroll_button_label(offering), disabled=disabled, action=None if disabled else action)


def reconcile(
    offering: Offering,
    viewer: Optional[Viewer],
    registration: Optional[Registration] = None,
    *,
    allow_test_registration: bool = True,
) -> EnrollmentView:
    if viewer is None:
        return EnrollmentView(
            state=ViewState.ANONYMOUS,
            actions=(Action.SIGN_IN,),
            sign_in_url=sign_in_url(offering),
        )

    role = viewer.role
    if registration is not None and registration.status is EnrollmentStatus.CANCELLED:
        registration = None
    button = _button(offering, role, registration)

    if registration is not None:
        common = dict(
            enroll_button=button,
            registration_id=registration.id,
            registration_status=registration.status,
        )
        status = registration.status
        if status in SEATED_STATUSES:
            actions: Sequence[Action] = (Action.VIEW_MATERIALS,)
            if may_leave(role, offering.kind):
                actions = (Action.VIEW_MATERIALS, Action.LEAVE)
            is_test = status is EnrollmentStatus.TEST
            message = ("You're enrolled in this class (Test Registration)" if is_test
                       else "You're enrolled in this class!")
            return EnrollmentView(state=ViewState.ENROLLED, actions=tuple(actions), message=message,
                                  is_test=is_test, **common)
        if status is EnrollmentStatus.PENDING:
            if offering.is_paid:
                return EnrollmentView(state=ViewState.PAYMENT_REQUIRED, actions=(Action.COMPLETE_PAYMENT,),
                                      message="Complete your payment to confirm enrollment.", **common)
            return EnrollmentView(state=ViewState.PENDING, message="Your enrollment is pending confirmation.",
                                  **common)
        if status is EnrollmentStatus.WAITLISTED:
            return EnrollmentView(state=ViewState.WAITLISTED, message="You are on the waitlist.", **common)
        return EnrollmentView(state=ViewState.REJECTED, message="Your enrollment was not approved.", **common)

    if offering.kind is OfferingKind.CLASS and role is Role.STUDENT:
        return EnrollmentView(state=ViewState.NOT_ENROLLED, actions=(Action.ASK_PARENT,), message=ASK_PARENT_MESSAGE)

    if not may_enroll(role, offering.kind):
        return EnrollmentView(state=ViewState.NOT_ENROLLED)

    if offering.is_full:
        return EnrollmentView(state=ViewState.FULL, enroll_button=button)
    if not offering.is_active:
        return EnrollmentView(state=ViewState.INACTIVE, enroll_button=button)

    test = (Action.TEST_REGISTER,) if allow_test_registration else ()
    if offering.is_paid:
        return EnrollmentView(state=ViewState.ENROLLABLE_PAID, actions=(Action.CHECKOUT, *test), enroll_button=button)
    return EnrollmentView(state=ViewState.ENROLLABLE_FREE, actions=(Action.ENROLL, *test), enroll_button=button)


def coerce_enrolled(view: EnrollmentView, offering: Offering, role: Optional[Role]) -> EnrollmentView:
    """View after the server reported the viewer as already enrolled."""
    actions = (Action.VIEW_MATERIALS, Action.LEAVE) if may_leave(role, offering.kind) else (Action.VIEW_MATERIALS,)
    return EnrollmentView(
        state=ViewState.ENROLLED,
        actions=actions,
        enroll_button=_button(offering, role, Registration(id=view.registration_id or "", status=EnrollmentStatus.CONFIRMED)),
        message="You're enrolled in this class!",
        registration_id=view.registration_id,
        registration_status=EnrollmentStatus.CONFIRMED,
    )
# academy/client/flow.py
"""Class-page enrollment flow.

`load` fetches session, class and enrollments one after another and only then
derives the view, so the page never shows materials before the enrollment
status is known. Every action returns an Outcome; none of them raise for API
or network failures.
"""
import logging
from typing import Any, Dict, Optional

from academy.client.api import GENERIC_ERROR, AcademyClient, ApiError, TransportError
from academy.client.checkout import CheckoutDelegate
from academy.client.outcomes import Outcome
from academy.core.roles import Role, landing_route, parse_role
from academy.models.enrollment import EnrollmentStatus
from academy.services.reconciler import (
    Action, EnrollmentView, Offering, OfferingKind, Registration, ViewState, Viewer,
    active_registration, coerce_enrolled, enrollment_success_url, is_already_enrolled_error, reconcile,
)

logger = logging.getLogger(__name__)

ENROLL_FALLBACK = "Failed to enroll"
LEAVE_FALLBACK = "Failed to leave class"


def dashboard_link(role) -> str:
    return landing_route(role)


def offering_from_json(data: Dict[str, Any], kind: OfferingKind = OfferingKind.CLASS) -> Offering:
    return Offering(
        id=data["id"],
        price=data.get("price"),
        capacity=int(data.get("capacity") or 0),
        current_count=int(data.get("currentCount") or 0),
        is_active=bool(data.get("isActive", True)),
        kind=kind,
    )


def registration_from_state(state: Dict[str, Any]) -> Optional[Registration]:
    """Registration carried by an `enrollment-state` answer, if any."""
    if not state or state.get("registrationId") is None:
        return None
    try:
        status = EnrollmentStatus(state.get("registrationStatus"))
    except ValueError:
        return None
    return active_registration([Registration(id=state["registrationId"], status=status)])


def registration_for(enrollments, class_id) -> Optional[Registration]:
    records = []
    for row in enrollments or []:
        if str(row.get("classId")) != str(class_id):
            continue
        try:
            status = EnrollmentStatus(row.get("status"))
        except ValueError:
            continue
        records.append(Registration(id=row["id"], status=status))
    return active_registration(records)


class EnrollmentFlow:
    def __init__(self, client: AcademyClient, checkout: Optional[CheckoutDelegate] = None,
                 allow_test_registration: bool = True):
        self.client = client
        self.checkout = checkout or CheckoutDelegate(client)
        self.allow_test_registration = allow_test_registration
        self.offering: Optional[Offering] = None
        self.viewer: Optional[Viewer] = None
        self.view: Optional[EnrollmentView] = None
        self.child_id: Optional[int] = None
        self.busy = False

    # ---- loading ----
    def load(self, class_id, child_id: Optional[int] = None) -> EnrollmentView:
        """With `child_id`, the page is a parent's view of that child's enrollment."""
        self.child_id = child_id
        session = self.client.session()
        self.offering = offering_from_json(self.client.get(f"/api/classes/{class_id}", fallback="Class not found"))
        registration = None
        if session:
            user = session.get("user") or {}
            self.viewer = Viewer(id=user.get("id"), role=parse_role(session.get("role") or user.get("role")))
            if child_id is None:
                data = self.client.get("/api/user/enrollments") or {}
                registration = registration_for(data.get("enrollments"), class_id)
            else:
                state = self.client.get(f"/api/classes/{class_id}/enrollment-state", params={"childId": child_id})
                registration = registration_from_state(state)
        else:
            self.viewer = None
        self.view = reconcile(self.offering, self.viewer, registration,
                              allow_test_registration=self.allow_test_registration)
        return self.view

    @property
    def role(self) -> Optional[Role]:
        return self.viewer.role if self.viewer else None

    def _require_view(self) -> EnrollmentView:
        if self.view is None or self.offering is None:
            raise RuntimeError("call load() first")
        return self.view

    def _failed(self, error: Exception, fallback: str) -> Outcome:
        if not isinstance(error, ApiError):
            return Outcome.error(GENERIC_ERROR)
        if is_already_enrolled_error(error.code, error.message):
            logger.info("Server reports an existing enrollment; treating as enrolled")
            self.view = coerce_enrolled(self.view, self.offering, self.role)
            return Outcome.state(self.view)
        return Outcome.error(error.message or fallback)

    # ---- actions ----
    def enroll(self, test: bool = False) -> Outcome:
        view = self._require_view()
        if view.state is ViewState.ANONYMOUS:
            return Outcome.navigate(view.sign_in_url)
        wanted = Action.TEST_REGISTER if test else (Action.CHECKOUT if self.offering.is_paid else Action.ENROLL)
        if self.busy or not view.allows(wanted):
            return Outcome.state(view)

        self.busy = True
        try:
            if wanted is Action.CHECKOUT:
                try:
                    return self.checkout.start(class_id=self.offering.id, child_id=self.child_id)
                except (ApiError, TransportError) as e:
                    return self._failed(e, ENROLL_FALLBACK)
            body = {"classId": self.offering.id, "isTestRegistration": test}
            if self.child_id is not None:
                body["childId"] = self.child_id
            try:
                self.client.post("/api/enrollments", body, fallback=ENROLL_FALLBACK)
            except (ApiError, TransportError) as e:
                return self._failed(e, ENROLL_FALLBACK)
            return Outcome.navigate(enrollment_success_url(test))
        finally:
            self.busy = False

    def complete_payment(self) -> Outcome:
        view = self._require_view()
        if self.busy or not view.allows(Action.COMPLETE_PAYMENT):
            return Outcome.state(view)
        self.busy = True
        try:
            return self.checkout.start(class_id=self.offering.id, child_id=self.child_id)
        except (ApiError, TransportError) as e:
            return self._failed(e, ENROLL_FALLBACK)
        finally:
            self.busy = False

    def leave(self) -> Outcome:
        view = self._require_view()
        if self.busy or not view.allows(Action.LEAVE):
            return Outcome.state(view)
        self.busy = True
        try:
            self.client.post("/api/user/enrollments/leave", {"enrollmentId": view.registration_id},
                             fallback=LEAVE_FALLBACK)
            return Outcome.state(self.load(self.offering.id, self.child_id))
        except TransportError:
            return Outcome.error(GENERIC_ERROR)
        except ApiError as e:
            return Outcome.error(e.message or LEAVE_FALLBACK)
        finally:
            self.busy = False

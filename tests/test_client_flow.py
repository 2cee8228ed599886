"""Class-page flow driven through the API client."""
import httpx
import pytest

from academy.client import AcademyClient, CheckoutDelegate, CurriculumViewer, EnrollmentFlow, OutcomeKind
from academy.client.api import GENERIC_ERROR, ApiError
from academy.client.checkout import INVALID_URL_MESSAGE, NO_URL_MESSAGE
from academy.core.roles import Role
from academy.models.curriculum import CurriculumItem
from academy.models.enrollment import Enrollment, EnrollmentStatus
from academy.services.reconciler import Action, ViewState
from tests.conftest import PASSWORD, token_for


def flow_for(client, user=None, **kw):
    api = AcademyClient(http=client, token=token_for(user) if user else None)
    return EnrollmentFlow(api, **kw)


class TestAgainstTheApi:
    def test_signed_out_visitor_is_sent_to_login(self, client, make_class):
        cls = make_class()
        flow = flow_for(client)
        assert flow.load(cls.id).state is ViewState.ANONYMOUS
        outcome = flow.enroll()
        assert outcome.kind is OutcomeKind.NAVIGATE
        assert outcome.target == f"/login?callbackUrl=/classes/{cls.id}"

    def test_student_is_asked_to_fetch_a_parent(self, client, student, make_class):
        cls = make_class()
        flow = flow_for(client, student)
        view = flow.load(cls.id)
        assert view.allows(Action.ASK_PARENT)
        assert flow.enroll().view is view

    def test_test_registration_then_leave(self, client, parent, make_class):
        cls = make_class(price=80.0)
        flow = flow_for(client, parent)
        assert flow.load(cls.id).state is ViewState.ENROLLABLE_PAID

        outcome = flow.enroll(test=True)
        assert outcome.target == "/dashboard?enrollment=success&test=true"

        view = flow.load(cls.id)
        assert (view.state, view.is_test) == (ViewState.ENROLLED, True)
        assert view.materials_unlocked

        outcome = flow.leave()
        assert outcome.kind is OutcomeKind.STATE
        assert outcome.view.state is ViewState.ENROLLABLE_PAID

    def test_free_enrollment(self, client, parent, make_class):
        cls = make_class()
        flow = flow_for(client, parent)
        flow.load(cls.id)
        assert flow.enroll().target == "/dashboard?enrollment=success"
        assert flow.load(cls.id).state is ViewState.ENROLLED

    def test_paid_enrollment_redirects_then_resumes(self, client, parent, make_class, provider):
        cls = make_class(price=80.0)
        flow = flow_for(client, parent)
        flow.load(cls.id)
        outcome = flow.enroll()
        assert (outcome.kind, outcome.target) == (OutcomeKind.REDIRECT, provider.url)

        view = flow.load(cls.id)
        assert view.state is ViewState.PAYMENT_REQUIRED
        assert flow.complete_payment().kind is OutcomeKind.REDIRECT
        assert len(provider.calls) == 2

    def test_parent_pays_for_a_child(self, client, db, parent, student, make_class, link, provider):
        link(parent, student)
        cls = make_class(price=50.0)
        flow = flow_for(client, parent)
        assert flow.load(cls.id, child_id=student.id).state is ViewState.ENROLLABLE_PAID
        assert flow.enroll().kind is OutcomeKind.REDIRECT

        assert flow.load(cls.id, child_id=student.id).state is ViewState.PAYMENT_REQUIRED
        assert flow.complete_payment().kind is OutcomeKind.REDIRECT
        assert provider.calls[-1]["metadata"]["userId"] == student.id
        assert [(e.user_id, e.status) for e in db.query(Enrollment).all()] == [
            (student.id, EnrollmentStatus.PENDING)]

    def test_stale_page_coerces_to_enrolled(self, client, parent, make_class):
        cls = make_class()
        flow = flow_for(client, parent)
        flow.load(cls.id)
        # enrolled from another tab after this page loaded
        client.post("/api/enrollments", json={"classId": cls.id},
                    headers={"Authorization": f"Bearer {token_for(parent)}"})
        outcome = flow.enroll()
        assert outcome.kind is OutcomeKind.STATE
        assert outcome.view.state is ViewState.ENROLLED

    def test_login_sets_the_token(self, client, parent):
        api = AcademyClient(http=client)
        assert api.session() is None
        api.login(parent.email, PASSWORD)
        assert api.session()["role"] == "PARENT"


def stub_client(routes):
    """AcademyClient over a MockTransport; routes maps (method, path) to a response or exception."""
    def handler(request: httpx.Request):
        answer = routes.get((request.method, request.url.path))
        if answer is None:
            return httpx.Response(404, json={"message": "Not found"})
        if isinstance(answer, Exception):
            raise answer
        return answer

    http = httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(handler))
    return AcademyClient(http=http, token="t")


SESSION = ("GET", "/api/auth/session")
CLASS = ("GET", "/api/classes/7")
MINE = ("GET", "/api/user/enrollments")


def page_routes(extra=None, price=None):
    routes = {
        SESSION: httpx.Response(200, json={"user": {"id": 1, "role": "PARENT"}, "role": "PARENT"}),
        CLASS: httpx.Response(200, json={"id": 7, "price": price, "capacity": 10, "currentCount": 2,
                                         "isActive": True}),
        MINE: httpx.Response(200, json={"enrollments": []}),
    }
    routes.update(extra or {})
    return routes


class TestAgainstStubs:
    def test_already_registered_message_without_code(self):
        api = stub_client(page_routes({
            ("POST", "/api/enrollments"): httpx.Response(400, json={"error": "User is already registered for this class"}),
        }))
        flow = EnrollmentFlow(api)
        flow.load(7)
        outcome = flow.enroll()
        assert outcome.kind is OutcomeKind.STATE
        assert outcome.view.state is ViewState.ENROLLED

    def test_other_errors_keep_the_view(self):
        api = stub_client(page_routes({
            ("POST", "/api/enrollments"): httpx.Response(400, json={"code": "CLASS_FULL", "message": "This class is full"}),
        }))
        flow = EnrollmentFlow(api)
        view = flow.load(7)
        outcome = flow.enroll()
        assert (outcome.kind, outcome.message) == (OutcomeKind.ERROR, "This class is full")
        assert flow.view is view
        assert not flow.busy

    def test_network_failure_shows_generic_message(self):
        api = stub_client(page_routes({("POST", "/api/enrollments"): httpx.ConnectError("refused")}))
        flow = EnrollmentFlow(api)
        flow.load(7)
        assert flow.enroll().message == GENERIC_ERROR

    def test_signed_out_session(self):
        api = stub_client(page_routes({SESSION: httpx.Response(401, json={"code": "UNAUTHORIZED"})}))
        assert EnrollmentFlow(api).load(7).state is ViewState.ANONYMOUS

    def test_disabled_test_registration_hides_the_action(self):
        flow = EnrollmentFlow(stub_client(page_routes(price=30)), allow_test_registration=False)
        view = flow.load(7)
        assert not view.allows(Action.TEST_REGISTER)
        assert flow.enroll(test=True).view is view


class TestCheckoutDelegate:
    CHECKOUT = ("POST", "/api/create-checkout-session")

    @pytest.mark.parametrize("body, kind, expected", [
        ({"url": "https://pay.example.com/x"}, OutcomeKind.REDIRECT, "https://pay.example.com/x"),
        ({"url": "/dashboard?demo=true"}, OutcomeKind.REDIRECT, "/dashboard?demo=true"),
        ({"sessionId": "cs_9"}, OutcomeKind.HANDOFF, None),
    ])
    def test_successful_answers(self, body, kind, expected):
        delegate = CheckoutDelegate(stub_client({self.CHECKOUT: httpx.Response(200, json=body)}))
        outcome = delegate.start(class_id=7)
        assert outcome.kind is kind
        assert outcome.target == expected

    def test_unsafe_url(self):
        delegate = CheckoutDelegate(stub_client({self.CHECKOUT: httpx.Response(200, json={"url": "javascript:alert(1)"})}))
        assert delegate.start(class_id=7).message == INVALID_URL_MESSAGE

    def test_empty_answer(self):
        delegate = CheckoutDelegate(stub_client({self.CHECKOUT: httpx.Response(200, json={})}))
        assert delegate.start(event_id=3).message == NO_URL_MESSAGE

    def test_try_start_folds_failures(self):
        delegate = CheckoutDelegate(stub_client({
            self.CHECKOUT: httpx.Response(502, json={"code": "CHECKOUT_FAILED", "message": "Failed to create checkout session"}),
        }))
        outcome = delegate.try_start(class_id=7)
        assert (outcome.ok, outcome.message) == (False, "Failed to create checkout session")


def test_curriculum_viewer(client, db, parent, make_user, make_class):
    cls = make_class()
    db.add_all([
        CurriculumItem(class_id=cls.id, title="Intro", type="LECTURE", order=1, is_published=True, is_public=True),
        CurriculumItem(class_id=cls.id, title="Drill", type="ASSIGNMENT", order=2, is_published=True),
        CurriculumItem(class_id=cls.id, title="Draft", type="VIDEO", order=3, is_published=False),
    ])
    db.commit()
    client.post("/api/enrollments", json={"classId": cls.id},
                headers={"Authorization": f"Bearer {token_for(parent)}"})

    viewer = CurriculumViewer(AcademyClient(http=client, token=token_for(parent)))
    grouped = viewer.load(cls.id)
    assert [i["title"] for i in grouped["lectures"]] == ["Intro"]
    assert [i["title"] for i in grouped["assignments"]] == ["Drill"]
    assert grouped["videos"] == []

    public = CurriculumViewer(AcademyClient(http=client)).load_public(cls.id)
    assert [i["title"] for i in public["lectures"]] == ["Intro"]
    assert public["assignments"] == []

    outsider = make_user(Role.PARENT)
    with pytest.raises(ApiError) as exc:
        CurriculumViewer(AcademyClient(http=client, token=token_for(outsider))).load(cls.id)
    assert exc.value.status == 403

"""POST/GET/PATCH /api/enrollments, the user's own list and leaving a class."""
from academy.core.roles import Role
from academy.models.enrollment import Enrollment, EnrollmentStatus
from academy.models.notification import Notification
from tests.conftest import auth


def test_enrolling_requires_a_session(client, make_class):
    cls = make_class()
    r = client.post("/api/enrollments", json={"classId": cls.id})
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHORIZED"


def test_free_class_is_confirmed_immediately(client, db, parent, make_class):
    cls = make_class(price=None)
    r = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent))
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Successfully enrolled in class"
    assert body["enrollment"]["status"] == "CONFIRMED"
    assert body["enrollment"]["classId"] == cls.id
    db.refresh(cls)
    assert cls.current_count == 1


def test_second_attempt_reports_already_enrolled(client, parent, make_class):
    cls = make_class()
    client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent))
    r = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent))
    assert r.status_code == 400
    assert r.json()["code"] == "ALREADY_ENROLLED"
    assert "already enrolled" in r.json()["message"]


def test_unknown_class(client, parent):
    r = client.post("/api/enrollments", json={"classId": 999}, headers=auth(parent))
    assert r.status_code == 404
    assert r.json()["message"] == "Class not found"


def test_full_and_inactive_classes_are_refused(client, parent, make_class):
    full = make_class(capacity=2, current_count=2)
    closed = make_class(is_active=False)
    r = client.post("/api/enrollments", json={"classId": full.id}, headers=auth(parent))
    assert (r.status_code, r.json()["code"]) == (400, "CLASS_FULL")
    r = client.post("/api/enrollments", json={"classId": closed.id}, headers=auth(parent))
    assert (r.status_code, r.json()["code"]) == (400, "CLASS_INACTIVE")


def test_test_registration_skips_payment(client, db, parent, make_class, provider):
    cls = make_class(price=120)
    r = client.post("/api/enrollments", json={"classId": cls.id, "isTestRegistration": True}, headers=auth(parent))
    assert r.status_code == 201
    assert r.json()["enrollment"]["status"] == "TEST"
    assert provider.calls == []
    db.refresh(cls)
    assert cls.current_count == 1


def test_paid_class_opens_checkout(client, db, parent, make_class, provider):
    cls = make_class(price=99.99)
    r = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent))
    assert r.status_code == 201
    body = r.json()
    assert body["url"] == "https://pay.example.com/cs_test_1"
    assert body["enrollment"]["status"] == "PENDING"
    assert body["enrollment"]["payment"]["status"] == "PENDING"
    assert body["enrollment"]["payment"]["amount"] == 99.99
    db.refresh(cls)
    assert cls.current_count == 0


def test_parent_enrolls_approved_child(client, db, parent, student, make_class, link):
    link(parent, student)
    cls = make_class()
    r = client.post("/api/enrollments", json={"classId": cls.id, "childId": student.id}, headers=auth(parent))
    assert r.status_code == 201
    assert r.json()["enrollment"]["userId"] == student.id
    note = db.query(Notification).filter_by(receiver_id=student.id).one()
    assert note.type == "CLASS_ENROLLMENT"


def test_parent_cannot_enroll_unlinked_child(client, parent, student, make_class):
    cls = make_class()
    r = client.post("/api/enrollments", json={"classId": cls.id, "childId": student.id}, headers=auth(parent))
    assert r.status_code == 403
    assert r.json()["message"] == "You are not authorized to enroll this child in classes"


def test_user_enrollments_include_class_and_payment(client, parent, make_class):
    free = make_class(title="Debate Basics")
    paid = make_class(title="Advanced Rhetoric", price=45)
    client.post("/api/enrollments", json={"classId": free.id}, headers=auth(parent))
    client.post("/api/enrollments", json={"classId": paid.id}, headers=auth(parent))

    r = client.get("/api/user/enrollments", headers=auth(parent))
    assert r.status_code == 200
    rows = r.json()["enrollments"]
    assert [row["class"]["title"] for row in rows] == ["Advanced Rhetoric", "Debate Basics"]
    assert rows[0]["payment"]["amount"] == 45
    assert rows[1]["payment"] is None


def test_leaving_cancels_and_frees_the_seat(client, db, parent, make_class):
    cls = make_class()
    enr_id = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent)).json()["enrollment"]["id"]

    r = client.post("/api/user/enrollments/leave", json={"enrollmentId": enr_id}, headers=auth(parent))
    assert r.status_code == 200
    assert r.json()["status"] == "CANCELLED"
    db.refresh(cls)
    assert cls.current_count == 0
    # the row is kept
    assert db.get(Enrollment, enr_id) is not None


def test_can_enroll_again_after_leaving(client, parent, make_class):
    cls = make_class()
    enr_id = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent)).json()["enrollment"]["id"]
    client.post("/api/user/enrollments/leave", json={"enrollmentId": enr_id}, headers=auth(parent))
    r = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent))
    assert r.status_code == 201


def test_someone_elses_enrollment_is_off_limits(client, make_user, make_class):
    owner, other = make_user(Role.PARENT), make_user(Role.PARENT)
    cls = make_class()
    enr_id = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(owner)).json()["enrollment"]["id"]
    assert client.get(f"/api/enrollments/{enr_id}", headers=auth(other)).status_code == 403
    r = client.post("/api/user/enrollments/leave", json={"enrollmentId": enr_id}, headers=auth(other))
    assert r.status_code == 403


def test_list_and_patch(client, db, parent, admin, make_class):
    cls = make_class()
    enr_id = client.post("/api/enrollments", json={"classId": cls.id}, headers=auth(parent)).json()["enrollment"]["id"]

    mine = client.get("/api/enrollments", headers=auth(parent)).json()
    assert [e["id"] for e in mine] == [enr_id]

    r = client.patch(f"/api/enrollments/{enr_id}", json={"status": "CONFIRMED"}, headers=auth(parent))
    assert r.status_code == 403

    r = client.patch(f"/api/enrollments/{enr_id}", json={"status": "WAITLISTED"}, headers=auth(admin))
    assert r.json()["status"] == "WAITLISTED"
    db.refresh(cls)
    assert cls.current_count == 0


def test_enrollment_state_endpoint(client, parent, student, make_class):
    cls = make_class(price=99.99, capacity=20, current_count=20)
    anon = client.get(f"/api/classes/{cls.id}/enrollment-state").json()
    assert anon["state"] == "ANONYMOUS"
    assert anon["signInUrl"] == f"/login?callbackUrl=/classes/{cls.id}"

    as_parent = client.get(f"/api/classes/{cls.id}/enrollment-state", headers=auth(parent)).json()
    assert as_parent["state"] == "FULL"
    assert as_parent["enrollButton"] == {"label": "Class Full", "disabled": True, "action": None}

    as_student = client.get(f"/api/classes/{cls.id}/enrollment-state", headers=auth(student)).json()
    assert as_student["state"] == "NOT_ENROLLED"
    assert as_student["actions"] == ["ASK_PARENT"]
    assert as_student["enrollButton"] is None


def test_enrollment_state_for_a_child(client, db, parent, student, make_class, link):
    link(parent, student)
    cls = make_class()
    client.post("/api/enrollments", json={"classId": cls.id, "childId": student.id}, headers=auth(parent))
    body = client.get(f"/api/classes/{cls.id}/enrollment-state", params={"childId": student.id},
                      headers=auth(parent)).json()
    assert body["state"] == "ENROLLED"
    assert body["actions"] == ["VIEW_MATERIALS", "LEAVE"]
    assert body["registrationStatus"] == EnrollmentStatus.CONFIRMED.value

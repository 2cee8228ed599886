"""Parent/child link requests, responses and removal."""
from academy.core.roles import Role
from academy.models.notification import Notification
from academy.models.parent_child import ParentChild, RelationshipStatus
from tests.conftest import auth


def test_request_and_approve(client, db, parent, student):
    r = client.post("/api/parent-child", json={"childEmail": student.email.upper()}, headers=auth(parent))
    assert r.status_code == 201
    rel = r.json()
    assert rel["status"] == "PENDING"
    assert rel["childId"] == student.id

    pending = client.get("/api/student/parent-requests", headers=auth(student)).json()["relationships"]
    assert [p["id"] for p in pending] == [rel["id"]]

    r = client.patch("/api/parent-child", json={"relationshipId": rel["id"], "status": "APPROVED"},
                     headers=auth(student))
    assert r.status_code == 200
    assert r.json()["status"] == "APPROVED"

    types = sorted(n.type for n in db.query(Notification).all())
    assert types == ["PARENT_REQUEST", "PARENT_REQUEST_RESPONSE"]


def test_only_parents_may_request(client, student, make_user):
    other = make_user(Role.STUDENT)
    r = client.post("/api/parent-child", json={"childEmail": other.email}, headers=auth(student))
    assert r.status_code == 403


def test_unknown_child_and_duplicates(client, parent, student):
    r = client.post("/api/parent-child", json={"childEmail": "nobody@example.com"}, headers=auth(parent))
    assert r.status_code == 404
    assert r.json()["message"] == "Child not found with the provided email"

    client.post("/api/parent-child", json={"childEmail": student.email}, headers=auth(parent))
    r = client.post("/api/parent-child", json={"childEmail": student.email}, headers=auth(parent))
    assert (r.status_code, r.json()["code"]) == (400, "RELATIONSHIP_EXISTS")


def test_only_the_child_responds(client, parent, student, link):
    rel = link(parent, student, RelationshipStatus.PENDING)
    r = client.patch("/api/parent-child", json={"relationshipId": rel.id, "status": "APPROVED"},
                     headers=auth(parent))
    assert r.status_code == 403


def test_pending_is_not_a_valid_response(client, parent, student, link):
    rel = link(parent, student, RelationshipStatus.PENDING)
    r = client.patch("/api/parent-child", json={"relationshipId": rel.id, "status": "PENDING"},
                     headers=auth(student))
    assert (r.status_code, r.json()["code"]) == (400, "INVALID_STATUS")


def test_either_side_may_delete(client, db, parent, student, make_user, link):
    rel = link(parent, student)
    stranger = make_user(Role.PARENT)
    assert client.delete("/api/parent-child", params={"id": rel.id}, headers=auth(stranger)).status_code == 403

    r = client.delete("/api/parent-child", params={"id": rel.id}, headers=auth(student))
    assert r.status_code == 200
    assert db.query(ParentChild).count() == 0
    note = db.query(Notification).one()
    assert (note.type, note.receiver_id) == ("PARENT_RELATIONSHIP_DELETED", parent.id)


def test_listing_is_scoped_by_role(client, parent, student, make_user, link):
    link(parent, student)
    link(make_user(Role.PARENT), make_user(Role.STUDENT))
    assert len(client.get("/api/parent-child", headers=auth(parent)).json()["relationships"]) == 1
    assert len(client.get("/api/parent-child", headers=auth(student)).json()["relationships"]) == 1

import pytest

from academy.client import AcademyClient, AnnouncementViewer
from academy.client.api import ApiError
from academy.core.roles import Role
from academy.models.enrollment import Enrollment, EnrollmentStatus
from academy.models.mentor_profile import MentorProfile
from academy.models.notification import Notification
from academy.models.user import User
from tests.conftest import PASSWORD, auth, token_for

PROFILE = {"bio": "Coached national finalists", "specialization": "Debate", "experience": 6}


# ---------- announcements ----------
@pytest.fixture
def taught(db, make_user, make_class, student):
    """A class with an instructor and one seated student."""
    instructor = make_user(Role.INSTRUCTOR, name="Ms Rivera")
    cls = make_class(instructor_id=instructor.id)
    db.add(Enrollment(user_id=student.id, class_id=cls.id, status=EnrollmentStatus.CONFIRMED)); db.commit()
    return cls, instructor


def test_instructor_posts_and_seated_users_are_notified(client, db, taught, student, make_user):
    cls, instructor = taught
    dropped = make_user(Role.STUDENT)
    db.add(Enrollment(user_id=dropped.id, class_id=cls.id, status=EnrollmentStatus.CANCELLED)); db.commit()

    r = client.post(f"/api/classes/{cls.id}/announcements", json={"title": "No class Monday", "content": "Holiday"},
                    headers=auth(instructor))
    assert r.status_code == 201
    assert (r.json()["author"], r.json()["classId"]) == ("Ms Rivera", cls.id)

    notes = db.query(Notification).filter_by(type="ANNOUNCEMENT").all()
    assert [n.receiver_id for n in notes] == [student.id]
    assert notes[0].content == "New announcement in class: No class Monday"


def test_posting_needs_an_instructor_or_the_permission(client, taught, make_user):
    cls, _ = taught
    url = f"/api/classes/{cls.id}/announcements"
    note = {"title": "Hi", "content": "Welcome"}
    assert client.post(url, json=note, headers=auth(make_user(Role.PARENT))).status_code == 403
    assert client.post(url, json=note, headers=auth(make_user(Role.MENTOR))).status_code == 201
    assert client.post(url, json={"title": "", "content": "x"}, headers=auth(make_user(Role.T1_ADMIN))).status_code == 422


def test_reading_needs_a_seat(client, taught, student, parent, make_user, link):
    cls, instructor = taught
    url = f"/api/classes/{cls.id}/announcements"
    for title in ("First", "Second"):
        client.post(url, json={"title": title, "content": "..."}, headers=auth(instructor))

    assert client.get(url, headers=auth(make_user(Role.STUDENT))).status_code == 403
    r = client.get(url, headers=auth(student))
    assert [a["title"] for a in r.json()["announcements"]] == ["Second", "First"]

    assert client.get(url, params={"childId": student.id}, headers=auth(parent)).status_code == 403
    link(parent, student)
    assert client.get(url, params={"childId": student.id}, headers=auth(parent)).status_code == 200


def test_announcement_viewer(client, taught, student):
    cls, instructor = taught
    AnnouncementViewer(AcademyClient(http=client, token=token_for(instructor))).post(cls.id, "Debate night", "Fri 6pm")

    items = AnnouncementViewer(AcademyClient(http=client, token=token_for(student))).load(cls.id)
    assert [(a["title"], a["author"]) for a in items] == [("Debate night", "Ms Rivera")]

    with pytest.raises(ApiError) as exc:
        AnnouncementViewer(AcademyClient(http=client)).load(cls.id)
    assert exc.value.status == 401


# ---------- mentors ----------
def new_mentor(**kw):
    return {"name": "Sam Okafor", "email": "Sam@Example.com", "password": PASSWORD, **PROFILE, **kw}


def test_staff_create_mentor_accounts(client, db, admin, student):
    r = client.post("/api/mentors", json=new_mentor(hourlyRate=40), headers=auth(admin))
    assert r.status_code == 201
    body = r.json()
    assert (body["role"], body["email"]) == ("MENTOR", "sam@example.com")
    assert body["mentorProfile"]["specialization"] == "Debate"
    assert body["mentorProfile"]["hourlyRate"] == 40

    again = client.post("/api/mentors", json=new_mentor(), headers=auth(admin))
    assert (again.status_code, again.json()["code"]) == (409, "EMAIL_TAKEN")
    other = new_mentor(email="other@example.com")
    assert client.post("/api/mentors", json=other, headers=auth(student)).status_code == 403
    assert db.query(MentorProfile).count() == 1


def test_directory_lists_mentors_with_profiles(client, admin, make_user):
    client.post("/api/mentors", json=new_mentor(), headers=auth(admin))
    make_user(Role.INSTRUCTOR, name="Ada Instructor")
    make_user(Role.STUDENT)

    mentors = client.get("/api/mentors").json()
    assert [m["name"] for m in mentors] == ["Ada Instructor", "Sam Okafor"]
    assert mentors[0]["mentorProfile"] is None
    assert mentors[1]["mentorProfile"]["bio"] == PROFILE["bio"]


def test_mentor_edits_own_profile(client, db, admin):
    mentor_id = client.post("/api/mentors", json=new_mentor(), headers=auth(admin)).json()["id"]
    mentor = db.get(User, mentor_id)

    assert client.get("/api/mentors/profile", headers=auth(mentor)).json()["experience"] == 6
    r = client.put("/api/mentors/profile", json={**PROFILE, "experience": 7, "availability": "Weekends"},
                   headers=auth(mentor))
    assert (r.json()["experience"], r.json()["availability"]) == (7, "Weekends")
    assert db.query(MentorProfile).count() == 1


def test_mentor_without_a_profile_creates_one(client, db, make_user):
    mentor = make_user(Role.MENTOR)
    assert client.get("/api/mentors/profile", headers=auth(mentor)).status_code == 404

    assert client.put("/api/mentors/profile", json=PROFILE, headers=auth(mentor)).status_code == 200
    profile = db.query(MentorProfile).one()
    assert profile.user_id == mentor.id


def test_profile_is_for_mentors_only(client, parent):
    assert client.get("/api/mentors/profile", headers=auth(parent)).status_code == 403
    assert client.put("/api/mentors/profile", json=PROFILE, headers=auth(parent)).status_code == 403

import pytest

from coursetrack.models.attachment import Attachment
from coursetrack.models.course import Course
from coursetrack.repositories.progress_queries import SqlAlchemyProgressQueries
from coursetrack.schemas.filters import EnrollmentFilter, SubmissionFilter, UserFilter


@pytest.fixture()
def ids(db):
    course = db.query(Course).filter(Course.title == "Web Dev").one()
    hw = {a.title: a.id for a in db.query(Attachment).all()}
    return {"course": course.id, "hw1": hw["HW1"], "hw2": hw["HW2"]}


def test_progress_requires_authentication(client, ids):
    r = client.get(f"/progress/courses/{ids['course']}/pie")
    assert r.status_code == 401
    assert r.json()["detail"] == "Unauthorized"

    r = client.get(f"/progress/assignments/{ids['hw1']}/roster")
    assert r.status_code == 401


def test_course_pie_for_instructor(client, as_user, ids):
    r = client.get(f"/progress/courses/{ids['course']}/pie", headers=as_user("inst"))
    assert r.status_code == 200, r.text
    # 2 assignments x 3 enrollments - 3 submissions
    assert r.json() == [2, 1, 3]


def test_course_pie_for_mentor(client, as_user, ids):
    r = client.get(f"/progress/courses/{ids['course']}/pie", headers=as_user("mentor1"))
    assert r.status_code == 200, r.text
    # alice graded, bob under review, 2 assignments x 2 mentees
    assert r.json() == [1, 1, 2]


def test_mentor_pie(client, as_user, ids):
    r = client.get(
        f"/progress/courses/{ids['course']}/mentors/mentor1/pie",
        headers=as_user("inst"),
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["evaluated"] == 2
    assert body["underReview"] == 1
    assert body["unsubmitted"] == 3
    assert body["totalPoints"] == 10
    assert body["gradedSubmissions"] == 1


def test_mentor_pie_is_staff_only(client, as_user, ids):
    r = client.get(
        f"/progress/courses/{ids['course']}/mentors/mentor1/pie",
        headers=as_user("alice"),
    )
    assert r.status_code == 403


def test_my_pie(client, as_user, ids):
    r = client.get(f"/progress/courses/{ids['course']}/students/me/pie", headers=as_user("carol"))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["evaluated"] == 1
    assert body["underReview"] == 0
    assert body["unsubmitted"] == 4
    assert body["totalPoints"] == 10


def test_student_pie_for_mentor(client, as_user, ids):
    r = client.get(
        f"/progress/courses/{ids['course']}/students/bob/pie",
        headers=as_user("mentor1"),
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["evaluated"] == 0
    assert body["underReview"] == 1
    assert body["totalPoints"] == 0


def test_line_chart(client, as_user, ids):
    url = f"/progress/courses/{ids['course']}/line-chart"

    r = client.get(url, headers=as_user("inst"))
    assert r.status_code == 200, r.text
    assert r.json() == {"assignments": ["HW1", "HW2"], "countForEachAssignment": [2, 1]}

    r = client.get(url, headers=as_user("mentor1"))
    assert r.json()["countForEachAssignment"] == [2, 0]

    r = client.get(url, params={"mentor_username": "mentor2"}, headers=as_user("inst"))
    assert r.json()["countForEachAssignment"] == [0, 1]


def test_roster_for_mentor(client, as_user, ids):
    r = client.get(f"/progress/assignments/{ids['hw1']}/roster", headers=as_user("mentor1"))
    assert r.status_code == 200, r.text
    body = r.json()
    assert [s["enrolled_user"]["username"] for s in body["submissions"]] == ["alice", "bob"]
    assert body["notSubmitted"] == []
    assert body["isCourseAdmin"] is False


def test_roster_for_instructor(client, as_user, ids):
    r = client.get(f"/progress/assignments/{ids['hw1']}/roster", headers=as_user("inst"))
    assert r.status_code == 200, r.text
    body = r.json()
    assert [s["enrolled_user"]["username"] for s in body["submissions"]] == ["alice", "bob"]
    assert [u["username"] for u in body["notSubmitted"]] == ["carol"]
    assert body["isCourseAdmin"] is True


def test_roster_for_student(client, as_user, ids):
    r = client.get(f"/progress/assignments/{ids['hw1']}/roster", headers=as_user("carol"))
    body = r.json()
    assert body["submissions"] == []
    assert [u["username"] for u in body["notSubmitted"]] == ["carol"]


def test_roster_for_unknown_assignment(client, as_user):
    r = client.get("/progress/assignments/9999/roster", headers=as_user("mentor1"))
    assert r.status_code == 500
    assert r.json()["detail"] == "Assignment not found"


def test_sql_queries_filter_on_same_enrollment(db, ids):
    queries = SqlAlchemyProgressQueries(db)

    assert queries.count_enrollments(EnrollmentFilter(course_id=ids["course"])) == 3
    assert queries.count_enrollments(EnrollmentFilter(mentor_username="mentor1")) == 2
    unmentored = queries.find_enrollments(EnrollmentFilter(course_id=ids["course"], has_mentor=False))
    assert unmentored == []
    alice = queries.find_enrollments(EnrollmentFilter(username="alice"))
    assert [e.mentor_username for e in alice] == ["mentor1"]

    mentees = queries.find_users(UserFilter(enrolled_course_id=ids["course"], mentor_username="mentor2"))
    assert [u.username for u in mentees] == ["carol"]

    subs = queries.find_submissions(SubmissionFilter(assignment_id=ids["hw2"]))
    assert len(subs) == 1
    assert subs[0].username == "carol"
    assert subs[0].max_submissions == 3
    assert sorted(p.score for p in subs[0].points) == [3, 7]

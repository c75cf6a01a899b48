from coursetrack.models.attachment import Attachment
from coursetrack.models.course import Course


def test_assigned_assignments_only_carry_own_submissions(client, as_user):
    r = client.get("/assignments/assigned", headers=as_user("alice"))
    assert r.status_code == 200, r.text
    courses = r.json()
    assert len(courses) == 1

    assignments = courses[0]["assignments"]
    assert [a["title"] for a in assignments] == ["HW1", "HW2"]
    assert assignments[0]["class_title"] == "Week 1"
    assert [s["username"] for s in assignments[0]["submissions"]] == ["alice"]
    assert assignments[0]["submissions"][0]["points"][0]["score"] == 10
    assert assignments[1]["submissions"] == []


def test_mentor_assignments_skip_unsubmitted(client, as_user):
    r = client.get("/assignments/mentor", headers=as_user("mentor1"))
    assert r.status_code == 200, r.text
    assignments = r.json()[0]["assignments"]
    assert [a["title"] for a in assignments] == ["HW1"]
    assert sorted(s["username"] for s in assignments[0]["submissions"]) == ["alice", "bob"]


def test_mentor_assignments_forbidden_for_students(client, as_user):
    r = client.get("/assignments/mentor", headers=as_user("alice"))
    assert r.status_code == 403


def test_instructor_assignments_carry_all_submissions(client, as_user):
    r = client.get("/assignments/instructor", headers=as_user("inst"))
    assert r.status_code == 200, r.text
    counts = {a["title"]: len(a["submissions"]) for a in r.json()[0]["assignments"]}
    assert counts == {"HW1": 2, "HW2": 1}


def test_all_assignments_newest_first(client, as_user):
    r = client.get("/assignments", headers=as_user("bob"))
    assert r.status_code == 200, r.text
    assert [a["title"] for a in r.json()] == ["HW2", "HW1"]


def test_all_assignments_empty_for_unrelated_user(client, as_user):
    r = client.get("/assignments", headers=as_user("mentor2"))
    assert r.json() == []


def test_assignment_details(client, as_user, db):
    hw1 = db.query(Attachment).filter(Attachment.title == "HW1").one()
    r = client.get(f"/assignments/{hw1.id}", headers=as_user("bob"))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["course"]["title"] == "Web Dev"
    assert body["course_class"]["title"] == "Week 1"
    assert body["max_submissions"] == 2


def test_links_are_not_assignments(client, as_user, db):
    slides = db.query(Attachment).filter(Attachment.title == "Slides").one()
    r = client.get(f"/assignments/{slides.id}", headers=as_user("bob"))
    assert r.status_code == 404


def test_course_assignments(client, as_user, db):
    course = db.query(Course).one()
    r = client.get(f"/courses/{course.id}/assignments", headers=as_user("carol"))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["title"] == "Web Dev"
    subs = {a["title"]: [s["username"] for s in a["submissions"]] for a in body["assignments"]}
    assert subs == {"HW1": [], "HW2": ["carol"]}

import os
from datetime import datetime, timedelta, timezone

TEST_DB_FILE = "test_coursetrack.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = TEST_DB_URL

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from coursetrack.core.deps import get_db  # noqa: E402
from coursetrack.core.security import hash_password  # noqa: E402
from coursetrack.db.base import Base  # noqa: E402
from coursetrack.main import app  # noqa: E402
from coursetrack.models.attachment import Attachment  # noqa: E402
from coursetrack.models.course import Course  # noqa: E402
from coursetrack.models.course_class import CourseClass  # noqa: E402
from coursetrack.models.enrollment import EnrolledUser  # noqa: E402
from coursetrack.models.point import Point  # noqa: E402
from coursetrack.models.submission import Submission  # noqa: E402
from coursetrack.models.user import User  # noqa: E402

PASSWORD = "password123"
# hashing is slow; do it once for every seeded user
HASHED_PASSWORD = hash_password(PASSWORD)

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def seed_data():
    """
    Seed one course per test:

    - instructor `inst` created course "Web Dev" and administers it
    - class "Week 1" holds HW1 (max 2 submissions), HW2 (max 3) and a LINK
    - alice and bob are mentored by mentor1, carol by mentor2
    - alice submitted HW1 (graded 10), bob submitted HW1 (ungraded),
      carol submitted HW2 (graded 7 + 3)
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()

        def user(username, role):
            return User(
                username=username,
                email=f"{username}@example.com",
                full_name=username.title(),
                role=role,
                hashed_password=HASHED_PASSWORD,
            )

        inst = user("inst", "INSTRUCTOR")
        mentor1 = user("mentor1", "MENTOR")
        mentor2 = user("mentor2", "MENTOR")
        alice = user("alice", "STUDENT")
        bob = user("bob", "STUDENT")
        carol = user("carol", "STUDENT")
        db.add_all([inst, mentor1, mentor2, alice, bob, carol])
        db.commit()

        t0 = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

        course = Course(title="Web Dev", created_by_id=inst.id, created_at=t0)
        course.admins.append(inst)
        db.add(course)
        db.commit()

        week1 = CourseClass(course_id=course.id, title="Week 1", created_at=t0)
        db.add(week1)
        db.commit()

        hw1 = Attachment(
            class_id=week1.id,
            course_id=course.id,
            title="HW1",
            attachment_type="ASSIGNMENT",
            max_submissions=2,
            created_at=t0 + timedelta(hours=1),
        )
        hw2 = Attachment(
            class_id=week1.id,
            course_id=course.id,
            title="HW2",
            attachment_type="ASSIGNMENT",
            max_submissions=3,
            created_at=t0 + timedelta(hours=2),
        )
        slides = Attachment(
            class_id=week1.id,
            course_id=course.id,
            title="Slides",
            attachment_type="LINK",
            created_at=t0 + timedelta(hours=3),
        )
        db.add_all([hw1, hw2, slides])
        db.commit()

        e_alice = EnrolledUser(username="alice", course_id=course.id, mentor_username="mentor1")
        e_bob = EnrolledUser(username="bob", course_id=course.id, mentor_username="mentor1")
        e_carol = EnrolledUser(username="carol", course_id=course.id, mentor_username="mentor2")
        db.add_all([e_alice, e_bob, e_carol])
        db.commit()

        s_alice = Submission(attachment_id=hw1.id, enrolled_user_id=e_alice.id, files={"index.html": "<p>a</p>"})
        s_bob = Submission(attachment_id=hw1.id, enrolled_user_id=e_bob.id, files={"index.html": "<p>b</p>"})
        s_carol = Submission(attachment_id=hw2.id, enrolled_user_id=e_carol.id, files={"index.html": "<p>c</p>"})
        db.add_all([s_alice, s_bob, s_carol])
        db.commit()

        db.add_all(
            [
                Point(submission_id=s_alice.id, score=10),
                Point(submission_id=s_carol.id, score=7, category="html"),
                Point(submission_id=s_carol.id, score=3, category="css"),
            ]
        )
        db.commit()

        yield
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, username: str, password: str = PASSWORD) -> str:
    r = client.post("/auth/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def as_user(client):
    """as_user("alice") -> Authorization header for that seeded user."""

    def _headers(username: str) -> dict:
        return auth_header(login(client, username))

    return _headers

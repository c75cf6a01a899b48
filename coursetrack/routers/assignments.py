from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from coursetrack.core.config import ATTACHMENT_ASSIGNMENT
from coursetrack.core.current_user import get_current_user
from coursetrack.core.deps import get_db
from coursetrack.core.permissions import require_instructor, require_staff
from coursetrack.models.attachment import Attachment
from coursetrack.models.course import Course
from coursetrack.models.course_class import CourseClass
from coursetrack.models.enrollment import EnrolledUser
from coursetrack.models.submission import Submission
from coursetrack.schemas.attachment import AttachmentRead
from coursetrack.schemas.identity import CurrentUser
from coursetrack.schemas.submission import (
    AssignmentDetail,
    AssignmentWithSubmissions,
    CourseAssignments,
    SubmissionRead,
)

router = APIRouter()


def _course_assignments(
    db: Session,
    courses: list[Course],
    *submission_conds,
    only_submitted: bool = False,
) -> list[CourseAssignments]:
    """
    Group the ASSIGNMENT attachments of `courses` per course, each with the
    submissions matching `submission_conds`.

    Assignments follow class order (oldest class first), then attachment
    creation order. With `only_submitted`, assignments without a matching
    submission are left out.
    """
    course_ids = [c.id for c in courses]
    if not course_ids:
        return []

    attachments = (
        db.query(Attachment)
        .join(CourseClass, CourseClass.id == Attachment.class_id)
        .options(joinedload(Attachment.course_class))
        .filter(
            Attachment.course_id.in_(course_ids),
            Attachment.attachment_type == ATTACHMENT_ASSIGNMENT,
        )
        .order_by(
            CourseClass.created_at.asc(),
            CourseClass.id.asc(),
            Attachment.created_at.asc(),
            Attachment.id.asc(),
        )
        .all()
    )

    submissions_by_attachment: dict[int, list[SubmissionRead]] = {}
    if attachments:
        subs = (
            db.query(Submission)
            .join(EnrolledUser, EnrolledUser.id == Submission.enrolled_user_id)
            .options(joinedload(Submission.enrolled_user), selectinload(Submission.points))
            .filter(Submission.attachment_id.in_([a.id for a in attachments]))
            .filter(*submission_conds)
            .order_by(Submission.created_at.asc(), Submission.id.asc())
            .all()
        )
        for s in subs:
            submissions_by_attachment.setdefault(s.attachment_id, []).append(
                SubmissionRead.from_orm_submission(s)
            )

    grouped = {c.id: CourseAssignments(id=c.id, title=c.title) for c in courses}
    for a in attachments:
        subs = submissions_by_attachment.get(a.id, [])
        if only_submitted and not subs:
            continue
        row = AssignmentWithSubmissions(
            **AttachmentRead.model_validate(a).model_dump(),
            class_title=a.course_class.title,
            submissions=subs,
        )
        grouped[a.course_id].assignments.append(row)

    return list(grouped.values())


def _enrolled_courses(db: Session, username: str) -> list[Course]:
    return (
        db.query(Course)
        .filter(Course.enrolled_users.any(EnrolledUser.username == username))
        .order_by(Course.id.asc())
        .all()
    )


@router.get("/assignments", response_model=list[AttachmentRead])
def all_assignments(
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    # courses the caller studies in, owns, or administers; newest assignment first
    return (
        db.query(Attachment)
        .join(Course, Course.id == Attachment.course_id)
        .filter(Attachment.attachment_type == ATTACHMENT_ASSIGNMENT)
        .filter(
            or_(
                Course.enrolled_users.any(EnrolledUser.username == me.username),
                Course.created_by_id == me.id,
                Course.id.in_(me.admin_for_courses),
            )
        )
        .order_by(Attachment.created_at.desc(), Attachment.id.desc())
        .all()
    )


@router.get("/assignments/assigned", response_model=list[CourseAssignments])
def assigned_assignments(
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    courses = _enrolled_courses(db, me.username)
    return _course_assignments(db, courses, EnrolledUser.username == me.username)


@router.get("/assignments/mentor", response_model=list[CourseAssignments])
def mentor_assignments(
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(require_staff),
):
    courses = (
        db.query(Course)
        .filter(Course.enrolled_users.any(EnrolledUser.mentor_username == me.username))
        .order_by(Course.id.asc())
        .all()
    )
    return _course_assignments(
        db,
        courses,
        EnrolledUser.mentor_username == me.username,
        only_submitted=True,
    )


@router.get("/assignments/instructor", response_model=list[CourseAssignments])
def instructor_assignments(
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(require_instructor),
):
    courses = (
        db.query(Course)
        .filter(or_(Course.created_by_id == me.id, Course.id.in_(me.admin_for_courses)))
        .order_by(Course.id.asc())
        .all()
    )
    return _course_assignments(db, courses)


@router.get("/assignments/{assignment_id}", response_model=AssignmentDetail)
def assignment_details(
    assignment_id: int,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    a = (
        db.query(Attachment)
        .options(joinedload(Attachment.course_class), joinedload(Attachment.course))
        .filter(
            Attachment.id == assignment_id,
            Attachment.attachment_type == ATTACHMENT_ASSIGNMENT,
        )
        .first()
    )
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


@router.get("/courses/{course_id}/assignments", response_model=CourseAssignments)
def course_assignments(
    course_id: int,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    # only the caller's own submissions are attached
    return _course_assignments(db, [course], EnrolledUser.username == me.username)[0]

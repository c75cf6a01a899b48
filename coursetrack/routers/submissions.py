import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload

from coursetrack.core.config import ATTACHMENT_ASSIGNMENT
from coursetrack.core.current_user import get_current_user
from coursetrack.core.deps import get_db
from coursetrack.models.attachment import Attachment
from coursetrack.models.course import Course
from coursetrack.models.enrollment import EnrolledUser
from coursetrack.models.point import Point
from coursetrack.models.submission import Submission
from coursetrack.schemas.identity import CurrentUser
from coursetrack.schemas.submission import PointCreate, PointRead, SubmissionCreate, SubmissionRead

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_assignment_exists(db: Session, assignment_id: int) -> Attachment:
    a = (
        db.query(Attachment)
        .filter(
            Attachment.id == assignment_id,
            Attachment.attachment_type == ATTACHMENT_ASSIGNMENT,
        )
        .first()
    )
    if not a:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return a


def _ensure_enrolled(db: Session, course_id: int, username: str) -> EnrolledUser:
    enrollment = (
        db.query(EnrolledUser)
        .filter(EnrolledUser.course_id == course_id, EnrolledUser.username == username)
        .first()
    )
    if not enrollment:
        raise HTTPException(status_code=403, detail="Not enrolled in this course")
    return enrollment


def _ensure_submission_exists(db: Session, submission_id: int) -> Submission:
    sub = (
        db.query(Submission)
        .options(
            joinedload(Submission.enrolled_user),
            joinedload(Submission.assignment),
            selectinload(Submission.points),
        )
        .filter(Submission.id == submission_id)
        .first()
    )
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")
    return sub


def _can_review(db: Session, sub: Submission, user: CurrentUser) -> bool:
    """The submitter's mentor, the course creator and course admins may review."""
    if sub.enrolled_user.mentor_username == user.username:
        return True
    if user.is_admin_for(sub.assignment.course_id):
        return True
    course = db.query(Course).filter(Course.id == sub.assignment.course_id).first()
    return course is not None and course.created_by_id == user.id


def stored_file_path(username: str, assignment_title: str, file_path: str) -> str:
    return f"assignments/{username}/{assignment_title}/{file_path.lstrip('/')}"


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    assignment = _ensure_assignment_exists(db, assignment_id)
    enrollment = _ensure_enrolled(db, assignment.course_id, me.username)

    if assignment.max_submissions is not None:
        already = (
            db.query(func.count(Submission.id))
            .filter(
                Submission.attachment_id == assignment.id,
                Submission.enrolled_user_id == enrollment.id,
            )
            .scalar()
        ) or 0
        if already >= assignment.max_submissions:
            raise HTTPException(
                status_code=400,
                detail=f"Submission limit reached ({assignment.max_submissions})",
            )

    files = {
        stored_file_path(me.username, assignment.title, path): code
        for path, code in payload.files.items()
    }

    s = Submission(
        attachment_id=assignment.id,
        enrolled_user_id=enrollment.id,
        files=files,
    )
    db.add(s)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(s)
    logger.info("%s submitted assignment %s (%d files)", me.username, assignment.id, len(files))
    return SubmissionRead.from_orm_submission(s)


@router.get("/submissions/{submission_id}", response_model=SubmissionRead)
def get_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    sub = _ensure_submission_exists(db, submission_id)
    if sub.enrolled_user.username != me.username and not _can_review(db, sub, me):
        raise HTTPException(status_code=403, detail="Not allowed to view this submission")
    return SubmissionRead.from_orm_submission(sub)


@router.post(
    "/submissions/{submission_id}/points",
    response_model=PointRead,
    status_code=status.HTTP_201_CREATED,
)
def grade_submission(
    submission_id: int,
    payload: PointCreate,
    db: Session = Depends(get_db),
    me: CurrentUser = Depends(get_current_user),
):
    sub = _ensure_submission_exists(db, submission_id)
    if not _can_review(db, sub, me):
        raise HTTPException(status_code=403, detail="Only the mentor or a course admin can grade")

    p = Point(submission_id=sub.id, score=payload.score, category=payload.category)
    db.add(p)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(p)
    logger.info("%s graded submission %s with %s", me.username, sub.id, p.score)
    return p

from __future__ import annotations

from abc import ABC, abstractmethod

from sqlalchemy import and_, func
from sqlalchemy.orm import Query, Session, contains_eager, selectinload

from coursetrack.core.config import ATTACHMENT_ASSIGNMENT
from coursetrack.models.attachment import Attachment
from coursetrack.models.course import Course
from coursetrack.models.enrollment import EnrolledUser
from coursetrack.models.submission import Submission
from coursetrack.models.user import User
from coursetrack.schemas.filters import (
    AssignmentFilter,
    EnrollmentFilter,
    SubmissionFilter,
    UserFilter,
)
from coursetrack.schemas.records import (
    AssignmentRecord,
    EnrollmentRecord,
    PointRecord,
    SubmissionRecord,
    UserRecord,
)


class ProgressQueries(ABC):
    """Read-only view of the store used by the progress aggregator."""

    @abstractmethod
    def find_enrollments(self, flt: EnrollmentFilter) -> list[EnrollmentRecord]:
        raise NotImplementedError

    @abstractmethod
    def count_enrollments(self, flt: EnrollmentFilter) -> int:
        raise NotImplementedError

    @abstractmethod
    def find_assignments(self, flt: AssignmentFilter) -> list[AssignmentRecord]:
        """ASSIGNMENT attachments, oldest first."""
        raise NotImplementedError

    @abstractmethod
    def count_assignments(self, flt: AssignmentFilter) -> int:
        raise NotImplementedError

    @abstractmethod
    def find_assignment(self, assignment_id: int) -> AssignmentRecord | None:
        raise NotImplementedError

    @abstractmethod
    def find_submissions(self, flt: SubmissionFilter) -> list[SubmissionRecord]:
        """Submissions with their points, submitter enrollment and the
        parent assignment's max_submissions."""
        raise NotImplementedError

    @abstractmethod
    def find_users(self, flt: UserFilter) -> list[UserRecord]:
        raise NotImplementedError


def _enrollment_conditions(
    *,
    course_id=None,
    username=None,
    mentor_username=None,
    course_created_by_id=None,
    has_mentor=None,
) -> list:
    conds = []
    if course_id is not None:
        conds.append(EnrolledUser.course_id == course_id)
    if username is not None:
        conds.append(EnrolledUser.username == username)
    if mentor_username is not None:
        conds.append(EnrolledUser.mentor_username == mentor_username)
    if course_created_by_id is not None:
        conds.append(
            EnrolledUser.course.has(Course.created_by_id == course_created_by_id)
        )
    if has_mentor is True:
        conds.append(EnrolledUser.mentor_username.is_not(None))
    elif has_mentor is False:
        conds.append(EnrolledUser.mentor_username.is_(None))
    return conds


def _submission_record(s: Submission) -> SubmissionRecord:
    return SubmissionRecord(
        id=s.id,
        attachment_id=s.attachment_id,
        created_at=s.created_at,
        enrolled_user=EnrollmentRecord.model_validate(s.enrolled_user),
        points=[PointRecord.model_validate(p) for p in s.points],
        max_submissions=s.assignment.max_submissions,
    )


class SqlAlchemyProgressQueries(ProgressQueries):
    def __init__(self, db: Session):
        self.db = db

    def _enrollments(self, flt: EnrollmentFilter) -> Query:
        return self.db.query(EnrolledUser).filter(
            *_enrollment_conditions(**flt.model_dump())
        )

    def _assignments(self, flt: AssignmentFilter) -> Query:
        q = self.db.query(Attachment).filter(
            Attachment.attachment_type == ATTACHMENT_ASSIGNMENT
        )
        if flt.course_id is not None:
            q = q.filter(Attachment.course_id == flt.course_id)
        return q

    def find_enrollments(self, flt: EnrollmentFilter) -> list[EnrollmentRecord]:
        rows = self._enrollments(flt).order_by(EnrolledUser.id.asc()).all()
        return [EnrollmentRecord.model_validate(r) for r in rows]

    def count_enrollments(self, flt: EnrollmentFilter) -> int:
        return (
            self._enrollments(flt).with_entities(func.count(EnrolledUser.id)).scalar()
        ) or 0

    def find_assignments(self, flt: AssignmentFilter) -> list[AssignmentRecord]:
        rows = (
            self._assignments(flt)
            .order_by(Attachment.created_at.asc(), Attachment.id.asc())
            .all()
        )
        return [AssignmentRecord.model_validate(r) for r in rows]

    def count_assignments(self, flt: AssignmentFilter) -> int:
        return (
            self._assignments(flt).with_entities(func.count(Attachment.id)).scalar()
        ) or 0

    def find_assignment(self, assignment_id: int) -> AssignmentRecord | None:
        row = (
            self.db.query(Attachment)
            .filter(
                Attachment.id == assignment_id,
                Attachment.attachment_type == ATTACHMENT_ASSIGNMENT,
            )
            .first()
        )
        return AssignmentRecord.model_validate(row) if row else None

    def find_submissions(self, flt: SubmissionFilter) -> list[SubmissionRecord]:
        q = (
            self.db.query(Submission)
            .join(Submission.enrolled_user)
            .join(Submission.assignment)
            .options(
                contains_eager(Submission.enrolled_user),
                contains_eager(Submission.assignment),
                selectinload(Submission.points),
            )
        )

        if flt.assignment_id is not None:
            q = q.filter(Submission.attachment_id == flt.assignment_id)
        if flt.assignment_course_id is not None:
            q = q.filter(Attachment.course_id == flt.assignment_course_id)

        q = q.filter(
            *_enrollment_conditions(
                course_id=flt.enrollment_course_id,
                username=flt.username,
                mentor_username=flt.mentor_username,
                course_created_by_id=flt.course_created_by_id,
            )
        )

        rows = q.order_by(Submission.id.asc()).all()
        return [_submission_record(s) for s in rows]

    def find_users(self, flt: UserFilter) -> list[UserRecord]:
        conds = _enrollment_conditions(
            course_id=flt.enrolled_course_id,
            username=flt.username,
            mentor_username=flt.mentor_username,
            course_created_by_id=flt.course_created_by_id,
            has_mentor=flt.has_mentor,
        )
        enrolled = User.enrollments.any(and_(*conds)) if conds else User.enrollments.any()
        rows = (
            self.db.query(User)
            .filter(enrolled)
            .order_by(User.username.asc())
            .all()
        )
        return [UserRecord.model_validate(u) for u in rows]

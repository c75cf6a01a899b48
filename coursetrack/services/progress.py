"""
Submission and grading statistics for the course dashboards.

Every operation takes the resolved caller explicitly. A missing caller is
rejected with `Unauthorized` before the store is touched; anything else that
goes wrong surfaces as a single `OperationFailed` carrying the original
message. Nothing here writes to the store or keeps state between calls.
"""
import logging
from collections import Counter
from contextlib import contextmanager

from coursetrack.core.config import ROLE_INSTRUCTOR, ROLE_MENTOR
from coursetrack.core.errors import OperationFailed, Unauthorized
from coursetrack.repositories.progress_queries import ProgressQueries
from coursetrack.schemas.filters import (
    AssignmentFilter,
    EnrollmentFilter,
    SubmissionFilter,
    UserFilter,
)
from coursetrack.schemas.identity import CurrentUser
from coursetrack.schemas.progress import (
    AssignmentRoster,
    CoursePieBreakdown,
    LineChartSeries,
    ProgressSummary,
)
from coursetrack.schemas.records import AssignmentRecord, SubmissionRecord

logger = logging.getLogger(__name__)


def _require_caller(caller: CurrentUser | None) -> CurrentUser:
    if caller is None or not caller.username:
        raise Unauthorized()
    return caller


@contextmanager
def _operation(name: str, caller: CurrentUser):
    logger.debug("%s requested by %s (%s)", name, caller.username, caller.role)
    try:
        yield
    except (Unauthorized, OperationFailed):
        raise
    except Exception as exc:
        logger.warning("%s failed for %s: %s", name, caller.username, exc, exc_info=True)
        raise OperationFailed.wrap(exc) from exc


def partition_by_grading(
    submissions: list[SubmissionRecord],
) -> tuple[list[SubmissionRecord], list[SubmissionRecord]]:
    """Split into (graded, ungraded). Graded means at least one point."""
    graded, ungraded = [], []
    for s in submissions:
        (graded if s.is_graded else ungraded).append(s)
    return graded, ungraded


def total_points(submissions: list[SubmissionRecord]) -> float:
    return sum(s.score for s in submissions)


def expected_submissions(assignments: list[AssignmentRecord]) -> int:
    # a missing limit counts as zero expected submissions
    return sum(a.max_submissions or 0 for a in assignments)


class ProgressAggregator:
    def __init__(self, queries: ProgressQueries):
        self.queries = queries

    def course_pie_breakdown(
        self, caller: CurrentUser | None, course_id: int
    ) -> CoursePieBreakdown:
        """
        Graded / ungraded / missing submissions across a course.

        Mentors only see their own mentees; everyone else sees the whole
        course. The expected total is (#assignments x #enrollments in scope),
        and `not_submitted` is reported as-is even when negative.
        """
        caller = _require_caller(caller)
        with _operation("course_pie_breakdown", caller):
            if caller.role == ROLE_MENTOR:
                submissions = self.queries.find_submissions(
                    SubmissionFilter(
                        mentor_username=caller.username,
                        enrollment_course_id=course_id,
                    )
                )
                mentees = self.queries.count_enrollments(
                    EnrollmentFilter(mentor_username=caller.username, course_id=course_id)
                )
            else:
                submissions = self.queries.find_submissions(
                    SubmissionFilter(assignment_course_id=course_id)
                )
                mentees = self.queries.count_enrollments(
                    EnrollmentFilter(course_id=course_id)
                )

            graded, ungraded = partition_by_grading(submissions)
            assignments = self.queries.count_assignments(
                AssignmentFilter(course_id=course_id)
            )

            return CoursePieBreakdown(
                with_points=len(graded),
                without_points=len(ungraded),
                not_submitted=assignments * mentees - len(graded) - len(ungraded),
            )

    def mentor_breakdown(
        self, caller: CurrentUser | None, mentor_username: str, course_id: int
    ) -> ProgressSummary:
        """Pie data for all mentees of `mentor_username` in a course.

        Expected total is the sum of max_submissions over the course's
        assignments. `evaluated` counts every submission found.
        """
        caller = _require_caller(caller)
        with _operation("mentor_breakdown", caller):
            submissions = self.queries.find_submissions(
                SubmissionFilter(
                    mentor_username=mentor_username,
                    assignment_course_id=course_id,
                )
            )
            graded, ungraded = partition_by_grading(submissions)
            expected = expected_submissions(
                self.queries.find_assignments(AssignmentFilter(course_id=course_id))
            )

            return ProgressSummary(
                evaluated=len(submissions),
                under_review=len(ungraded),
                unsubmitted=expected - len(graded) - len(ungraded),
                total_points=total_points(submissions),
                total_submissions=len(submissions),
                graded_submissions=len(graded),
            )

    def student_breakdown(
        self,
        caller: CurrentUser | None,
        course_id: int,
        username: str | None = None,
    ) -> ProgressSummary:
        """Pie data for one student; defaults to the caller themself.

        Here `evaluated` counts graded submissions only and points are summed
        over those.
        """
        caller = _require_caller(caller)
        with _operation("student_breakdown", caller):
            submissions = self.queries.find_submissions(
                SubmissionFilter(
                    username=username or caller.username,
                    assignment_course_id=course_id,
                )
            )
            graded, _ = partition_by_grading(submissions)
            expected = expected_submissions(
                self.queries.find_assignments(AssignmentFilter(course_id=course_id))
            )

            return ProgressSummary(
                evaluated=len(graded),
                under_review=len(submissions) - len(graded),
                unsubmitted=expected - len(submissions),
                total_points=total_points(graded),
                total_submissions=len(submissions),
                graded_submissions=len(graded),
            )

    def line_chart(
        self,
        caller: CurrentUser | None,
        course_id: int,
        mentor_username: str | None = None,
    ) -> LineChartSeries:
        """Submission count per assignment, assignments oldest first.

        An explicit `mentor_username` wins; otherwise mentors are limited to
        their own mentees and other roles see every submission.
        """
        caller = _require_caller(caller)
        with _operation("line_chart", caller):
            if mentor_username is None and caller.role == ROLE_MENTOR:
                mentor_username = caller.username

            assignments = self.queries.find_assignments(
                AssignmentFilter(course_id=course_id)
            )
            submissions = self.queries.find_submissions(
                SubmissionFilter(
                    assignment_course_id=course_id,
                    mentor_username=mentor_username,
                )
            )
            per_assignment = Counter(s.attachment_id for s in submissions)

            return LineChartSeries(
                assignments=[a.title for a in assignments],
                count_for_each_assignment=[per_assignment[a.id] for a in assignments],
            )

    def assignment_roster(
        self, caller: CurrentUser | None, assignment_id: int
    ) -> AssignmentRoster:
        """
        Submissions for one assignment plus everyone in scope who has not
        submitted.

        Scope: a mentor's own mentees, an instructor's students (enrollments
        with a mentor) in a course they created or administer, or a student's
        own enrollment. Submissions come back sorted by username.
        """
        caller = _require_caller(caller)
        with _operation("assignment_roster", caller):
            assignment = self.queries.find_assignment(assignment_id)
            if assignment is None:
                raise LookupError("Assignment not found")

            sub_flt, user_flt = self._roster_scope(caller, assignment)
            submissions = self.queries.find_submissions(sub_flt)
            eligible = self.queries.find_users(user_flt)

            submitted = {s.username for s in submissions}
            not_submitted = [u for u in eligible if u.username not in submitted]

            return AssignmentRoster(
                submissions=sorted(submissions, key=lambda s: s.username),
                not_submitted=not_submitted,
                is_course_admin=caller.is_admin_for(assignment.course_id),
            )

    @staticmethod
    def _roster_scope(
        caller: CurrentUser, assignment: AssignmentRecord
    ) -> tuple[SubmissionFilter, UserFilter]:
        if caller.role == ROLE_MENTOR:
            return (
                SubmissionFilter(
                    assignment_id=assignment.id,
                    mentor_username=caller.username,
                ),
                UserFilter(
                    # mentees of other courses are not expected to submit here
                    enrolled_course_id=assignment.course_id,
                    mentor_username=caller.username,
                ),
            )

        if caller.role == ROLE_INSTRUCTOR:
            owner_id = None if caller.is_admin_for(assignment.course_id) else caller.id
            return (
                SubmissionFilter(
                    assignment_id=assignment.id,
                    course_created_by_id=owner_id,
                ),
                UserFilter(
                    enrolled_course_id=assignment.course_id,
                    course_created_by_id=owner_id,
                    has_mentor=True,
                ),
            )

        return (
            SubmissionFilter(assignment_id=assignment.id, username=caller.username),
            UserFilter(
                enrolled_course_id=assignment.course_id,
                username=caller.username,
            ),
        )

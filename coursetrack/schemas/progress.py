from typing import NamedTuple

from pydantic import BaseModel, Field

from coursetrack.schemas.records import SubmissionRecord, UserRecord


class CoursePieBreakdown(NamedTuple):
    with_points: int
    without_points: int
    # signed: goes negative when submissions outnumber the expected slots
    not_submitted: int


class ProgressSummary(BaseModel):
    """Pie data for one mentor's mentees or for one student.

    `evaluated` keeps the label the dashboard charts read. For a mentor's
    breakdown it counts every submission; for a student's breakdown only the
    graded ones. `total_submissions` and `graded_submissions` always mean
    what they say.
    """

    evaluated: int
    under_review: int = Field(alias="underReview")
    unsubmitted: int
    total_points: float = Field(alias="totalPoints")
    total_submissions: int = Field(alias="totalSubmissions")
    graded_submissions: int = Field(alias="gradedSubmissions")

    class Config:
        populate_by_name = True


class LineChartSeries(BaseModel):
    assignments: list[str]
    count_for_each_assignment: list[int] = Field(alias="countForEachAssignment")

    class Config:
        populate_by_name = True


class AssignmentRoster(NamedTuple):
    submissions: list[SubmissionRecord]
    not_submitted: list[UserRecord]
    is_course_admin: bool


class AssignmentRosterRead(BaseModel):
    submissions: list[SubmissionRecord]
    not_submitted: list[UserRecord] = Field(alias="notSubmitted")
    is_course_admin: bool = Field(alias="isCourseAdmin")

    class Config:
        populate_by_name = True

    @classmethod
    def from_roster(cls, roster: AssignmentRoster) -> "AssignmentRosterRead":
        return cls(
            submissions=roster.submissions,
            not_submitted=roster.not_submitted,
            is_course_admin=roster.is_course_admin,
        )

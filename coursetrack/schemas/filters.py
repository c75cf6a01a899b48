from typing import Optional

from pydantic import BaseModel

# Every field is optional; set fields are AND-combined by the query adapter.


class EnrollmentFilter(BaseModel):
    course_id: Optional[int] = None
    username: Optional[str] = None
    mentor_username: Optional[str] = None
    course_created_by_id: Optional[int] = None
    has_mentor: Optional[bool] = None


class AssignmentFilter(BaseModel):
    course_id: Optional[int] = None


class SubmissionFilter(BaseModel):
    assignment_id: Optional[int] = None
    # course of the submitted assignment
    assignment_course_id: Optional[int] = None
    # course of the submitter's enrollment
    enrollment_course_id: Optional[int] = None
    username: Optional[str] = None
    mentor_username: Optional[str] = None
    course_created_by_id: Optional[int] = None


class UserFilter(BaseModel):
    """Users matched through one of their enrollments.

    All enrollment conditions apply to the same enrollment row.
    """

    enrolled_course_id: Optional[int] = None
    mentor_username: Optional[str] = None
    username: Optional[str] = None
    course_created_by_id: Optional[int] = None
    has_mentor: Optional[bool] = None

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from coursetrack.schemas.attachment import AttachmentRead
from coursetrack.schemas.course import ClassRead, CourseRead


class SubmissionCreate(BaseModel):
    # file path inside the playground -> file content
    files: dict[str, str] = Field(min_length=1)


class PointCreate(BaseModel):
    score: float = Field(ge=0)
    category: Optional[str] = None


class PointRead(BaseModel):
    id: int
    submission_id: int
    score: float
    category: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionRead(BaseModel):
    id: int
    attachment_id: int
    enrolled_user_id: int
    username: str
    mentor_username: Optional[str] = None
    files: dict[str, str]
    created_at: datetime
    points: list[PointRead] = []

    @classmethod
    def from_orm_submission(cls, submission) -> "SubmissionRead":
        return cls(
            id=submission.id,
            attachment_id=submission.attachment_id,
            enrolled_user_id=submission.enrolled_user_id,
            username=submission.enrolled_user.username,
            mentor_username=submission.enrolled_user.mentor_username,
            files=submission.files or {},
            created_at=submission.created_at,
            points=[PointRead.model_validate(p) for p in submission.points],
        )


class AssignmentWithSubmissions(AttachmentRead):
    class_title: str
    submissions: list[SubmissionRead] = []


class CourseAssignments(BaseModel):
    id: int
    title: str
    assignments: list[AssignmentWithSubmissions] = []


class AssignmentDetail(AttachmentRead):
    course_class: ClassRead
    course: CourseRead

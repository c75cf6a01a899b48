from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

# Read-only snapshots handed out by the query adapter.


class PointRecord(BaseModel):
    id: int
    score: float
    category: Optional[str] = None

    class Config:
        from_attributes = True


class EnrollmentRecord(BaseModel):
    id: int
    username: str
    course_id: int
    mentor_username: Optional[str] = None

    class Config:
        from_attributes = True


class AssignmentRecord(BaseModel):
    id: int
    course_id: int
    class_id: int
    title: str
    max_submissions: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionRecord(BaseModel):
    id: int
    attachment_id: int
    created_at: datetime
    enrolled_user: EnrollmentRecord
    points: list[PointRecord] = Field(default_factory=list)
    # parent assignment's limit
    max_submissions: Optional[int] = None

    @property
    def username(self) -> str:
        return self.enrolled_user.username

    @property
    def is_graded(self) -> bool:
        return len(self.points) > 0

    @property
    def score(self) -> float:
        return sum(p.score for p in self.points)


class UserRecord(BaseModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    role: str

    class Config:
        from_attributes = True

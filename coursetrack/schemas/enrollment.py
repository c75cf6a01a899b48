from datetime import datetime

from pydantic import BaseModel


class EnrollmentCreate(BaseModel):
    course_id: int


class MentorAssign(BaseModel):
    mentor_username: str | None = None


class EnrollmentOut(BaseModel):
    id: int
    username: str
    course_id: int
    mentor_username: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True

from datetime import datetime

from pydantic import BaseModel, Field

from coursetrack.schemas.attachment import AttachmentRead


class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None


class CourseRead(BaseModel):
    id: int
    title: str
    description: str | None = None
    created_by_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class CourseWithClassCount(CourseRead):
    class_count: int = 0


class CourseAdminAdd(BaseModel):
    username: str


class ClassCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    video_url: str | None = None


class ClassRead(BaseModel):
    id: int
    course_id: int
    title: str
    video_url: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClassDetail(ClassRead):
    attachments: list[AttachmentRead] = []


class ClassWithCourse(ClassDetail):
    course: CourseRead

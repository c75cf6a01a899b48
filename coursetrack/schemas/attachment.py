from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class AttachmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    attachment_type: Literal["ASSIGNMENT", "LINK", "NOTE"] = "ASSIGNMENT"
    max_submissions: Optional[int] = Field(default=None, ge=0)
    due_at: Optional[datetime] = None


class AttachmentRead(BaseModel):
    id: int
    class_id: int
    course_id: int
    title: str
    description: Optional[str]
    attachment_type: str
    max_submissions: Optional[int]
    due_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True

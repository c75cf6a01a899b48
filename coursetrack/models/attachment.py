from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from coursetrack.core.config import ATTACHMENT_ASSIGNMENT
from coursetrack.db.base_class import Base


class Attachment(Base):
    """Material hung off a class. Type ASSIGNMENT is what students submit to."""

    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    # denormalised from the class so course-wide filters don't need a join
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    attachment_type = Column(String(32), nullable=False, default=ATTACHMENT_ASSIGNMENT, index=True)

    # null means "no limit recorded"; progress maths counts it as 0
    max_submissions = Column(Integer, nullable=True)
    due_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    course_class = relationship("CourseClass", back_populates="attachments")
    course = relationship("Course", back_populates="attachments")

    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")

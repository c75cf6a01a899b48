from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursetrack.db.base_class import Base
from coursetrack.models.user import course_admins


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_by_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    created_by = relationship("User")

    admins = relationship(
        "User", secondary=course_admins, back_populates="admin_for_courses"
    )

    classes = relationship(
        "CourseClass",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseClass.created_at",
    )

    attachments = relationship(
        "Attachment", back_populates="course", cascade="all, delete-orphan"
    )

    enrolled_users = relationship(
        "EnrolledUser", back_populates="course", cascade="all, delete-orphan"
    )

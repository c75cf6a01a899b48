from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coursetrack.core.config import ROLE_STUDENT
from coursetrack.db.base_class import Base

course_admins = Table(
    "course_admins",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("course_id", ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str | None] = mapped_column(String(255))
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default=ROLE_STUDENT)

    enrollments = relationship(
        "EnrolledUser",
        back_populates="user",
        foreign_keys="EnrolledUser.username",
        cascade="all, delete-orphan",
    )

    mentees = relationship(
        "EnrolledUser",
        back_populates="mentor",
        foreign_keys="EnrolledUser.mentor_username",
    )

    admin_for_courses = relationship(
        "Course", secondary=course_admins, back_populates="admins"
    )

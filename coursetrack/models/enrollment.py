from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from coursetrack.db.base_class import Base


class EnrolledUser(Base):
    __tablename__ = "enrolled_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(
        String(64),
        ForeignKey("users.username", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    mentor_username = Column(
        String(64),
        ForeignKey("users.username", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("username", "course_id", name="uq_enrolled_users_username_course"),
    )

    user = relationship("User", back_populates="enrollments", foreign_keys=[username])
    mentor = relationship("User", back_populates="mentees", foreign_keys=[mentor_username])
    course = relationship("Course", back_populates="enrolled_users")

    submissions = relationship(
        "Submission", back_populates="enrolled_user", cascade="all, delete-orphan"
    )

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import relationship

from coursetrack.db.base_class import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)

    attachment_id = Column(Integer, ForeignKey("attachments.id", ondelete="CASCADE"), nullable=False, index=True)
    enrolled_user_id = Column(Integer, ForeignKey("enrolled_users.id", ondelete="CASCADE"), nullable=False, index=True)

    # stored path -> file content
    files = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    assignment = relationship("Attachment", back_populates="submissions")
    enrolled_user = relationship("EnrolledUser", back_populates="submissions")

    points = relationship(
        "Point",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="Point.id",
    )

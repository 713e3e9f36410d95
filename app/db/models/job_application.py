"""
JobApplication model for applications submitted by candidates.

The CV itself lives in blob storage; only its URL is kept here.
"""
import enum
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, Index, Enum
from sqlalchemy.sql import func
from app.db.base import Base
from app.db.models.user import _enum_values


class ApplicationStatus(str, enum.Enum):
    """Review status, set by admins and moderators."""
    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    offer_id = Column(Integer, ForeignKey("offers.id", ondelete="SET NULL"), nullable=True, index=True)

    position = Column(String(100), nullable=False, index=True)
    experience = Column(Integer, nullable=False)
    education = Column(Text, nullable=False)
    motivation = Column(Text, nullable=False)
    availability = Column(Date, nullable=False)
    desired_salary = Column(Numeric(10, 2), nullable=True)
    cv_url = Column(String(500), nullable=True)

    status = Column(
        Enum(ApplicationStatus, native_enum=False, length=20, values_callable=_enum_values),
        nullable=False,
        default=ApplicationStatus.PENDING,
        index=True,
    )
    admin_comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_application_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self):
        return f"<JobApplication(id={self.id}, position='{self.position}', status='{self.status}')>"

"""
Application database model.

A candidate's submission (name, email, CV file) against one job posting.
"""

import uuid
from sqlalchemy import Column, String, ForeignKey, DateTime, Uuid, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from jobboard.core.database import Base
from jobboard.models.job import utcnow


class Application(Base):
    """
    At most one application exists per (email, job): the unique constraint is
    what settles concurrent duplicate submissions.
    """
    __tablename__ = "applications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid, ForeignKey("jobs.id"), nullable=False)

    name = Column(String, nullable=False)
    email = Column(String, nullable=False)  # stored lowercased

    # File Storage
    cv_path = Column(String, nullable=False)
    original_filename = Column(String, nullable=False)

    applied_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    job = relationship("Job", back_populates="applications")

    __table_args__ = (
        UniqueConstraint("email", "job_id", name="uq_applications_email_job_id"),
        Index("ix_applications_job_id_applied_at", "job_id", "applied_at"),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, job_id={self.job_id}, email='{self.email}')>"

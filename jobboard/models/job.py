import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, Uuid, Index
from sqlalchemy.orm import relationship
from jobboard.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Job(Base):
    """
    A posted position. Created by an employer and never edited afterwards.
    """
    __tablename__ = "jobs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False, index=True)
    company = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=True)
    salary = Column(String, nullable=True)

    date_posted = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    applications = relationship("Application", back_populates="job")

    __table_args__ = (
        Index("ix_jobs_date_posted", "date_posted"),
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company='{self.company}')>"

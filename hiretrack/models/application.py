# hiretrack/models/application.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from hiretrack.database import Base


class ApplicationStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    REVIEWED = "reviewed"
    UNDER_REVIEW = "under_review"
    SHORTLISTED = "shortlisted"
    INTERVIEWING = "interviewing"
    OFFERED = "offered"
    ACCEPTED = "accepted"
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class JobApplication(Base):
    __tablename__ = "job_applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_job_applications_job_applicant"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    job = relationship("Job", back_populates="applications")

    applicant_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    applicant = relationship("User", foreign_keys=[applicant_id])

    status = Column(String(20), default=ApplicationStatus.SUBMITTED.value, nullable=False, index=True)
    cover_letter = Column(Text, nullable=True)
    answers = Column(JSON, nullable=True)
    resume = Column(String(255), nullable=True)
    resume_url = Column(String(512), nullable=True)
    additional_documents = Column(JSON, nullable=True)

    submitted_at = Column(DateTime, nullable=True, index=True)
    withdrawn_at = Column(DateTime, nullable=True)

    score = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)

    reviewed_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_id])
    reviewed_at = Column(DateTime, nullable=True)

    documents = relationship("Document", back_populates="job_application")
    interviews = relationship(
        "Interview",
        back_populates="job_application",
        cascade="all, delete-orphan",
        order_by="Interview.scheduled_at",
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<JobApplication id={self.id} job_id={self.job_id} status={self.status}>"

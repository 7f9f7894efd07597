# hiretrack/models/job.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from hiretrack.database import Base


class JobStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ACTIVE = "active"
    CLOSED = "closed"
    ARCHIVED = "archived"
    CANCELLED = "cancelled"


class JobType(str, enum.Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class ExperienceLevel(str, enum.Enum):
    ENTRY = "entry"
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"
    EXECUTIVE = "executive"


# Statuses in which a job has been published at some point and still counts as live or closed
PUBLISHED_STATES = frozenset({JobStatus.PUBLISHED.value, JobStatus.ACTIVE.value, JobStatus.CLOSED.value})

# Statuses in which a job accepts applications
OPEN_STATES = frozenset({JobStatus.PUBLISHED.value, JobStatus.ACTIVE.value})


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    requirements = Column(Text, nullable=True)
    benefits = Column(Text, nullable=True)
    department = Column(String(100), nullable=False, default="", index=True)
    location = Column(String(200), nullable=False, default="")

    status = Column(String(20), default=JobStatus.DRAFT.value, nullable=False, index=True)
    type = Column(String(20), default=JobType.FULL_TIME.value, nullable=False)
    salary_min = Column(Numeric(10, 2), nullable=True)
    salary_max = Column(Numeric(10, 2), nullable=True)
    experience_level = Column(String(20), nullable=True)
    skills = Column(JSON, nullable=True)
    application_deadline = Column(Date, nullable=True)

    published_at = Column(DateTime, nullable=True)
    closed_at = Column(DateTime, nullable=True)

    created_by_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_by = relationship("User", foreign_keys=[created_by_id])

    applications = relationship(
        "JobApplication",
        back_populates="job",
        cascade="all, delete-orphan",
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Job id={self.id} title={self.title!r} status={self.status}>"

# hiretrack/models/interview.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from hiretrack.database import Base


class InterviewType(str, enum.Enum):
    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in_person"
    PANEL = "panel"
    TECHNICAL = "technical"


class InterviewStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"
    NO_SHOW = "no_show"


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    job_application_id = Column(
        String(36), ForeignKey("job_applications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_application = relationship("JobApplication", back_populates="interviews")

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), default=InterviewType.VIDEO.value, nullable=False)
    status = Column(String(20), default=InterviewStatus.SCHEDULED.value, nullable=False, index=True)

    scheduled_at = Column(DateTime, nullable=False, index=True)  # store in UTC
    end_time = Column(DateTime, nullable=True)
    location = Column(String(255), nullable=True)
    meeting_link = Column(String(512), nullable=True)
    notes = Column(Text, nullable=True)

    score = Column(Float, nullable=True)
    feedback = Column(JSON, nullable=True)

    interviewer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    interviewer = relationship("User", foreign_keys=[interviewer_id])

    scheduled_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    scheduled_by = relationship("User", foreign_keys=[scheduled_by_id])

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Interview id={self.id} status={self.status} at={self.scheduled_at}>"

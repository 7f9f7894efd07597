# hiretrack/models/notification.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from hiretrack.database import Base


class NotificationType(str, enum.Enum):
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_STATUS_CHANGED = "application_status_changed"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    DOCUMENT_REVIEWED = "document_reviewed"
    JOB_POSTED = "job_posted"
    SYSTEM_ANNOUNCEMENT = "system_announcement"


class NotificationPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(40), default=NotificationType.SYSTEM_ANNOUNCEMENT.value, nullable=False)
    priority = Column(String(10), default=NotificationPriority.MEDIUM.value, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    action_url = Column(String(512), nullable=True)

    # "metadata" is reserved on declarative classes
    extra = Column("metadata", JSON, nullable=True)

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user = relationship("User", foreign_keys=[user_id])

    triggered_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    triggered_by = relationship("User", foreign_keys=[triggered_by_id])

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<Notification id={self.id} user_id={self.user_id} read={self.is_read}>"

import logging
import math
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from hiretrack.models.notification import Notification, NotificationPriority, NotificationType
from hiretrack.models.user import User
from hiretrack.utils.errors import NotFoundError
from hiretrack.utils.values import enum_value

logger = logging.getLogger(__name__)


class NotificationService:
    """Per-user mailbox. Another user's notification is reported as not found."""

    def __init__(self, db: Session):
        self.db = db

    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: Optional[str] = None,
        priority: Optional[str] = None,
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        triggered_by_id: Optional[str] = None,
    ) -> Notification:
        if self.db.get(User, user_id) is None:
            raise NotFoundError("User not found")

        notification = self.add(
            user_id,
            title,
            message,
            type=type,
            priority=priority,
            action_url=action_url,
            metadata=metadata,
            triggered_by_id=triggered_by_id,
        )
        self.db.commit()
        return notification

    def add(
        self,
        user_id: str,
        title: str,
        message: str,
        type: Optional[str] = None,
        priority: Optional[str] = None,
        action_url: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        triggered_by_id: Optional[str] = None,
    ) -> Notification:
        """Stage a notification in the caller's transaction without committing."""
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=enum_value(type) or NotificationType.SYSTEM_ANNOUNCEMENT.value,
            priority=enum_value(priority) or NotificationPriority.MEDIUM.value,
            action_url=action_url,
            extra=metadata,
            triggered_by_id=triggered_by_id,
            is_read=False,
        )
        self.db.add(notification)
        return notification

    def get_user_notifications(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> Dict[str, Any]:
        page = max(page, 1)
        limit = max(limit, 1)

        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.is_read.is_(False))

        total = query.count()
        notifications = (
            query.order_by(Notification.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return {
            "notifications": notifications,
            "total": total,
            "page": page,
            "total_pages": math.ceil(total / limit),
        }

    def get_unread_count(self, user_id: str) -> int:
        return (
            self.db.query(func.count(Notification.id))
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .scalar()
        )

    def mark_as_read(self, notification_id: str, user_id: str) -> Notification:
        notification = self._get_owned(notification_id, user_id)
        notification.is_read = True
        self.db.commit()
        return notification

    def mark_all_as_read(self, user_id: str) -> int:
        self.db.flush()
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        # Loaded instances are stale after a bulk UPDATE
        self.db.expire_all()
        self.db.commit()
        logger.info("Marked %s notifications read for user %s", updated, user_id)
        return updated

    def delete_notification(self, notification_id: str, user_id: str) -> None:
        notification = self._get_owned(notification_id, user_id)
        self.db.delete(notification)
        self.db.commit()

    def _get_owned(self, notification_id: str, user_id: str) -> Notification:
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if notification is None:
            raise NotFoundError("Notification not found")
        return notification

    # ===========================
    # EVENT HELPERS (staged, caller commits)
    # ===========================

    def notify_application_received(self, applicant_id: str, job_title: str) -> Notification:
        return self.add(
            applicant_id,
            "Application Received",
            f"Your application for {job_title} has been received and is under review.",
            type=NotificationType.APPLICATION_SUBMITTED,
        )

    def notify_new_application(self, hr_user_id: str, applicant_name: str, job_title: str) -> Notification:
        return self.add(
            hr_user_id,
            "New Application Received",
            f"{applicant_name} has applied for {job_title}.",
            type=NotificationType.APPLICATION_SUBMITTED,
        )

    def notify_application_status_changed(
        self, applicant_id: str, job_title: str, status: str, triggered_by_id: Optional[str] = None
    ) -> Notification:
        return self.add(
            applicant_id,
            "Application Status Update",
            f"Your application for {job_title} status has been updated to: {status}.",
            type=NotificationType.APPLICATION_STATUS_CHANGED,
            priority=NotificationPriority.HIGH,
            triggered_by_id=triggered_by_id,
        )

    def notify_interview_scheduled(self, applicant_id: str, job_title: str, scheduled_at) -> Notification:
        return self.add(
            applicant_id,
            "Interview Scheduled",
            f"An interview has been scheduled for {job_title} on {scheduled_at:%Y-%m-%d}.",
            type=NotificationType.INTERVIEW_SCHEDULED,
            priority=NotificationPriority.HIGH,
        )

    def notify_document_reviewed(self, uploader_id: str, document_name: str, status: str) -> Notification:
        return self.add(
            uploader_id,
            "Document Reviewed",
            f'Your document "{document_name}" has been {status.replace("_", " ")}.',
            type=NotificationType.DOCUMENT_REVIEWED,
        )

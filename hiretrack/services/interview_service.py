import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from hiretrack.models.application import JobApplication
from hiretrack.models.interview import Interview, InterviewStatus, InterviewType
from hiretrack.models.user import HR_ROLES, User
from hiretrack.services.lifecycle import INTERVIEW_LIFECYCLE
from hiretrack.services.notification_service import NotificationService
from hiretrack.utils.errors import ForbiddenError, NotFoundError, ValidationError
from hiretrack.utils.values import enum_value

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "title",
    "description",
    "type",
    "scheduled_at",
    "end_time",
    "location",
    "meeting_link",
    "notes",
    "interviewer_id",
})

# Columns that cannot be cleared; a null in an update leaves them untouched
REQUIRED_FIELDS = frozenset({"title", "type", "scheduled_at", "interviewer_id"})


class InterviewService:
    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications or NotificationService(db)

    # ===========================
    # SCHEDULING
    # ===========================

    def schedule_interview(
        self,
        job_application_id: str,
        interviewer_id: str,
        scheduled_by_id: str,
        scheduled_at: datetime,
        title: Optional[str] = None,
        description: Optional[str] = None,
        type: Optional[str] = None,
        end_time: Optional[datetime] = None,
        location: Optional[str] = None,
        meeting_link: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Interview:
        application = self.db.get(JobApplication, job_application_id)
        if application is None:
            raise NotFoundError("Job application not found")
        if self.db.get(User, interviewer_id) is None:
            raise NotFoundError("Interviewer not found")
        if end_time is not None and end_time <= scheduled_at:
            raise ValidationError("Interview end time must be after its start time")

        interview = Interview(
            job_application_id=application.id,
            interviewer_id=interviewer_id,
            scheduled_by_id=scheduled_by_id,
            scheduled_at=scheduled_at,
            end_time=end_time,
            title=title or f"Interview for {application.job.title}",
            description=description,
            type=enum_value(type) or InterviewType.VIDEO.value,
            location=location,
            meeting_link=meeting_link,
            notes=notes,
            status=InterviewStatus.SCHEDULED.value,
        )
        self.db.add(interview)
        self.notifications.notify_interview_scheduled(
            application.applicant_id, application.job.title, scheduled_at
        )
        self.db.commit()

        logger.info("Interview %s scheduled for application %s at %s", interview.id, application.id, scheduled_at)
        return interview

    def get_interview(self, interview_id: str) -> Interview:
        interview = self.db.get(Interview, interview_id)
        if interview is None:
            raise NotFoundError("Interview not found")
        return interview

    def get_all_interviews(self, status: Optional[str] = None) -> List[Interview]:
        query = self.db.query(Interview)
        if status:
            query = query.filter(Interview.status == enum_value(status))
        return query.order_by(Interview.scheduled_at.asc()).all()

    def get_interviewer_interviews(self, interviewer_id: str) -> List[Interview]:
        return (
            self.db.query(Interview)
            .filter(Interview.interviewer_id == interviewer_id)
            .order_by(Interview.scheduled_at.asc())
            .all()
        )

    def get_applicant_interviews(self, applicant_id: str) -> List[Interview]:
        return (
            self.db.query(Interview)
            .join(JobApplication, Interview.job_application_id == JobApplication.id)
            .filter(JobApplication.applicant_id == applicant_id)
            .order_by(Interview.scheduled_at.asc())
            .all()
        )

    def update_interview(self, interview_id: str, updates: Dict[str, Any]) -> Interview:
        interview = self.get_interview(interview_id)

        if "status" in updates:
            raise ValidationError("Interview status cannot be changed through update")
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown interview fields: {', '.join(sorted(unknown))}")
        if not updates:
            raise ValidationError("No fields to update")
        if INTERVIEW_LIFECYCLE.is_terminal(interview.status):
            raise ValidationError(f"Interview is {interview.status} and can no longer be changed")

        if updates.get("interviewer_id") and self.db.get(User, updates["interviewer_id"]) is None:
            raise NotFoundError("Interviewer not found")

        start = updates.get("scheduled_at") or interview.scheduled_at
        end = updates["end_time"] if "end_time" in updates else interview.end_time
        if end is not None and end <= start:
            raise ValidationError("Interview end time must be after its start time")

        moved = start != interview.scheduled_at
        if moved and interview.status == InterviewStatus.SCHEDULED.value:
            interview.status = INTERVIEW_LIFECYCLE.ensure(interview.status, InterviewStatus.RESCHEDULED)

        for field, value in updates.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(interview, field, enum_value(value))

        self.db.commit()
        if moved:
            logger.info("Interview %s moved to %s", interview.id, interview.scheduled_at)
        return interview

    # ===========================
    # OUTCOMES
    # ===========================

    def cancel_interview(self, interview_id: str, reason: Optional[str] = None) -> Interview:
        interview = self.get_interview(interview_id)
        interview.status = INTERVIEW_LIFECYCLE.ensure(interview.status, InterviewStatus.CANCELLED)

        line = f"Cancelled: {reason}" if reason else "Cancelled"
        interview.notes = f"{interview.notes}\n{line}" if interview.notes else line
        self.db.commit()

        logger.info("Interview %s cancelled", interview.id)
        return interview

    def add_feedback(
        self,
        interview_id: str,
        interviewer_id: str,
        rating: float,
        notes: Optional[str] = None,
        recommendation: Optional[str] = None,
    ) -> Interview:
        interview = self.get_interview(interview_id)
        if interview.interviewer_id != interviewer_id:
            raise ForbiddenError("Only the assigned interviewer can submit feedback")

        interview.status = INTERVIEW_LIFECYCLE.ensure(interview.status, InterviewStatus.COMPLETED)
        interview.feedback = {"notes": notes, "rating": rating, "recommendation": recommendation}
        interview.score = rating
        self.db.commit()

        logger.info("Interview %s completed with score %s", interview.id, rating)
        return interview

    def mark_no_show(self, interview_id: str) -> Interview:
        interview = self.get_interview(interview_id)
        interview.status = INTERVIEW_LIFECYCLE.ensure(interview.status, InterviewStatus.NO_SHOW)
        self.db.commit()
        return interview

    # ===========================
    # UPCOMING / STATS
    # ===========================

    def _upcoming_query(self):
        # Rescheduled interviews are excluded
        return self.db.query(Interview).filter(
            Interview.scheduled_at > datetime.utcnow(),
            Interview.status == InterviewStatus.SCHEDULED.value,
        )

    def get_upcoming_interviews(self, limit: Optional[int] = None) -> List[Interview]:
        query = self._upcoming_query().order_by(Interview.scheduled_at.asc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_upcoming_for_interviewer(self, interviewer_id: str) -> List[Interview]:
        return (
            self._upcoming_query()
            .filter(Interview.interviewer_id == interviewer_id)
            .order_by(Interview.scheduled_at.asc())
            .all()
        )

    def get_upcoming_for_applicant(self, applicant_id: str) -> List[Interview]:
        return (
            self._upcoming_query()
            .join(JobApplication, Interview.job_application_id == JobApplication.id)
            .filter(JobApplication.applicant_id == applicant_id)
            .order_by(Interview.scheduled_at.asc())
            .all()
        )

    def count_upcoming(self) -> int:
        return self._upcoming_query().count()

    def get_interview_statistics(self) -> Dict[str, int]:
        counts = dict(
            self.db.query(Interview.status, func.count(Interview.id)).group_by(Interview.status).all()
        )
        stats = {status.value: counts.get(status.value, 0) for status in InterviewStatus}
        stats["total"] = sum(counts.values())
        stats["upcoming"] = self.count_upcoming()
        return stats

    @staticmethod
    def can_view(interview: Interview, user: User) -> bool:
        if user.role in HR_ROLES or interview.interviewer_id == user.id:
            return True
        return interview.job_application.applicant_id == user.id

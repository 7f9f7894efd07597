import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from hiretrack.models.application import ApplicationStatus, JobApplication
from hiretrack.models.job import OPEN_STATES, Job
from hiretrack.models.user import User
from hiretrack.services.lifecycle import APPLICATION_LIFECYCLE
from hiretrack.services.notification_service import NotificationService
from hiretrack.utils.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hiretrack.utils.values import enum_value, naive_utc

logger = logging.getLogger(__name__)


class JobApplicationService:
    def __init__(self, db: Session, notifications: Optional[NotificationService] = None):
        self.db = db
        self.notifications = notifications or NotificationService(db)

    # ===========================
    # CREATE / READ
    # ===========================

    def create_application(
        self,
        job_id: str,
        applicant_id: str,
        cover_letter: Optional[str] = None,
        resume: Optional[str] = None,
        resume_url: Optional[str] = None,
        additional_documents: Optional[List[str]] = None,
        answers: Optional[Dict[str, Any]] = None,
    ) -> JobApplication:
        job = self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")

        applicant = self.db.get(User, applicant_id)
        if applicant is None:
            raise NotFoundError("Applicant not found")

        if job.status not in OPEN_STATES:
            raise ValidationError(f"This job is not accepting applications. Status: {job.status}")

        if self._find(job_id, applicant_id) is not None:
            raise ConflictError("Application already exists for this job and applicant")

        application = JobApplication(
            job_id=job.id,
            applicant_id=applicant.id,
            cover_letter=cover_letter,
            resume=resume,
            resume_url=resume_url,
            additional_documents=additional_documents,
            answers=answers,
            status=ApplicationStatus.SUBMITTED.value,
            submitted_at=datetime.utcnow(),
        )
        self.db.add(application)

        self.notifications.notify_application_received(applicant.id, job.title)
        if job.created_by_id != applicant.id:
            self.notifications.notify_new_application(
                job.created_by_id, applicant.full_name or applicant.email, job.title
            )

        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent submission for the same pair
            self.db.rollback()
            raise ConflictError("Application already exists for this job and applicant")

        logger.info("Application %s submitted for job %s by %s", application.id, job.id, applicant.id)
        return application

    def get_application(self, application_id: str) -> JobApplication:
        application = self.db.get(JobApplication, application_id)
        if application is None:
            raise NotFoundError("Application not found")
        return application

    def get_applications_by_job(
        self,
        job_id: str,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[JobApplication], int]:
        query = self.db.query(JobApplication).filter(JobApplication.job_id == job_id)
        if status:
            query = query.filter(JobApplication.status == enum_value(status))

        total = query.count()
        query = query.order_by(JobApplication.submitted_at.desc())
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        return query.all(), total

    def get_applications_by_applicant(self, applicant_id: str) -> List[JobApplication]:
        return (
            self.db.query(JobApplication)
            .options(joinedload(JobApplication.job))
            .filter(JobApplication.applicant_id == applicant_id)
            .order_by(JobApplication.submitted_at.desc())
            .all()
        )

    def search_applications(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        job_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[JobApplication]:
        query = (
            self.db.query(JobApplication)
            .join(User, JobApplication.applicant_id == User.id)
            .join(Job, JobApplication.job_id == Job.id)
        )

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(User.full_name.ilike(pattern), User.email.ilike(pattern), Job.title.ilike(pattern))
            )
        if status:
            query = query.filter(JobApplication.status == enum_value(status))
        if job_id:
            query = query.filter(JobApplication.job_id == job_id)
        if date_from:
            query = query.filter(JobApplication.submitted_at >= naive_utc(date_from))
        if date_to:
            query = query.filter(JobApplication.submitted_at <= naive_utc(date_to))

        return query.order_by(JobApplication.submitted_at.desc()).all()

    # ===========================
    # STATUS CHANGES
    # ===========================

    def update_application_status(
        self,
        application_id: str,
        status: str,
        notes: Optional[str] = None,
        reviewer_id: Optional[str] = None,
    ) -> JobApplication:
        application = self.get_application(application_id)
        self._apply_status(application, enum_value(status), notes, reviewer_id)
        self.db.commit()
        return application

    def withdraw_application(self, application_id: str, applicant_id: str) -> JobApplication:
        application = self.get_application(application_id)
        if application.applicant_id != applicant_id:
            raise ForbiddenError("You can only withdraw your own applications")

        previous = application.status
        application.status = APPLICATION_LIFECYCLE.ensure(application.status, ApplicationStatus.WITHDRAWN)
        application.withdrawn_at = datetime.utcnow()
        self.db.commit()

        logger.info("Application %s withdrawn (was %s)", application.id, previous)
        return application

    def bulk_update_applications(
        self,
        application_ids: Sequence[str],
        status: Optional[str] = None,
        notes: Optional[str] = None,
        reviewer_id: Optional[str] = None,
    ) -> List[JobApplication]:
        """Apply one status/notes change to many applications; all of them or none."""
        ids = list(dict.fromkeys(application_ids))
        if not ids:
            raise ValidationError("Application IDs are required")
        if status is None and notes is None:
            raise ValidationError("Nothing to update: provide a status and/or notes")

        applications = self.db.query(JobApplication).filter(JobApplication.id.in_(ids)).all()
        found = {application.id for application in applications}
        missing = [application_id for application_id in ids if application_id not in found]
        if missing:
            raise NotFoundError(
                f"Applications not found: {', '.join(missing)}", missing_ids=missing
            )

        target = enum_value(status) if status is not None else None
        try:
            for application in applications:
                if target is None:
                    application.notes = notes
                else:
                    self._apply_status(application, target, notes, reviewer_id)
            self.db.commit()
        except (SQLAlchemyError, ConflictError, ValidationError):
            self.db.rollback()
            raise

        logger.info("Bulk updated %s applications (status=%s)", len(applications), target)
        return applications

    def get_application_statistics(self, job_id: Optional[str] = None) -> Dict[str, int]:
        query = self.db.query(JobApplication.status, func.count(JobApplication.id))
        if job_id:
            query = query.filter(JobApplication.job_id == job_id)
        counts = dict(query.group_by(JobApplication.status).all())

        stats = {status.value: counts.get(status.value, 0) for status in ApplicationStatus}
        stats["total"] = sum(counts.values())
        return stats

    def _apply_status(
        self,
        application: JobApplication,
        target: str,
        notes: Optional[str],
        reviewer_id: Optional[str],
    ) -> None:
        if target == ApplicationStatus.WITHDRAWN.value:
            raise ValidationError("Applications can only be withdrawn by the applicant")

        if notes:
            application.notes = notes

        # Re-asserting the current status only stores the notes
        if target == application.status:
            return

        previous = application.status
        application.status = APPLICATION_LIFECYCLE.ensure(application.status, target)

        if target == ApplicationStatus.REVIEWED.value:
            application.reviewed_at = datetime.utcnow()
            application.reviewed_by_id = reviewer_id

        self.notifications.notify_application_status_changed(
            application.applicant_id,
            application.job.title,
            target,
            triggered_by_id=reviewer_id,
        )
        logger.info("Application %s moved %s -> %s", application.id, previous, target)

    def _find(self, job_id: str, applicant_id: str) -> Optional[JobApplication]:
        return (
            self.db.query(JobApplication)
            .filter(JobApplication.job_id == job_id, JobApplication.applicant_id == applicant_id)
            .first()
        )
